from __future__ import annotations

import uuid


def new_id() -> str:
    """Globally unique primary key (UUID4, canonical string form)."""
    return str(uuid.uuid4())
