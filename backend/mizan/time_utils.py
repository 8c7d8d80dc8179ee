"""
Datetime conventions: the database holds naive datetimes that are UTC,
and the wire format is ISO-8601 with a trailing 'Z'.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _naive_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    "2026-03-01"              -> 2026-03-01 00:00 (UTC)
    "2026-03-01T10:30"        -> naive input is taken as UTC
    "2026-03-01T10:30:00Z"    -> offset stripped after conversion
    "2026-03-01T12:30+02:00"  -> 2026-03-01 10:30

    None or blank gives None; anything else unparseable raises ValueError.
    """
    text = (value or "").strip()
    if not text:
        return None
    if text[-1] in "zZ":
        text = f"{text[:-1]}+00:00"
    return _naive_utc(datetime.fromisoformat(text))


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """Whole-second ISO-8601 with 'Z'; naive values are already UTC."""
    if dt is None:
        return None
    return _naive_utc(dt).replace(microsecond=0).isoformat() + "Z"


def year_bounds(year: int) -> tuple[datetime, datetime]:
    """[Jan 1 of year, Jan 1 of year + 1) as UTC-naive datetimes."""
    return datetime(year, 1, 1), datetime(year + 1, 1, 1)
