# backend/wsgi.py
from mizan import create_app

app = create_app()
