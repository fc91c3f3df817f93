"""
asgi.py -- ASGI entry point for Session Gate.

Run with:  uvicorn asgi:app --reload

Importing api.main loads and validates Settings; a missing or malformed
secret fails here, before the server accepts a connection.
"""

from api.main import app

__all__ = ["app"]
