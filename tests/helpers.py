"""
tests/helpers.py -- Fixed keys and token helpers shared by the test modules.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from auth.identifiers import encode_user_id
from auth.issuer import CredentialIssuer
from auth.models import TokenClass

ID_KEY = b"0123456789abcdef0123456789abcdef"
ACCESS_SECRET = "access-secret-for-tests-0123456789abcdef"
REFRESH_SECRET = "refresh-secret-for-tests-0123456789abcdef"

ACCESS_TTL = timedelta(seconds=60)
REFRESH_TTL_SHORT = timedelta(minutes=5)
REFRESH_TTL_LONG = timedelta(hours=1)


def mint(issuer: CredentialIssuer, token_class: TokenClass, user_id: int, expires_in: timedelta) -> str:
    """Sign a token for user_id that expires expires_in from now (negative = already expired)."""
    return issuer.codec.issue(
        token_class,
        encode_user_id(user_id, issuer.id_key),
        datetime.now(timezone.utc) + expires_in,
    )


def set_cookie_headers(resp) -> dict[str, str]:
    """Map cookie name -> full Set-Cookie header for a TestClient response."""
    headers = {}
    for h in resp.headers.get_list("set-cookie"):
        name = h.split("=", 1)[0]
        headers[name] = h
    return headers


def cookie_value(header: str) -> str:
    return header.split(";", 1)[0].split("=", 1)[1].strip('"')
