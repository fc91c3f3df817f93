"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, near-zero logic). Dataclasses own
domain shape; codecs, the gate, stores and routes do the work.

Token-side types are frozen: they are created once per issuance or request
and shared freely between threads without synchronization.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

REASON_UNAUTHENTICATED = "unauthenticated"


# ---------------------------------------------------------------------------
# Storage entities
# ---------------------------------------------------------------------------


@dataclass
class Role:
    """A named role. Exactly one role is flagged is_default; registration
    assigns it to every new account."""

    name: str
    id: int | None = None
    is_default: bool = False
    description: str | None = None


@dataclass
class User:
    """Represents an account known to the storage layer.

    hashed_password is the bcrypt hash. It is populated by the store so
    authenticate_user() can verify it, and never leaves the API layer.
    """

    email: str
    display_name: str
    role_id: int
    id: int | None = None
    hashed_password: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


# ---------------------------------------------------------------------------
# Token lifecycle
# ---------------------------------------------------------------------------


class TokenClass(str, Enum):
    """The two token classes. Each is bound to its own TokenPolicy."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenPolicy:
    """Signing secret and validity policy for one TokenClass.

    extended_lifetime is the "remember me" tier; only refresh tokens have one.
    """

    secret: str
    lifetime: timedelta
    extended_lifetime: timedelta | None = None

    def lifetime_for(self, remember: bool) -> timedelta:
        if remember and self.extended_lifetime is not None:
            return self.extended_lifetime
        return self.lifetime


@dataclass(frozen=True)
class ClaimSet:
    """The verified payload of a signed token."""

    encrypted_id: str
    issued_at: datetime
    expires_at: datetime
    issuer: str


@dataclass(frozen=True)
class CredentialPair:
    access: str
    refresh: str
    remember: bool = False


@dataclass(frozen=True)
class CookieDirective:
    """An instruction to the client to store or overwrite one session cookie.

    httponly is always True and samesite is always "lax"; they are fields so
    the response writer does not have to know the policy.
    """

    name: str
    value: str
    max_age: int
    domain: str | None
    secure: bool
    path: str = "/"
    httponly: bool = True
    samesite: str = "lax"
    expires: datetime | None = None


# ---------------------------------------------------------------------------
# Gate outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Admitted:
    """The request is authenticated as user_id.

    directive is set only when the access token was rotated; the caller must
    write it onto the response that this request produces.
    """

    user_id: int
    directive: CookieDirective | None = None

    @property
    def rotated(self) -> bool:
        return self.directive is not None


@dataclass(frozen=True)
class Rejected:
    reason: str = REASON_UNAUTHENTICATED
