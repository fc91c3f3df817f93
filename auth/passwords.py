"""
auth/passwords.py -- Password hashing and credential checks.

Passwords: bcrypt directly (no passlib wrapper). Bcrypt's cost factor makes
brute force on low-entropy secrets expensive. The _DUMMY_HASH constant
enables timing equalization in authenticate_user() so response time does not
reveal whether an email is registered [C1].

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import bcrypt

from auth.models import User

if TYPE_CHECKING:
    from auth.store import UserStore

logger = logging.getLogger("sessiongate.accounts")


class RegistrationError(Exception):
    """Registration could not complete for a reason other than bad input."""


def hash_password(plain: str) -> str:
    """Return a bcrypt hash of the given plaintext password.

    bcrypt truncates input beyond 72 bytes; the API layer caps password
    length well below that.
    """
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Corrupt or non-bcrypt hash in the store
        return False


# Computed once at import so the first login is not measurably slower.
_DUMMY_HASH: str = hash_password("sessiongate_timing_dummy")


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Check an email/password login with timing equalization [C1].

    Always runs bcrypt whether or not the user exists:
    - Unknown email: bcrypt runs against _DUMMY_HASH.
    - Wrong password: bcrypt runs against the real hash.

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(email)
    if user is None or not user.hashed_password:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def register_user(store: UserStore, display_name: str, email: str, password: str) -> User:
    """Create an account with the default role and return it.

    Raises RegistrationError if no default role is configured, and lets
    sqlalchemy.exc.IntegrityError propagate for a duplicate email.
    """
    role = store.get_default_role()
    if role is None or role.id is None:
        logger.error("registration failed: no default role configured")
        raise RegistrationError("failed to create user")

    user = User(
        email=email,
        display_name=display_name,
        role_id=role.id,
        hashed_password=hash_password(password),
    )
    user.id = store.create_user(user)
    logger.info("registered new account")
    return user


ROOT_ROLE = "super-admin"
ROOT_DISPLAY_NAME = "Root Administrator"


def seed_root_user(store: UserStore, email: str, password: str) -> User | None:
    """Create the super-admin account if it does not exist yet. Idempotent.

    Returns the created User, or None when seeding was skipped (email or
    password not configured, or the account already exists).
    Raises RegistrationError if the super-admin role is missing.
    """
    if not email or not password:
        return None
    if store.get_by_email(email) is not None:
        logger.info("root user already exists, skipping")
        return None

    role = store.get_role_by_name(ROOT_ROLE)
    if role is None or role.id is None:
        raise RegistrationError(f"role {ROOT_ROLE!r} is not seeded")

    user = User(
        email=email,
        display_name=ROOT_DISPLAY_NAME,
        role_id=role.id,
        hashed_password=hash_password(password),
    )
    user.id = store.create_user(user)
    logger.info("root user created (role=%s)", ROOT_ROLE)
    return user
