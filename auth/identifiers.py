"""
auth/identifiers.py -- Reversible, randomized encryption of user IDs.

Tokens never carry the numeric user ID in clear. encode_user_id() wraps it
with AES-256-GCM under JWT_ENCODE_ID_SECRET:

    base64( nonce(12 bytes) || ciphertext || tag(16 bytes) )

A fresh nonce is drawn from os.urandom on every call, so two encodings of the
same ID are never equal and a captured token cannot be correlated with an
account by inspection. os.urandom is safe to call from concurrent requests.

Failure mapping:
  wrong key length            -> ConfigurationError
  bad base64 / shorter than   -> MalformedTokenError
  one nonce
  GCM tag mismatch            -> AuthenticationFailedError
  plaintext not an int64      -> MalformedTokenError

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import base64
import binascii
import os
import re

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from auth.errors import AuthenticationFailedError, ConfigurationError, MalformedTokenError

KEY_SIZE = 32
NONCE_SIZE = 12

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")


def _key_bytes(key: str | bytes) -> bytes:
    raw = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    if len(raw) != KEY_SIZE:
        raise ConfigurationError(f"encryption key must be {KEY_SIZE} bytes long for AES-256")
    return raw


def encode_user_id(user_id: int, key: str | bytes) -> str:
    """Encrypt user_id into an opaque base64 string."""
    aead = AESGCM(_key_bytes(key))
    nonce = os.urandom(NONCE_SIZE)
    ciphertext = aead.encrypt(nonce, str(int(user_id)).encode("ascii"), None)
    return base64.b64encode(nonce + ciphertext).decode("ascii")


def decode_user_id(token: str, key: str | bytes) -> int:
    """Recover the user ID from an encode_user_id() string."""
    aead = AESGCM(_key_bytes(key))
    try:
        raw = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedTokenError("encrypted identifier is not valid base64") from exc
    if len(raw) < NONCE_SIZE:
        raise MalformedTokenError("ciphertext too short")

    nonce, ciphertext = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
    try:
        plaintext = aead.decrypt(nonce, ciphertext, None)
    except InvalidTag as exc:
        raise AuthenticationFailedError("encrypted identifier failed authentication") from exc

    text = plaintext.decode("ascii", errors="replace")
    if not _DECIMAL.fullmatch(text):
        raise MalformedTokenError("failed to parse user ID")
    user_id = int(text)
    if not _INT64_MIN <= user_id <= _INT64_MAX:
        raise MalformedTokenError("user ID out of range")
    return user_id
