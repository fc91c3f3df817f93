"""
auth/errors.py -- Exception taxonomy for the session token lifecycle.

Every failure the codecs can produce is a SessionError subclass, so the
session gate can recover from all of them with a single except clause.

  ConfigurationError        -- key/secret missing or malformed. A deployment
                               defect, never a client defect.
  MalformedTokenError       -- structurally invalid artifact (bad base64,
                               truncated, non-numeric payload, missing claims).
  SignatureInvalidError     -- JWT signature or algorithm check failed.
  TokenExpiredError         -- well-formed and correctly signed but past exp.
  AuthenticationFailedError -- AES-GCM tag mismatch (tamper or wrong key).

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations


class SessionError(Exception):
    """Base class for all token lifecycle failures."""


class ConfigurationError(SessionError):
    pass


class MalformedTokenError(SessionError):
    pass


class SignatureInvalidError(SessionError):
    pass


class TokenExpiredError(SessionError):
    pass


class AuthenticationFailedError(SessionError):
    pass
