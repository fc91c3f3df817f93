"""
auth/gate.py -- Per-request session decision: admit, rotate, or reject.

authenticate() is a pure function of the two cookie values and the clock:

  1. A non-empty access token that verifies and decodes -> Admitted.
     Any failure here (expired, forged, corrupt uid) falls through to 2.
  2. No refresh token                                   -> Rejected.
  3. Refresh token fails verification                   -> Rejected.
  4. Refresh token's uid fails to decode                -> Rejected.
  5. Mint a new access token; failure                   -> Rejected.
  6. Admitted with one access-cookie directive.

Rejection reasons are uniform ("unauthenticated") so a client cannot tell an
expired refresh token from a forged one. The gate never raises and never
re-issues a refresh token: the refresh token's own exp bounds the session.

The step-1 fallthrough on a corrupt access uid is deliberate leniency -- a
malformed access cookie alone never rejects a request that carries a valid
refresh token.
"""

from __future__ import annotations

import logging

from auth.errors import ConfigurationError, SessionError
from auth.identifiers import decode_user_id
from auth.issuer import CredentialIssuer
from auth.models import Admitted, Rejected, TokenClass

logger = logging.getLogger("sessiongate.gate")


class SessionGate:
    def __init__(self, issuer: CredentialIssuer) -> None:
        self.issuer = issuer

    def _resolve(self, token_class: TokenClass, token: str) -> int:
        claims = self.issuer.codec.verify(token_class, token)
        return decode_user_id(claims.encrypted_id, self.issuer.id_key)

    def authenticate(self, access: str | None, refresh: str | None) -> Admitted | Rejected:
        """Decide whether a request bearing these cookies is authenticated."""
        if access:
            try:
                return Admitted(user_id=self._resolve(TokenClass.ACCESS, access))
            except SessionError as exc:
                logger.debug("access token not usable (%s); trying refresh", type(exc).__name__)

        if not refresh:
            return Rejected()

        try:
            user_id = self._resolve(TokenClass.REFRESH, refresh)
        except SessionError as exc:
            logger.debug("refresh token rejected (%s)", type(exc).__name__)
            return Rejected()

        try:
            token = self.issuer.issue_access_token(user_id)
        except ConfigurationError:
            logger.error("failed to mint rotated access token", exc_info=True)
            return Rejected()

        logger.info("access token rotated from refresh token")
        return Admitted(user_id=user_id, directive=self.issuer.build_access_directive(token))
