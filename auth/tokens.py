"""
auth/tokens.py -- Class-scoped JWT signing and verification.

Security design decisions:
  JWT: python-jose with HS256. Each TokenClass (access, refresh) is signed
       with its own secret, so an access token never verifies as a refresh
       token and compromise of one secret does not allow forging the other.

  Claims: the token carries the *encrypted* user ID (see auth/identifiers.py)
       in the "uid" claim, plus iat, exp and a fixed iss. The user ID itself
       never appears in the token.

  Algorithm pinning: verification accepts only the HMAC family. A token
       whose header advertises "none" or an asymmetric algorithm is rejected
       before any claim is read (algorithm-substitution defence).

  Expiry vs. invalid: TokenExpiredError is raised only for a correctly signed
       token whose exp has passed. Everything else is SignatureInvalidError or
       MalformedTokenError. The session gate uses the distinction internally
       but never surfaces it to clients.

Layer rule: no imports from api/ or core/. Secrets arrive through the
TokenCodec constructor; this module never reads settings.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from auth.errors import ConfigurationError, MalformedTokenError, SignatureInvalidError, TokenExpiredError
from auth.models import ClaimSet, TokenClass, TokenPolicy

ISSUER = "session-gate"

_ALGORITHM = "HS256"
_HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]


class TokenCodec:
    """Signs and verifies ClaimSets, keyed by TokenClass.

    Usage:
        codec = TokenCodec({TokenClass.ACCESS: access_policy, TokenClass.REFRESH: refresh_policy})
        token = codec.issue(TokenClass.ACCESS, encrypted_id, expires_at)
        claims = codec.verify(TokenClass.ACCESS, token)
    """

    def __init__(self, policies: Mapping[TokenClass, TokenPolicy]) -> None:
        missing = [tc.value for tc in TokenClass if tc not in policies]
        if missing:
            raise ConfigurationError(f"no token policy configured for: {', '.join(missing)}")
        for token_class, policy in policies.items():
            if not policy.secret:
                raise ConfigurationError(f"signing secret for {token_class.value} tokens is empty")
        self._policies: dict[TokenClass, TokenPolicy] = dict(policies)

    def policy(self, token_class: TokenClass) -> TokenPolicy:
        return self._policies[token_class]

    def issue(self, token_class: TokenClass, encrypted_id: str, expires_at: datetime) -> str:
        """Sign a token for encrypted_id, valid until expires_at.

        iat is always stamped with the current time and iss with ISSUER.
        """
        payload = {
            "uid": encrypted_id,
            "iat": datetime.now(timezone.utc),
            "exp": expires_at,
            "iss": ISSUER,
        }
        try:
            return jwt.encode(payload, self._policies[token_class].secret, algorithm=_ALGORITHM)
        except JWTError as exc:
            raise ConfigurationError(f"failed to sign {token_class.value} token") from exc

    def verify(self, token_class: TokenClass, token: str) -> ClaimSet:
        """Verify token under the secret of token_class and return its claims.

        Raises TokenExpiredError, SignatureInvalidError or MalformedTokenError.
        """
        try:
            payload = jwt.decode(
                token,
                self._policies[token_class].secret,
                algorithms=_HMAC_ALGORITHMS,
                options={"verify_aud": False},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError(f"{token_class.value} token has expired") from exc
        except JWTError as exc:
            raise SignatureInvalidError(f"{token_class.value} token failed verification") from exc

        encrypted_id = payload.get("uid")
        exp = payload.get("exp")
        if not isinstance(encrypted_id, str) or not encrypted_id:
            raise MalformedTokenError("token is missing the uid claim")
        if not isinstance(exp, (int, float)):
            raise MalformedTokenError("token is missing the exp claim")
        iat = payload.get("iat")
        try:
            issued_at = datetime.fromtimestamp(iat if isinstance(iat, (int, float)) else exp, tz=timezone.utc)
            expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise MalformedTokenError("token timestamp is out of range") from exc
        return ClaimSet(
            encrypted_id=encrypted_id,
            issued_at=issued_at,
            expires_at=expires_at,
            issuer=str(payload.get("iss", "")),
        )
