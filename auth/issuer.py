"""
auth/issuer.py -- Credential pair issuance and cookie directives.

CredentialIssuer mints access/refresh pairs at login and registration, mints
single access tokens for the session gate's rotation path, and builds the
cookie directives that tell the client what to store.

Cookie policy (both cookies):
  httponly=True: scripts can never read session cookies (XSS mitigation).
  samesite="lax": sent on same-site navigations and top-level GETs, not on
      cross-site POSTs -- CSRF mitigation for most cases.
  secure: only sent over HTTPS outside local/development environments.
  path="/", domain=COOKIE_DOMAIN (omitted when empty).
  max_age: matches the token lifetime so cookie and token expire together.

The refresh tier ("remember me" or not) is chosen once here and baked into
both the token's exp and the cookie's max_age.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from starlette.responses import Response

from auth.identifiers import encode_user_id
from auth.models import CookieDirective, CredentialPair, TokenClass, TokenPolicy
from auth.tokens import TokenCodec
from core.config import Settings

ACCESS_COOKIE = "access"
REFRESH_COOKIE = "refresh"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class CredentialIssuer:
    """Stateless after construction; safe to share across concurrent requests."""

    def __init__(
        self,
        codec: TokenCodec,
        id_key: str | bytes,
        cookie_domain: str = "",
        secure_cookies: bool = True,
    ) -> None:
        self.codec = codec
        self.id_key = id_key
        self.cookie_domain = cookie_domain or None
        self.secure_cookies = secure_cookies

    @classmethod
    def from_settings(cls, settings: Settings) -> CredentialIssuer:
        """Build the issuer (and its TokenCodec) from validated Settings."""
        codec = TokenCodec(
            {
                TokenClass.ACCESS: TokenPolicy(
                    secret=settings.jwt_access_secret,
                    lifetime=timedelta(seconds=settings.ttl_access),
                ),
                TokenClass.REFRESH: TokenPolicy(
                    secret=settings.jwt_refresh_secret,
                    lifetime=timedelta(seconds=settings.ttl_refresh_short),
                    extended_lifetime=timedelta(seconds=settings.ttl_refresh_long),
                ),
            }
        )
        return cls(
            codec,
            settings.jwt_encode_id_secret,
            cookie_domain=settings.cookie_domain,
            secure_cookies=settings.secure_cookies,
        )

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def _mint(self, token_class: TokenClass, user_id: int, lifetime: timedelta) -> str:
        # A fresh encryption per token: access and refresh never share a uid claim.
        encrypted_id = encode_user_id(user_id, self.id_key)
        return self.codec.issue(token_class, encrypted_id, datetime.now(timezone.utc) + lifetime)

    def issue_access_token(self, user_id: int) -> str:
        return self._mint(TokenClass.ACCESS, user_id, self.codec.policy(TokenClass.ACCESS).lifetime)

    def issue_login_pair(self, user_id: int, remember: bool) -> CredentialPair:
        """Mint an access token and a refresh token of the requested tier.

        Raises ConfigurationError if the ID key or a signing secret is unusable.
        """
        refresh_lifetime = self.codec.policy(TokenClass.REFRESH).lifetime_for(remember)
        return CredentialPair(
            access=self.issue_access_token(user_id),
            refresh=self._mint(TokenClass.REFRESH, user_id, refresh_lifetime),
            remember=remember,
        )

    # ------------------------------------------------------------------
    # Cookie directives
    # ------------------------------------------------------------------

    def _directive(self, name: str, value: str, max_age: int, expires: datetime | None = None) -> CookieDirective:
        return CookieDirective(
            name=name,
            value=value,
            max_age=max_age,
            domain=self.cookie_domain,
            secure=self.secure_cookies,
            expires=expires,
        )

    def build_access_directive(self, token: str) -> CookieDirective:
        lifetime = self.codec.policy(TokenClass.ACCESS).lifetime
        return self._directive(ACCESS_COOKIE, token, int(lifetime.total_seconds()))

    def build_session_directives(
        self, pair: CredentialPair, remember: bool
    ) -> tuple[CookieDirective, CookieDirective]:
        refresh_lifetime = self.codec.policy(TokenClass.REFRESH).lifetime_for(remember)
        return (
            self.build_access_directive(pair.access),
            self._directive(REFRESH_COOKIE, pair.refresh, int(refresh_lifetime.total_seconds())),
        )

    def build_logout_directives(self) -> tuple[CookieDirective, CookieDirective]:
        """Overwrite both cookies with empty values that expire immediately.

        Works whether or not the client ever held a valid session. Tokens
        already captured elsewhere stay valid until their own exp -- there is
        no server-side revocation list.
        """
        return (
            self._directive(ACCESS_COOKIE, "", 0, expires=_EPOCH),
            self._directive(REFRESH_COOKIE, "", 0, expires=_EPOCH),
        )


# ---------------------------------------------------------------------------
# Cookie helper
# ---------------------------------------------------------------------------


def apply_directives(response: Response, *directives: CookieDirective) -> None:
    """Write cookie directives onto a FastAPI/Starlette response as Set-Cookie headers."""
    for d in directives:
        response.set_cookie(
            d.name,
            value=d.value,
            max_age=d.max_age,
            expires=d.expires,
            path=d.path,
            domain=d.domain,
            secure=d.secure,
            httponly=d.httponly,
            samesite=d.samesite,
        )
