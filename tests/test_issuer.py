"""
tests/test_issuer.py -- Unit tests for credential pair issuance and cookie directives.

Coverage:
  - Pair expiry ordering (access < refresh) and the remember-me tier
  - Both tokens decode to the issuing user; uid claims are never shared
  - Session and logout directives carry the cookie policy
  - from_settings wires lifetimes, domain and the Secure flag
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from auth.identifiers import decode_user_id
from auth.issuer import ACCESS_COOKIE, REFRESH_COOKIE, CredentialIssuer
from auth.models import TokenClass
from core.config import Settings
from tests.helpers import ACCESS_TTL, ID_KEY, REFRESH_TTL_LONG, REFRESH_TTL_SHORT


def _expiry(issuer: CredentialIssuer, token_class: TokenClass, token: str):
    return issuer.codec.verify(token_class, token).expires_at


class TestIssueLoginPair:
    @pytest.mark.parametrize("remember", [False, True])
    def test_access_expires_before_refresh(self, issuer: CredentialIssuer, remember: bool) -> None:
        pair = issuer.issue_login_pair(123, remember)
        assert _expiry(issuer, TokenClass.ACCESS, pair.access) < _expiry(issuer, TokenClass.REFRESH, pair.refresh)

    def test_remember_extends_refresh_lifetime(self, issuer: CredentialIssuer) -> None:
        short = issuer.issue_login_pair(123, remember=False)
        long = issuer.issue_login_pair(123, remember=True)
        assert _expiry(issuer, TokenClass.REFRESH, long.refresh) > _expiry(issuer, TokenClass.REFRESH, short.refresh)

    def test_lifetimes_match_policy(self, issuer: CredentialIssuer) -> None:
        now = datetime.now(timezone.utc)
        pair = issuer.issue_login_pair(123, remember=True)
        access_left = _expiry(issuer, TokenClass.ACCESS, pair.access) - now
        refresh_left = _expiry(issuer, TokenClass.REFRESH, pair.refresh) - now
        assert abs(access_left.total_seconds() - ACCESS_TTL.total_seconds()) < 3
        assert abs(refresh_left.total_seconds() - REFRESH_TTL_LONG.total_seconds()) < 3

    def test_both_tokens_carry_user(self, issuer: CredentialIssuer) -> None:
        pair = issuer.issue_login_pair(42, remember=False)
        access_claims = issuer.codec.verify(TokenClass.ACCESS, pair.access)
        refresh_claims = issuer.codec.verify(TokenClass.REFRESH, pair.refresh)
        assert decode_user_id(access_claims.encrypted_id, ID_KEY) == 42
        assert decode_user_id(refresh_claims.encrypted_id, ID_KEY) == 42
        assert access_claims.encrypted_id != refresh_claims.encrypted_id

    def test_user_id_not_in_token_payload(self, issuer: CredentialIssuer) -> None:
        pair = issuer.issue_login_pair(987654321, remember=False)
        assert "987654321" not in pair.access
        assert "987654321" not in issuer.codec.verify(TokenClass.ACCESS, pair.access).encrypted_id


class TestDirectives:
    @pytest.mark.parametrize(
        "remember, refresh_ttl",
        [(False, REFRESH_TTL_SHORT), (True, REFRESH_TTL_LONG)],
    )
    def test_session_directives(self, issuer: CredentialIssuer, remember: bool, refresh_ttl) -> None:
        pair = issuer.issue_login_pair(7, remember)
        access, refresh = issuer.build_session_directives(pair, remember)

        assert (access.name, access.value) == (ACCESS_COOKIE, pair.access)
        assert (refresh.name, refresh.value) == (REFRESH_COOKIE, pair.refresh)
        assert access.max_age == int(ACCESS_TTL.total_seconds())
        assert refresh.max_age == int(refresh_ttl.total_seconds())
        for d in (access, refresh):
            assert d.path == "/"
            assert d.domain == "example.test"
            assert d.httponly is True
            assert d.samesite == "lax"
            assert d.secure is False
            assert d.expires is None

    def test_logout_directives(self, issuer: CredentialIssuer) -> None:
        directives = issuer.build_logout_directives()
        assert [d.name for d in directives] == [ACCESS_COOKIE, REFRESH_COOKIE]
        for d in directives:
            assert d.value == ""
            assert d.max_age == 0
            assert d.expires is not None and d.expires < datetime.now(timezone.utc)
            assert d.httponly is True
            assert d.path == "/"

    def test_empty_domain_is_omitted(self, codec) -> None:
        issuer = CredentialIssuer(codec, ID_KEY, cookie_domain="")
        assert issuer.build_access_directive("t").domain is None


class TestFromSettings:
    def _settings(self, **overrides) -> Settings:
        values = dict(
            debug=False,
            environment="production",
            cookie_domain="example.com",
            jwt_access_secret="a" * 40,
            jwt_refresh_secret="b" * 40,
            jwt_encode_id_secret="c" * 32,
            ttl_access=120,
            ttl_refresh_short=3600,
            ttl_refresh_long=7200,
        )
        values.update(overrides)
        return Settings(_env_file=None, **values)

    def test_production_sets_secure(self) -> None:
        issuer = CredentialIssuer.from_settings(self._settings())
        access, refresh = issuer.build_session_directives(issuer.issue_login_pair(1, True), True)
        assert access.secure and refresh.secure
        assert access.domain == "example.com"
        assert (access.max_age, refresh.max_age) == (120, 7200)

    @pytest.mark.parametrize("environment", ["local", "development"])
    def test_local_environments_not_secure(self, environment: str) -> None:
        issuer = CredentialIssuer.from_settings(self._settings(environment=environment))
        assert issuer.build_access_directive("t").secure is False
