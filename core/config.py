"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for Session Gate happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. The
      FastAPI lifespan reads it once and hands explicit values to the auth
      components; request-handling code never reads settings directly.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_access_secret -> JWT_ACCESS_SECRET).

  @model_validator(mode="after"): cross-field validation of secrets and token
      lifetimes. Dev mode (DEBUG=true) generates missing secrets with a
      warning; production mode refuses to start without them.

Security notes:
  [S1] Signing secrets shorter than 32 chars are rejected. HS256 relies on key
       entropy -- a short key weakens every token.

  [S2] The access and refresh secrets must differ. Compromise of one class
       must not allow forging tokens of the other.

  [S3] JWT_ENCODE_ID_SECRET is an AES-256 key and must be exactly 32 bytes.

  [S4] TTL_ACCESS < TTL_REFRESH_SHORT < TTL_REFRESH_LONG, always.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
import secrets
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("sessiongate.config")

# Environments where cookies are allowed over plain HTTP.
_INSECURE_ENVIRONMENTS = frozenset({"local", "development"})

ID_KEY_BYTES = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. The model_validator enforces
    production-safety rules at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    environment: str = "local"
    log_level: str = "INFO"
    database_url: str = "sqlite:///sessiongate.db"

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    cookie_domain: str = ""
    # Comma-separated, e.g. "https://app.example.com,https://admin.example.com"
    cors_allowed_origins: str = "http://localhost:3000,http://localhost:5173"
    allowed_hosts: list[str] = ["localhost", "127.0.0.1", "*.localhost"]
    login_rate_limit: str = "10/minute"

    # ------------------------------------------------------------------
    # Token secrets -- empty string is the "not configured" sentinel
    # ------------------------------------------------------------------

    jwt_access_secret: str = ""
    jwt_refresh_secret: str = ""
    jwt_encode_id_secret: str = ""

    # ------------------------------------------------------------------
    # Token lifetimes (seconds)
    # ------------------------------------------------------------------

    ttl_access: int = 600
    ttl_refresh_short: int = 86400
    ttl_refresh_long: int = 604800

    # ------------------------------------------------------------------
    # Root account seeding -- skipped unless both are set
    # ------------------------------------------------------------------

    root_user: str = ""
    root_password: str = ""

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    @property
    def secure_cookies(self) -> bool:
        """True outside local/development -- cookies then require HTTPS."""
        return self.environment.lower() not in _INSECURE_ENVIRONMENTS

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secrets(self) -> "Settings":
        """Enforce the secret policy [S1][S2][S3].

        Dev mode (DEBUG=true): auto-generate any missing secret with a warning.
            Sessions will not survive restart -- acceptable for local dev.

        Production mode: refuse to start if any secret is missing.
        """
        generated = []
        if not self.jwt_access_secret:
            self.jwt_access_secret = self._generate("JWT_ACCESS_SECRET", secrets.token_hex(32))
            generated.append("JWT_ACCESS_SECRET")
        if not self.jwt_refresh_secret:
            self.jwt_refresh_secret = self._generate("JWT_REFRESH_SECRET", secrets.token_hex(32))
            generated.append("JWT_REFRESH_SECRET")
        if not self.jwt_encode_id_secret:
            # 16 random bytes as hex is exactly 32 ASCII bytes
            self.jwt_encode_id_secret = self._generate("JWT_ENCODE_ID_SECRET", secrets.token_hex(16))
            generated.append("JWT_ENCODE_ID_SECRET")
        if generated:
            logger.warning(
                "WARNING: Using auto-generated %s. Sessions will not persist across restarts.",
                ", ".join(generated),
            )

        if len(self.jwt_access_secret) < 32 or len(self.jwt_refresh_secret) < 32:
            raise ValueError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be at least 32 characters.")
        if self.jwt_access_secret == self.jwt_refresh_secret:
            raise ValueError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must be different.")
        if len(self.jwt_encode_id_secret.encode("utf-8")) != ID_KEY_BYTES:
            raise ValueError(f"JWT_ENCODE_ID_SECRET must be exactly {ID_KEY_BYTES} bytes (AES-256 key).")
        return self

    @model_validator(mode="after")
    def validate_lifetimes(self) -> "Settings":
        """Enforce TTL_ACCESS < TTL_REFRESH_SHORT < TTL_REFRESH_LONG [S4]."""
        if self.ttl_access <= 0:
            raise ValueError("TTL_ACCESS must be positive.")
        if not self.ttl_access < self.ttl_refresh_short < self.ttl_refresh_long:
            raise ValueError("Token lifetimes must satisfy TTL_ACCESS < TTL_REFRESH_SHORT < TTL_REFRESH_LONG.")
        return self

    def _generate(self, name: str, value: str) -> str:
        if not self.debug:
            raise ValueError(
                f"{name} is required in production mode. "
                "Set it in your environment or .env file. "
                "To run in development mode, set DEBUG=true."
            )
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
