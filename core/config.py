"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for TokenGate happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET).

  @model_validator(mode="after"): Cross-field validation once every field is
      resolved. Implements the environment-conditional JWT_SECRET policy:
      development generates a random key with a warning, production refuses
      to start without one.

Security notes:
  The signing secret never falls back to a known string. A missing secret
  in production is a startup failure, not a silent default.

  Secrets shorter than 32 chars are rejected outright -- HS256 signing is only
  as strong as the key's entropy.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
import secrets
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("tokengate.config")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Every field has a default except the secret, whose absence is resolved by
    the model_validator below: generated in development, fatal in production.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    environment: Literal["development", "production"] = "production"
    # Empty string is the sentinel for "not configured".
    jwt_secret: str = ""

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # 24 hours, for both the JWT exp claim and the cookie max_age.
    token_expire_seconds: int = Field(default=24 * 60 * 60, gt=0)
    # bcrypt accepts 4..31; each step doubles the hashing cost.
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    cors_origins: list[str] = ["*"]
    host: str = "127.0.0.1"
    port: int = 4000

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def secure_cookies(self) -> bool:
        """Cookies carry the Secure flag only in production (HTTPS)."""
        return self.is_production

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_jwt_secret(self) -> "Settings":
        """Enforce the JWT_SECRET policy.

        Development: auto-generate a random key with a warning. Tokens will
            not survive a restart -- acceptable for local work.

        Production: refuse to start if JWT_SECRET is missing.

        Both: reject keys shorter than 32 characters.
        """
        if not self.jwt_secret:
            if not self.is_production:
                self.jwt_secret = secrets.token_hex(32)
                logger.warning("Using auto-generated JWT_SECRET. Tokens will not persist across restarts.")
            else:
                raise ValueError(
                    "JWT_SECRET is required in production mode. "
                    "Set JWT_SECRET in your environment or .env file. "
                    "To run in development mode, set ENVIRONMENT=development."
                )
        if len(self.jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between cases that need
    different environment variables.
    """
    return Settings()
