"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for AuthGate happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. secret_key -> SECRET_KEY). Type coercion and validation are built in.

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment. Missing signing or provider credentials
      raise ConfigurationMissing, which pydantic does not wrap, so the error
      escapes get_settings() and the ASGI app never finishes importing.

Security notes:
  [M6] SECRET_KEY shorter than 32 chars is rejected outright. HS256 token
       signing relies on key entropy -- a short key weakens every token.

  [M7] There is no fallback key. A process that generated its own key would
       issue tokens no other instance (or the next restart) can verify.

Layer rule: core/ is the kernel. This module may not import from api/, web/,
auth/, or client/.
"""

import logging
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("authgate.config")


class ConfigurationMissing(RuntimeError):
    """Required secret or provider credential absent at startup.

    Deliberately not a ValueError: pydantic converts ValueError raised inside
    validators into ValidationError, while other exceptions propagate as-is.
    Callers see this exact type.
    """


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Only the three secrets are required. Everything else has the reference
    default so Settings() can be built in tests by exporting just those.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured".
    secret_key: str = ""
    allowed_hosts: list[str] = ["localhost", "127.0.0.1", "*.localhost"]

    # ------------------------------------------------------------------
    # Token issuance
    # ------------------------------------------------------------------

    token_issuer: str = "myapi.com"
    token_audience: str = "myapi.com"
    token_expire_days: int = 7
    default_role: str = "User"
    # Accepted credentials for POST /api/v1/user/login. JSON list in env,
    # e.g. ALLOWED_USERS='["Prerak"]'.
    allowed_users: list[str] = ["Prerak"]

    secure_cookies: bool = False

    # ------------------------------------------------------------------
    # Facebook login (required -- no provider means no web login)
    # ------------------------------------------------------------------

    facebook_app_id: str = ""
    facebook_app_secret: str = ""
    facebook_api_version: str = "v19.0"

    # ------------------------------------------------------------------
    # Rate limiting
    # ------------------------------------------------------------------

    login_rate_limit: str = "10/minute"

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_required_secrets(self) -> "Settings":
        """Refuse to build Settings without signing and provider credentials [M7].

        SECRET_KEY, FACEBOOK_APP_ID and FACEBOOK_APP_SECRET must all be
        injected. The message names the variables, never their values.
        SECRET_KEY must also be at least 32 characters [M6].
        """
        missing = [
            name
            for name, value in (
                ("SECRET_KEY", self.secret_key),
                ("FACEBOOK_APP_ID", self.facebook_app_id),
                ("FACEBOOK_APP_SECRET", self.facebook_app_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationMissing(
                f"Missing required configuration: {', '.join(missing)}. "
                "Set them in your environment or .env file."
            )
        if len(self.secret_key) < 32:
            raise ConfigurationMissing("SECRET_KEY must be at least 32 characters.")
        if self.token_expire_days <= 0:
            raise ConfigurationMissing("TOKEN_EXPIRE_DAYS must be positive.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    Uses lru_cache so Settings() is instantiated exactly once -- at first call.
    All modules should call get_settings() rather than constructing Settings() directly.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    settings = Settings()
    logger.info(
        "Settings loaded (issuer=%s, audience=%s, expire_days=%d, allowed_users=%d)",
        settings.token_issuer,
        settings.token_audience,
        settings.token_expire_days,
        len(settings.allowed_users),
    )
    return settings
