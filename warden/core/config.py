"""Engine configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support; every variable is prefixed with WARDEN_ (for example
WARDEN_REDIS_HOST, WARDEN_PERMISSION_CACHE_TTL).
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment and .env.

    All settings have defaults; validate_cache rejects values
    that would leave the permission cache unusable.
    """

    # App
    app_name: str = "warden"
    debug: bool = False

    # Durable store (roles, permissions, role_has_permissions)
    database_url: str = "postgresql+asyncpg://localhost:5432/warden"
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # Backing cache store: Redis when enabled, otherwise in-process memory
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_socket_timeout: float = 5.0

    # Permission cache
    cache_prefix: str = "warden"
    permission_cache_ttl: int = 24 * 60 * 60  # 24 hours
    permission_store_timeout_seconds: float = 10.0

    # Teams: roles carry an optional team_id; None means global
    teams_enabled: bool = False
    team_header_name: str = "X-Team-ID"

    # Role names whose holders pass every check (before-policy)
    super_admin_roles: str = ""

    model_config = SettingsConfigDict(
        env_prefix="WARDEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_cache(self) -> "Settings":
        """Validate cache TTL, store timeout and cache prefix."""
        if self.permission_cache_ttl <= 0:
            raise ValueError(
                "permission_cache_ttl must be a positive number of seconds, "
                f"got: {self.permission_cache_ttl!r}"
            )
        if self.permission_store_timeout_seconds <= 0:
            raise ValueError(
                "permission_store_timeout_seconds must be positive, "
                f"got: {self.permission_store_timeout_seconds!r}"
            )
        if not self.cache_prefix:
            raise ValueError("cache_prefix must be a non-empty string")
        return self

    @property
    def super_admin_role_names(self) -> list[str]:
        """Parse comma-separated super_admin_roles into a list of names."""
        return [r.strip() for r in self.super_admin_roles.split(",") if r.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    In tests, call get_settings.cache_clear() before overriding env vars
    so the next get_settings() uses the new values.
    """
    return Settings()
