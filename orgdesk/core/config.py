"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Every field has a default so the cache layer and
tests can load settings without a populated environment; the SQL
engine checks DATABASE_URL lazily on first use.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CACHE_BACKENDS = ("redis", "memory", "none")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "orgdesk"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (postgresql+asyncpg://... in production, sqlite+aiosqlite://... locally)
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # CORS
    allowed_origins: str = "http://localhost:3000"

    # Cache backend: "redis", "memory" (single process) or "none" (disabled)
    cache_backend: str = "redis"
    cache_namespace: str = "cache"
    # Upper bound for a single cache round trip; slower calls count as a miss.
    cache_operation_timeout: float = 0.25
    # Log every cache HIT/MISS/SET/DELETE at DEBUG without enabling global debug.
    cache_log_hits: bool = False

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_max_connections: int = 10

    # Entity TTLs (seconds). Reference data lives long, activity data short.
    cache_ttl_organization: int = 3600
    cache_ttl_workspace: int = 1800
    cache_ttl_user: int = 1800
    cache_ttl_staff: int = 1800
    cache_ttl_department: int = 3600
    cache_ttl_attendance: int = 300
    cache_ttl_leave_request: int = 600
    cache_ttl_project: int = 1800
    cache_ttl_task: int = 600
    cache_ttl_report: int = 600
    cache_ttl_report_template: int = 3600
    cache_ttl_document: int = 1800
    cache_ttl_notification: int = 300
    cache_ttl_invitation: int = 1800

    # Aggregate TTLs (backstop for a missed invalidation path)
    cache_ttl_unread_count: int = 60
    cache_ttl_today_attendance: int = 120
    cache_ttl_recent_attendance: int = 300
    cache_ttl_department_list: int = 3600
    cache_ttl_task_summary: int = 120
    cache_ttl_dashboard: int = 300

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_cache(self) -> "Settings":
        """Validate cache backend, timeout and TTLs."""
        if self.cache_backend not in CACHE_BACKENDS:
            raise ValueError(
                f"cache_backend must be one of {', '.join(CACHE_BACKENDS)}, "
                f"got: {self.cache_backend!r}"
            )
        if self.cache_operation_timeout <= 0:
            raise ValueError("cache_operation_timeout must be positive")
        for name, value in self.model_dump().items():
            if name.startswith("cache_ttl_") and value <= 0:
                raise ValueError(f"{name.upper()} must be a positive number of seconds")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    In tests, call get_settings.cache_clear() before overriding env vars so
    the next get_settings() uses the new values.
    """
    return Settings()
