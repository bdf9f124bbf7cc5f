import logging
from functools import lru_cache
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings

from crud_template.domain.clock import DEFAULT_TIMEZONE

_config_logger = logging.getLogger(__name__)

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "CRUD Template API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["*"]

    # Database connection: DATABASE_URL wins over the individual DB_* parts
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_database: str = "crud_template"
    database_url: str | None = None
    db_schema: str = "sc_001"

    # Transient-failure retry policy
    db_max_retry_count: int = 3
    db_max_retry_delay: float = 30.0

    # Civil time zone used for every audit timestamp
    timezone: str = DEFAULT_TIMEZONE

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine SQL queries
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_services: str = "INFO"         # application services (CRUD audit trail)

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @field_validator("db_host", "db_user", "db_database", "db_schema")
    @classmethod
    def _require_value(cls, value: str, info: ValidationInfo) -> str:
        if not value.strip():
            raise ValueError(f"{info.field_name.upper()} must not be empty")
        return value

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone '{value}'") from exc
        return value

    @field_validator("db_max_retry_count")
    @classmethod
    def _non_negative_retries(cls, value: int) -> int:
        if value < 0:
            raise ValueError("DB_MAX_RETRY_COUNT must be >= 0")
        return value

    @property
    def sqlalchemy_url(self) -> str:
        """Sync-style SQLAlchemy URL; session.py converts it to its async driver."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_database}"
        )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    settings = Settings()
    _config_logger.debug("Settings loaded for environment '%s'", settings.app_env)
    return settings
