"""
Service configuration from environment variables using Pydantic BaseSettings.

All configuration values are loaded from environment variables (or a
``.env`` file) at startup. No hardcoded hosts or credentials.

CHANGELOG:
- 2026-10-06: Add DB_POOL_SIZE and DB_MAX_OVERFLOW (STORY-010)
- 2026-10-02: Add MAX_BATCH_SIZE and LOG_LEVEL (STORY-006)
- 2026-09-28: Initial creation (STORY-001)

TODO:
- None
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL: PostgreSQL connection string (asyncpg).
        DB_ECHO: Echo emitted SQL to the log.
        DB_POOL_SIZE: Persistent connections kept in the pool.
        DB_MAX_OVERFLOW: Extra connections opened under load beyond the pool.
        LOG_LEVEL: Root logging level name.
        MAX_BATCH_SIZE: Maximum number of records accepted per batch request.
    """

    DATABASE_URL: str
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = Field(default=5, ge=1)
    DB_MAX_OVERFLOW: int = Field(default=10, ge=0)
    LOG_LEVEL: str = "INFO"
    MAX_BATCH_SIZE: int = 1000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("LOG_LEVEL")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Normalise LOG_LEVEL to upper case and reject unknown names."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a logging level name (got: {v!r})")
        return level

    @field_validator("MAX_BATCH_SIZE")
    @classmethod
    def max_batch_size_must_be_valid(cls, v: int) -> int:
        """Validate batch size limit is between 1 and 10000."""
        if v < 1 or v > 10000:
            raise ValueError("MAX_BATCH_SIZE must be >= 1 and <= 10000")
        return v


def get_settings() -> Settings:
    """Create and return a Settings instance.

    Returns:
        Settings: Validated configuration from environment variables.
    """
    return Settings()
