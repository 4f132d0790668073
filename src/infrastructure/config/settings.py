"""Application settings.

Values come from environment variables, optionally loaded from a ``.env``
file found in the working directory or one of its parents.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def find_env_file(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` looking for a ``.env`` file."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


ENV_FILE_PATH = find_env_file()


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE_PATH,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./ballotforge.db",
        description="SQLAlchemy URL; postgresql:// is upgraded to asyncpg",
    )
    sql_echo: bool = False

    environment: str = "development"
    log_level: str = "INFO"
    log_json: bool = False

    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    media_upload_root: str = "ballotforge"
    media_upload_timeout: float = 30.0

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def get_database_url(self) -> str:
        """Database URL with the async driver for PostgreSQL."""
        url = self.database_url
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if url.startswith("postgres://"):
            return url.replace("postgres://", "postgresql+asyncpg://", 1)
        return url


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Drop the cache and re-read the environment."""
    get_settings.cache_clear()
    return get_settings()
