import logging
import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Configuration for the SQLite database."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="DBDM_DATABASE_", extra="ignore"
    )

    path: str = Field("dbdm.sqlite", description="Path to the SQLite database file")
    timeout: float = Field(5.0, ge=0, description="Seconds to wait on a locked database")
    foreign_keys: bool = Field(True, description="Enable foreign key enforcement on connect")


class AppSettings(BaseSettings):
    """General application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="DBDM_", extra="ignore"
    )

    log_level: str = Field("INFO", description="Logging level")

    db: DatabaseSettings = Field(default_factory=DatabaseSettings)

    @property
    def log_level_value(self) -> int:
        """Return the numeric value of the log level."""
        return logging.getLevelName(self.log_level.upper())


@lru_cache
def get_settings() -> AppSettings:
    """
    Get application settings.
    If the DBDM_TEST_MODE environment variable is set, it returns an in-memory
    configuration suitable for testing, otherwise loads the configuration from
    the environment and the .env file.
    """
    if os.getenv("DBDM_TEST_MODE"):
        return AppSettings(
            log_level="DEBUG",
            db=DatabaseSettings(path=":memory:"),
        )
    return AppSettings()
