"""Configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_PHOTO_SIZE = 1048576


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # adb connection
    adb_path: str = Field(default="adb", alias="ADB_PATH")
    device_serial: str | None = Field(default=None, alias="ANDROID_SERIAL")
    adb_timeout: float = Field(default=30.0, alias="ADB_TIMEOUT")

    # Default account for saved contacts (falls back to device accounts)
    account_type: str | None = Field(default=None, alias="CONTACTS_ACCOUNT_TYPE")
    account_name: str | None = Field(default=None, alias="CONTACTS_ACCOUNT_NAME")

    # Photo loading
    max_photo_size: int = Field(default=MAX_PHOTO_SIZE, alias="MAX_PHOTO_SIZE", gt=0)
    http_timeout: float = Field(default=30.0, alias="HTTP_TIMEOUT")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    # Account authenticator redirect target
    host_package: str | None = Field(default=None, alias="HOST_PACKAGE")
    entry_activity: str = Field(default=".MainActivity", alias="ENTRY_ACTIVITY")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
