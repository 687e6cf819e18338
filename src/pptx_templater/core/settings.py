# src/pptx_templater/core/settings.py
import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the logger for this module
logger = logging.getLogger(__name__)

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="PPTX_TEMPLATER_",
        extra="ignore"
    )

    log_level: str = Field(default="INFO")
    debug: bool = Field(default=False)

    # Remove template rows left without data once a table has been filled
    prune_unused_rows: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"Invalid log level {value!r}, expected one of {', '.join(LOG_LEVELS)}")
        return value


# Instantiate settings upon module import
settings = Settings()
logger.debug(f"Settings loaded: log_level={settings.log_level}, prune_unused_rows={settings.prune_unused_rows}")
