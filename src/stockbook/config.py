"""Configuration management for stockbook.

Settings are read with pydantic-settings from environment variables prefixed
with ``STOCKBOOK_`` or from a ``.env`` file in the working directory.

Environment Variables:
    STOCKBOOK_STOCK_MINIMUM: Global minimum stock threshold (default: 10)
    STOCKBOOK_STOCK_IDEAL: Ideal stock level, informational (default: 50)
    STOCKBOOK_STOCK_MAXIMUM: Global maximum stock threshold (default: 100)
    STOCKBOOK_INFERENCE_SAMPLE_ROWS: Rows sampled per column on import (default: 10)
    STOCKBOOK_DAILY_CONSUMPTION: Units consumed per day for days-of-stock (default: 10)
    STOCKBOOK_MOVEMENT_HISTORY_LIMIT: Movements kept in the ledger (default: 100)
    STOCKBOOK_LOG_LEVEL: Logging level (default: INFO)
    STOCKBOOK_GOOGLE_SERVICE_ACCOUNT_FILE: Service account key for Sheets sync
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from stockbook.analytics.stock import Thresholds


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Example .env file:
        STOCKBOOK_STOCK_MINIMUM=5
        STOCKBOOK_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="STOCKBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    stock_minimum: float = Field(default=10, ge=0)
    """Products below this quantity are classified low."""

    stock_ideal: float = Field(default=50, ge=0)
    """Target quantity. Shown to users, not used for classification."""

    stock_maximum: float = Field(default=100, ge=0)
    """Products at or above this quantity are classified high."""

    inference_sample_rows: int = Field(default=10, ge=1)
    """Data rows inspected per column when inferring its kind on import."""

    daily_consumption: float = Field(default=10.0, gt=0)
    """Average units consumed per day, used for the days-of-stock estimate."""

    movement_history_limit: int = Field(default=100, ge=1)
    """Maximum number of movements retained by the ledger."""

    log_level: str = "INFO"
    """Level for the ``stockbook`` logger."""

    google_service_account_file: Optional[str] = None
    """Path to a service account key; gspread's default location when unset."""

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @model_validator(mode="after")
    def validate_thresholds(self) -> "Settings":
        if self.stock_minimum > self.stock_maximum:
            raise ValueError("stock_minimum must not exceed stock_maximum")
        return self

    def thresholds(self) -> Thresholds:
        """Global stock thresholds as an analytics value."""
        return Thresholds(
            minimum=self.stock_minimum,
            ideal=self.stock_ideal,
            maximum=self.stock_maximum,
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


def reset_settings() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
