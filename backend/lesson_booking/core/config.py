# backend/lesson_booking/core/config.py
from decimal import Decimal
import logging
import os
from typing import List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import SLOT_INTERVAL_MINUTES

logger = logging.getLogger(__name__)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


class Settings(BaseSettings):
    environment: str = Field(default="development", description="Deployment environment name")
    is_testing: bool = Field(default_factory=is_running_tests)

    # Database
    database_url: str = Field(
        default="sqlite:///./lesson_booking.db",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = False
    sqlite_busy_timeout_seconds: float = Field(
        default=30.0,
        description="How long a SQLite writer waits for the database lock",
    )

    # Logging
    log_level: str = "INFO"

    # Scheduling rules
    min_notice_hours: int = Field(
        default=2,
        description="Minimum hours between now and a lesson start (platform-wide)",
    )
    slot_interval_minutes: int = SLOT_INTERVAL_MINUTES
    availability_lookahead_days: int = Field(
        default=30,
        description="How far ahead availability and bookings are read",
    )
    allowed_durations: List[int] = Field(default_factory=lambda: [30, 60])
    default_hourly_rate: Decimal = Field(
        default=Decimal("15.00"),
        description="Hourly rate used when neither teacher nor subject define one",
    )

    # API
    api_prefix: str = "/api/v1"

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("allowed_durations", mode="before")
    @classmethod
    def _parse_allowed_durations(cls, value: object) -> object:
        if isinstance(value, str):
            return [int(token.strip()) for token in value.split(",") if token.strip()]
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return (value or "INFO").strip().upper()

    @model_validator(mode="after")
    def _validate_scheduling_rules(self) -> "Settings":
        if self.slot_interval_minutes != SLOT_INTERVAL_MINUTES:
            raise ValueError(f"slot_interval_minutes is fixed at {SLOT_INTERVAL_MINUTES}")
        if self.min_notice_hours < 0:
            raise ValueError("min_notice_hours must be >= 0")
        if self.availability_lookahead_days < 1:
            raise ValueError("availability_lookahead_days must be >= 1")
        if not self.allowed_durations:
            raise ValueError("allowed_durations must not be empty")
        for duration in self.allowed_durations:
            if duration <= 0 or duration % self.slot_interval_minutes:
                raise ValueError(
                    f"Duration {duration} must be a positive multiple of "
                    f"{self.slot_interval_minutes} minutes"
                )
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.lower().startswith("sqlite")


settings = Settings()
logger.info(
    "[CONFIG] environment=%s database=%s min_notice_hours=%s lookahead_days=%s",
    settings.environment,
    "sqlite" if settings.is_sqlite else "postgresql",
    settings.min_notice_hours,
    settings.availability_lookahead_days,
)
