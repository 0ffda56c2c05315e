"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Window and round constants are validated at load: an inconsistent
      configuration never reaches the tick loop

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - Window stored as time-of-day + IANA zone name; operating_window() builds the
      core OperatingWindow so core never reads settings itself
"""

from datetime import time
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.period_calculator import OperatingWindow


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://wheelhouse:wheelhouse@db:5432/wheelhouse"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres provides postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Operating window
    window_start: time = time(3, 30)
    window_end: time = time(15, 32)
    window_timezone: str = "UTC"

    # Rounds
    round_duration_seconds: int = 60
    tick_interval_seconds: float = 1.0
    outcome_min: int = 0
    outcome_max: int = 9

    # Persistence gateway
    persistence_timeout_seconds: float = 5.0

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("window_timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"unknown timezone '{v}'")
        return v

    @field_validator(
        "round_duration_seconds", "tick_interval_seconds",
        "persistence_timeout_seconds",
    )
    @classmethod
    def check_positive(cls, v):
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @model_validator(mode="after")
    def check_ranges(self) -> "Settings":
        if self.window_start >= self.window_end:
            raise ValueError("window_start must precede window_end")
        if self.outcome_min > self.outcome_max:
            raise ValueError("outcome_min must not exceed outcome_max")
        return self

    def operating_window(self) -> OperatingWindow:
        return OperatingWindow(
            start=self.window_start,
            end=self.window_end,
            tz=ZoneInfo(self.window_timezone),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
