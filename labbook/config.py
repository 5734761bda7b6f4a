"""Application configuration loaded from ``LABBOOK_*`` environment variables."""

from datetime import timedelta

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LABBOOK_", extra="ignore")

    min_duration_minutes: int = Field(
        default=30,
        gt=0,
        description="Shortest bookable window, inclusive.",
    )
    max_duration_minutes: int = Field(
        default=480,
        gt=0,
        description="Longest bookable window, inclusive.",
    )
    log_level: str = Field(default="INFO")
    seed_demo_data: bool = Field(
        default=False,
        description="Load a sample laboratory with rooms and bookings at startup.",
    )

    @model_validator(mode="after")
    def _bounds_ordered(self) -> "Settings":
        if self.min_duration_minutes > self.max_duration_minutes:
            raise ValueError("min_duration_minutes must not exceed max_duration_minutes")
        return self

    @property
    def min_duration(self) -> timedelta:
        return timedelta(minutes=self.min_duration_minutes)

    @property
    def max_duration(self) -> timedelta:
        return timedelta(minutes=self.max_duration_minutes)


settings = Settings()
