"""Application configuration powered by Pydantic settings."""

from __future__ import annotations

from datetime import time
from functools import lru_cache
from typing import Final

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized configuration object with environment fallbacks."""

    model_config = SettingsConfigDict(env_prefix="GOLDILOCKS_", env_file=".env", extra="allow")

    # App
    app_name: str = "Goldilocks"
    debug: bool = False
    log_level: str = Field(default="info")
    timezone: str = Field(default="America/Toronto")

    # Fallbacks substituted for missing sensor / weather / rate values
    default_indoor_temp_c: float = 21.0
    default_outdoor_temp_c: float = 10.0
    default_price_cents_per_kwh: float = 10.0

    # Comfort defaults (used when the user profile has no explicit band)
    default_comfort_min_c: float = 20.0
    default_comfort_max_c: float = 23.0
    night_start_hour: int = Field(default=22, ge=0, le=23)
    night_end_hour: int = Field(default=7, ge=0, le=23)

    # Price bands (cents per kWh)
    expensive_price_cents: float = 15.0  # on-peak territory
    cheap_price_cents: float = 5.0  # ultra-low overnight

    # Weather
    rain_probability_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    humid_threshold_rh: float = 60.0
    # Outdoor air further than this outside the comfort band is too harsh to ventilate with.
    ventilation_margin_c: float = Field(default=10.0, ge=0.0)

    # Humidity estimator
    moisture_boost_pct: float = 8.0

    # Mold risk thresholds (minutes per analysis window)
    mold_high_cumulative_minutes: float = 180.0
    mold_high_consecutive_minutes: float = 90.0
    mold_medium_minutes: float = 60.0

    # Cost model / tariffs
    default_ac_cop: float = Field(default=2.5, gt=0)
    default_housing_type: str = Field(default="apartment")
    default_plan_type: str = Field(default="TOU")

    # Notifications are held back between these local times (HH:MM), wrapping midnight
    quiet_hours_start: time | None = None
    quiet_hours_end: time | None = None

    @field_validator("default_plan_type", mode="before")
    @classmethod
    def _upper_plan(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("default_housing_type", mode="before")
    @classmethod
    def _lower_housing(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().lower()
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


SETTINGS: Final[Settings] = get_settings()
