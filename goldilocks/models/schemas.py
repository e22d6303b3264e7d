"""Pydantic schemas for the Goldilocks advisory engine.

Request models normalize loosely-typed caller input exactly once, at the
boundary: numbers that are missing, boolean, NaN or infinite are replaced by
their documented fallback (or ``None`` where "unknown" is meaningful). The
engines in :mod:`goldilocks.core` can then assume clean values.

Result models are frozen; every engine call builds a fresh instance.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from goldilocks.config import get_settings

from .enums import (
    ComfortPeriod,
    Confidence,
    EstimateConfidence,
    HeatingSource,
    HousingType,
    HvacMode,
    NotificationTrigger,
    PlanType,
    RecommendationState,
    RiskLevel,
    Season,
)

logger = logging.getLogger(__name__)


def finite_or_none(value: Any) -> float | None:
    """Return ``value`` as a float when it is a real, finite number."""

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
        if math.isfinite(number):
            return number
    return None


def _coerce_enum(enum_cls: Any, value: Any, fallback: Any) -> Any:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip()
        for member in enum_cls:
            if member.value.lower() == key.lower():
                return member
    return fallback


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Inputs supplied by the orchestration layer
# ---------------------------------------------------------------------------


class Reading(_Frozen):
    """A point-in-time indoor observation from one sensor."""

    timestamp: datetime
    device_id: str = ""
    temp_c: float | None = None
    humidity_rh: float | None = None
    pressure_hpa: float | None = None

    @field_validator("temp_c", "humidity_rh", "pressure_hpa", mode="before")
    @classmethod
    def _finite(cls, v: Any) -> float | None:
        return finite_or_none(v)


class ForecastEntry(_Frozen):
    """One forecast slot (typically three hours apart)."""

    dt: datetime
    temp_c: float | None = None
    humidity_rh: float | None = None
    description: str = ""
    pop: float = Field(default=0.0, description="Probability of precipitation, 0-1")

    @field_validator("temp_c", "humidity_rh", mode="before")
    @classmethod
    def _finite(cls, v: Any) -> float | None:
        return finite_or_none(v)

    @field_validator("pop", mode="before")
    @classmethod
    def _pop(cls, v: Any) -> float:
        return finite_or_none(v) or 0.0

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""


class WeatherSnapshot(_Frozen):
    """Outdoor conditions already resolved by the weather integration."""

    temp_c: float | None = None
    humidity_rh: float | None = None
    forecast: tuple[ForecastEntry, ...] = ()
    mock: bool = False

    @field_validator("temp_c", "humidity_rh", mode="before")
    @classmethod
    def _finite(cls, v: Any) -> float | None:
        return finite_or_none(v)

    @field_validator("forecast", mode="before")
    @classmethod
    def _forecast(cls, v: Any) -> Any:
        return v if v is not None else ()


class ComfortBand(_Frozen):
    """User comfort range; the night band applies overnight when both ends are set."""

    min_c: float = Field(default_factory=lambda: get_settings().default_comfort_min_c)
    max_c: float = Field(default_factory=lambda: get_settings().default_comfort_max_c)
    night_min_c: float | None = None
    night_max_c: float | None = None

    @field_validator("night_min_c", "night_max_c", mode="before")
    @classmethod
    def _finite(cls, v: Any) -> float | None:
        return finite_or_none(v)

    @property
    def has_night_band(self) -> bool:
        return self.night_min_c is not None and self.night_max_c is not None


# ---------------------------------------------------------------------------
# Electricity rates
# ---------------------------------------------------------------------------


class RatePeriod(_Frozen):
    start_hour: int = Field(ge=0, lt=24)
    end_hour: int = Field(gt=0, le=24)
    price_cents_per_kwh: float = Field(ge=0)
    label: str

    @model_validator(mode="after")
    def _ordered(self) -> RatePeriod:
        if self.start_hour >= self.end_hour:
            raise ValueError(
                f"rate period must start before it ends ({self.start_hour}-{self.end_hour})"
            )
        return self

    def contains(self, hour: int) -> bool:
        return self.start_hour <= hour < self.end_hour


class TierRates(_Frozen):
    tier1_threshold_kwh: int
    tier1_rate: float
    tier2_rate: float


class CurrentRate(_Frozen):
    price_cents_per_kwh: float
    period_label: str
    plan_type: PlanType
    season: Season
    tier2_rate: float | None = None
    tier1_threshold_kwh: int | None = None


class FullSchedule(_Frozen):
    plan_type: PlanType
    season: Season
    weekday: tuple[RatePeriod, ...] | None = None
    weekend: tuple[RatePeriod, ...] | None = None
    tiers: TierRates | None = None


# ---------------------------------------------------------------------------
# Humidity estimate
# ---------------------------------------------------------------------------


class HumidityEstimateDetails(_Frozen):
    indoor_temp_c: float
    outdoor_temp_c: float
    outdoor_rh: float
    e_sat_outdoor: float
    e_sat_indoor: float
    e_actual: float
    base_estimate: float
    moisture_boost_pct: float


class HumidityEstimate(_Frozen):
    humidity_rh: float | None
    confidence: EstimateConfidence
    method: str
    details: HumidityEstimateDetails | None = None


# ---------------------------------------------------------------------------
# Cost model
# ---------------------------------------------------------------------------


class CostRequest(BaseModel):
    indoor_temp_c: float = Field(default_factory=lambda: get_settings().default_indoor_temp_c)
    target_c: float
    price_cents_per_kwh: float = Field(
        default_factory=lambda: get_settings().default_price_cents_per_kwh
    )
    housing_type: HousingType = Field(
        default_factory=lambda: _coerce_enum(
            HousingType, get_settings().default_housing_type, HousingType.apartment
        )
    )
    ac_cop: float = Field(default_factory=lambda: get_settings().default_ac_cop)
    kwh_per_degc: float | None = None

    @field_validator("indoor_temp_c", mode="before")
    @classmethod
    def _indoor(cls, v: Any) -> float:
        number = finite_or_none(v)
        return number if number is not None else get_settings().default_indoor_temp_c

    @field_validator("target_c", mode="before")
    @classmethod
    def _target(cls, v: Any) -> float:
        number = finite_or_none(v)
        if number is not None:
            return number
        settings = get_settings()
        return (settings.default_comfort_min_c + settings.default_comfort_max_c) / 2

    @field_validator("price_cents_per_kwh", mode="before")
    @classmethod
    def _price(cls, v: Any) -> float:
        number = finite_or_none(v)
        return number if number is not None else get_settings().default_price_cents_per_kwh

    @field_validator("housing_type", mode="before")
    @classmethod
    def _housing(cls, v: Any) -> HousingType:
        housing = _coerce_enum(HousingType, v, None)
        if housing is None:
            logger.debug("Unknown housing type %r, using apartment profile", v)
            return HousingType.apartment
        return housing

    @field_validator("ac_cop", mode="before")
    @classmethod
    def _cop(cls, v: Any) -> float:
        number = finite_or_none(v)
        return number if number is not None and number > 0 else get_settings().default_ac_cop

    @field_validator("kwh_per_degc", mode="before")
    @classmethod
    def _kwh_override(cls, v: Any) -> float | None:
        number = finite_or_none(v)
        return number if number is not None and number > 0 else None


class CostAssumptions(_Frozen):
    kwh_per_degc: float
    ac_cop: float
    room_volume_m3: float
    furnishing_factor: float
    housing_type: HousingType
    formula: str = "k × 0.000335 × V"


class CostEstimate(_Frozen):
    cost_heat: float
    cost_ac: float
    cost_window: float = 0.0
    hvac_cost: float
    savings: float
    delta_t: float
    kwh_room: float
    mode: HvacMode
    assumptions: CostAssumptions


class DailySummary(_Frozen):
    day: date
    kwh_saved_est: float = 0.0
    dollars_saved_est: float = 0.0
    co2_saved_g: float = 0.0
    minutes_over_60: float = 0.0
    minutes_over_70: float = 0.0
    risk_level: RiskLevel = RiskLevel.UNKNOWN
    reading_count: int = 0


class PeriodSavings(_Frozen):
    dollars_saved: float
    kwh_saved: float
    days: int


# ---------------------------------------------------------------------------
# Carbon
# ---------------------------------------------------------------------------


class AvoidedCO2(_Frozen):
    co2_g: float
    # Unrecognised sources are echoed back as given.
    source: HeatingSource | str


class CO2Equivalences(_Frozen):
    trees_equivalent: float = 0.0
    km_not_driven: float = 0.0
    phone_charges: int = 0
    shower_minutes_saved: float = 0.0
    led_bulb_hours: int = 0


class CommunityImpact(_Frozen):
    """One household's savings scaled to every household in the community."""

    daily_avg_g: float = 0.0
    annual_user_kg: float = 0.0
    annual_community_tonnes: int = 0
    annual_community_trees: int = 0
    pct_reduction: float = 0.0
    households: int
    population: int


class GenerationalMilestone(_Frozen):
    years: int
    label: str
    cumulative_tonnes: int
    trees_equivalent: int
    km_equivalent: int
    description: str


# ---------------------------------------------------------------------------
# Mold risk
# ---------------------------------------------------------------------------


class MoldRiskStats(_Frozen):
    minutes_over_60: float = 0
    minutes_over_70: float = 0
    minutes_60_70: float = 0
    max_consecutive_over_70: float = 0
    current_humidity: float | None = None
    reading_count: int = 0


class MoldRiskResult(_Frozen):
    risk_level: RiskLevel
    risk_score: int = Field(ge=0, le=100)
    explanation: str
    stats: MoldRiskStats


# ---------------------------------------------------------------------------
# Recommendation
# ---------------------------------------------------------------------------


class RecommendationRequest(BaseModel):
    """Inputs to the recommendation engine, sanitized on construction."""

    indoor_temp_c: float = Field(default_factory=lambda: get_settings().default_indoor_temp_c)
    indoor_rh: float | None = None
    outdoor_temp_c: float = Field(default_factory=lambda: get_settings().default_outdoor_temp_c)
    outdoor_rh: float | None = None
    comfort_min: float = Field(default_factory=lambda: get_settings().default_comfort_min_c)
    comfort_max: float = Field(default_factory=lambda: get_settings().default_comfort_max_c)
    comfort_min_night: float | None = None
    comfort_max_night: float | None = None
    price_cents_per_kwh: float = Field(
        default_factory=lambda: get_settings().default_price_cents_per_kwh
    )
    period_label: str = ""
    forecast: tuple[ForecastEntry, ...] = ()
    mold_risk_level: RiskLevel = RiskLevel.LOW
    now: datetime | None = None

    @field_validator("indoor_temp_c", mode="before")
    @classmethod
    def _indoor(cls, v: Any) -> float:
        number = finite_or_none(v)
        return number if number is not None else get_settings().default_indoor_temp_c

    @field_validator("outdoor_temp_c", mode="before")
    @classmethod
    def _outdoor(cls, v: Any) -> float:
        number = finite_or_none(v)
        return number if number is not None else get_settings().default_outdoor_temp_c

    @field_validator("indoor_rh", "outdoor_rh", "comfort_min_night", "comfort_max_night", mode="before")
    @classmethod
    def _optional(cls, v: Any) -> float | None:
        return finite_or_none(v)

    @field_validator("comfort_min", mode="before")
    @classmethod
    def _comfort_min(cls, v: Any) -> float:
        number = finite_or_none(v)
        return number if number is not None else get_settings().default_comfort_min_c

    @field_validator("comfort_max", mode="before")
    @classmethod
    def _comfort_max(cls, v: Any) -> float:
        number = finite_or_none(v)
        return number if number is not None else get_settings().default_comfort_max_c

    @field_validator("price_cents_per_kwh", mode="before")
    @classmethod
    def _price(cls, v: Any) -> float:
        number = finite_or_none(v)
        return number if number is not None else get_settings().default_price_cents_per_kwh

    @field_validator("period_label", mode="before")
    @classmethod
    def _label(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @field_validator("forecast", mode="before")
    @classmethod
    def _forecast(cls, v: Any) -> Any:
        return v if v is not None else ()

    @field_validator("mold_risk_level", mode="before")
    @classmethod
    def _risk(cls, v: Any) -> RiskLevel:
        if v is None:
            return RiskLevel.LOW
        return _coerce_enum(RiskLevel, v, RiskLevel.UNKNOWN)


class Recommendation(_Frozen):
    state: RecommendationState
    confidence: Confidence
    reasons: tuple[str, ...]
    proactive_tip: str | None = None
    humidity_tip: str | None = None
    comfort_period: ComfortPeriod = ComfortPeriod.day
    rule: str = ""


# ---------------------------------------------------------------------------
# Advisory bundle
# ---------------------------------------------------------------------------


class AdvisoryRequest(BaseModel):
    latest_reading: Reading | None = None
    readings: tuple[Reading, ...] = ()
    weather: WeatherSnapshot = Field(default_factory=WeatherSnapshot)
    plan_type: str | PlanType | None = None
    comfort: ComfortBand = Field(default_factory=ComfortBand)
    housing_type: str | HousingType | None = None
    ac_cop: float | None = None
    kwh_per_degc: float | None = None
    reading_interval_minutes: float = Field(default=1.0, gt=0)
    now: datetime | None = None


class IndoorConditions(_Frozen):
    temp_c: float
    humidity_rh: float | None
    humidity_estimated: bool = False
    humidity_confidence: EstimateConfidence | None = None
    pressure_hpa: float | None = None
    sensor_online: bool = False
    last_updated: datetime | None = None


class Advisory(_Frozen):
    indoor: IndoorConditions
    rate: CurrentRate
    schedule: FullSchedule
    recommendation: Recommendation
    recommendation_text: str
    cost_estimate: CostEstimate
    mold_risk: MoldRiskResult
    readings_count: int


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


class QuietHours(_Frozen):
    """Local time window in which no notifications are raised.

    A window whose start is later than its end wraps past midnight; equal
    ends mean the window is empty.
    """

    start: time
    end: time

    def contains(self, moment: time) -> bool:
        if self.start == self.end:
            return False
        if self.start > self.end:
            return moment >= self.start or moment < self.end
        return self.start <= moment < self.end


class Notification(_Frozen):
    message: str
    trigger_type: NotificationTrigger
    summary: str


class MonitorState(_Frozen):
    """What the condition monitor remembers between checks."""

    previous_state: RecommendationState | None = None
    last_mold_alert_at: datetime | None = None
    last_cold_alert_at: datetime | None = None
    last_warm_alert_at: datetime | None = None
    last_savings_alert_at: datetime | None = None


class TriggerResult(_Frozen):
    notifications: tuple[Notification, ...] = ()
    state: MonitorState = Field(default_factory=MonitorState)


__all__ = [
    "Advisory",
    "AdvisoryRequest",
    "AvoidedCO2",
    "CO2Equivalences",
    "ComfortBand",
    "CommunityImpact",
    "CostAssumptions",
    "CostEstimate",
    "CostRequest",
    "CurrentRate",
    "DailySummary",
    "ForecastEntry",
    "FullSchedule",
    "GenerationalMilestone",
    "HumidityEstimate",
    "HumidityEstimateDetails",
    "IndoorConditions",
    "MoldRiskResult",
    "MoldRiskStats",
    "MonitorState",
    "Notification",
    "PeriodSavings",
    "QuietHours",
    "RatePeriod",
    "Reading",
    "Recommendation",
    "RecommendationRequest",
    "TierRates",
    "TriggerResult",
    "WeatherSnapshot",
    "finite_or_none",
]
