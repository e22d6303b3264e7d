"""Goldilocks domain models."""

from .enums import (
    ComfortPeriod,
    Confidence,
    DayType,
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
from .schemas import (
    Advisory,
    AdvisoryRequest,
    ComfortBand,
    CostEstimate,
    CostRequest,
    CurrentRate,
    DailySummary,
    ForecastEntry,
    FullSchedule,
    HumidityEstimate,
    MoldRiskResult,
    MoldRiskStats,
    RatePeriod,
    Reading,
    Recommendation,
    RecommendationRequest,
    TierRates,
    WeatherSnapshot,
)

__all__ = [
    "Advisory",
    "AdvisoryRequest",
    "ComfortBand",
    "ComfortPeriod",
    "Confidence",
    "CostEstimate",
    "CostRequest",
    "CurrentRate",
    "DailySummary",
    "DayType",
    "EstimateConfidence",
    "ForecastEntry",
    "FullSchedule",
    "HeatingSource",
    "HousingType",
    "HumidityEstimate",
    "HvacMode",
    "MoldRiskResult",
    "MoldRiskStats",
    "NotificationTrigger",
    "PlanType",
    "RatePeriod",
    "Reading",
    "Recommendation",
    "RecommendationRequest",
    "RecommendationState",
    "RiskLevel",
    "Season",
    "TierRates",
    "WeatherSnapshot",
]
