"""Decision and estimation engines for Goldilocks."""

from __future__ import annotations

from .advisor import ClimateAdvisor
from .cache import ExpiringValue, TTLCache
from .cost_model import CostModel, HousingProfile, calculate_period_savings, estimate_cost
from .humidity_estimator import HumidityEstimator, estimate_indoor_humidity
from .mold_risk import MoldRiskEngine, compute_mold_risk
from .notifications import ConditionMonitor, evaluate_triggers
from .rate_schedule import RateSchedule, RateScheduleError, get_current_rate, get_full_schedule
from .recommendation_engine import (
    DecisionContext,
    DecisionRule,
    RecommendationEngine,
    get_recommendation,
    recommendation_text,
)

__all__ = [
    "ClimateAdvisor",
    "ConditionMonitor",
    "CostModel",
    "DecisionContext",
    "DecisionRule",
    "ExpiringValue",
    "HousingProfile",
    "HumidityEstimator",
    "MoldRiskEngine",
    "RateSchedule",
    "RateScheduleError",
    "RecommendationEngine",
    "TTLCache",
    "calculate_period_savings",
    "compute_mold_risk",
    "estimate_cost",
    "estimate_indoor_humidity",
    "evaluate_triggers",
    "get_current_rate",
    "get_full_schedule",
    "get_recommendation",
    "recommendation_text",
]
