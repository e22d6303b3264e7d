"""Domain enums for the Goldilocks advisory engine."""

from enum import StrEnum


class PlanType(StrEnum):
    TOU = "TOU"
    ULO = "ULO"
    TIERED = "TIERED"


class Season(StrEnum):
    winter = "winter"
    summer = "summer"


class DayType(StrEnum):
    weekday = "weekday"
    weekend = "weekend"


class RecommendationState(StrEnum):
    OPEN_WINDOW = "OPEN_WINDOW"
    USE_AC = "USE_AC"
    USE_HEAT = "USE_HEAT"
    DO_NOTHING = "DO_NOTHING"


class Confidence(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class EstimateConfidence(StrEnum):
    NONE = "NONE"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RiskLevel(StrEnum):
    UNKNOWN = "UNKNOWN"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ComfortPeriod(StrEnum):
    day = "day"
    night = "night"


class HvacMode(StrEnum):
    AC = "AC"
    HEAT = "HEAT"
    NONE = "NONE"


class HousingType(StrEnum):
    dorm = "dorm"
    apartment = "apartment"
    house = "house"
    basement = "basement"
    other = "other"


class HeatingSource(StrEnum):
    gas = "gas"
    electric = "electric"
    heatpump = "heatpump"


class NotificationTrigger(StrEnum):
    weather_alert = "weather_alert"
    savings_opportunity = "savings_opportunity"
    mold_risk = "mold_risk"
    general = "general"
