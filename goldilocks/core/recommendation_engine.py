"""Window / AC / heat recommendation engine.

Decisions are made by an ordered table of rules.  Each rule looks at a
precomputed :class:`DecisionContext` and either returns an outcome or passes;
the first outcome wins and the last rule always matches.

==========  ==============================================  ===========  ===========
 Priority    Condition                                       State        Confidence
==========  ==============================================  ===========  ===========
 1           comfortable, mold not HIGH, humid, drier out    OPEN_WINDOW  MEDIUM
 2           comfortable, mold not HIGH                      DO_NOTHING   HIGH
 3           mold HIGH, outside not wetter, no rain          OPEN_WINDOW  HIGH
 4           too hot, cooler outside air helps, no rain      OPEN_WINDOW  HIGH/MEDIUM
 5           too hot                                         USE_AC       HIGH
 6           too cold, warmer outside air helps, no rain     OPEN_WINDOW  MEDIUM
 7           too cold                                        USE_HEAT     HIGH
 8           anything else                                   DO_NOTHING   LOW
==========  ==============================================  ===========  ===========

Outside air "helps" when it moves the room the right way and is either
closer to the target than the room or at least reaches the comfort band
(at or below its upper bound when cooling, at or above its lower bound
when heating).  Air more than ``ventilation_margin_c`` beyond the far side
of the band is too harsh to ventilate with, so a stuffy room on a freezing
day gets the AC rather than an open window.

Every outcome carries at least one reason with the concrete numbers behind
it, so users can see why a suggestion was made.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from goldilocks.config import get_settings
from goldilocks.core.mold_risk import round_half_up
from goldilocks.core.timeutil import hours_between, to_local
from goldilocks.models.enums import ComfortPeriod, Confidence, RecommendationState, RiskLevel
from goldilocks.models.schemas import ForecastEntry, Recommendation, RecommendationRequest

logger = logging.getLogger(__name__)

RAIN_TIP_LOOKAHEAD = 3
MILD_TIP_LOOKAHEAD = 4
MILD_MAX_RH = 55.0
MILD_MIN_TEMP_C = 5.0
MILD_MAX_TEMP_C = 28.0

RECOMMENDATION_TEXT = {
    RecommendationState.OPEN_WINDOW: "Open your window to save money and improve air quality.",
    RecommendationState.USE_AC: "Use your AC, outside air won't help right now.",
    RecommendationState.USE_HEAT: "Turn on heating, it's too cold to ventilate.",
    RecommendationState.DO_NOTHING: "You're comfortable! No action needed right now.",
}


def recommendation_text(state: RecommendationState | str) -> str:
    """Short display sentence for a recommendation state."""

    try:
        return RECOMMENDATION_TEXT[RecommendationState(state)]
    except ValueError:
        return RECOMMENDATION_TEXT[RecommendationState.DO_NOTHING]


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------


def is_night(hour: int, start_hour: int, end_hour: int) -> bool:
    if start_hour == end_hour:
        return False
    if start_hour > end_hour:
        return hour >= start_hour or hour < end_hour
    return start_hour <= hour < end_hour


def select_comfort_band(
    request: RecommendationRequest, local_hour: int, *, night_start: int, night_end: int
) -> tuple[float, float, ComfortPeriod]:
    """Pick the night band overnight when both of its ends are configured."""

    if (
        request.comfort_min_night is not None
        and request.comfort_max_night is not None
        and is_night(local_hour, night_start, night_end)
    ):
        return request.comfort_min_night, request.comfort_max_night, ComfortPeriod.night
    return request.comfort_min, request.comfort_max, ComfortPeriod.day


def is_rain_expected(forecast: Sequence[ForecastEntry], probability: float) -> bool:
    return any(
        entry.pop > probability or "rain" in entry.description.lower() for entry in forecast
    )


def proactive_tip(
    forecast: Sequence[ForecastEntry],
    now: datetime,
    *,
    rain_probability: float,
    timezone: str | None = None,
) -> str | None:
    """Forward-looking advice: ventilate before rain, or wait for a mild window."""

    for entry in forecast[:RAIN_TIP_LOOKAHEAD]:
        if entry.pop > rain_probability:
            hours = max(0.0, hours_between(now, entry.dt, timezone))
            when = "within the hour" if hours < 1 else f"in about {round_half_up(hours)}h"
            return (
                f"Rain likely {when} ({entry.pop * 100:.0f}% chance). "
                "Ventilate now before it arrives."
            )

    for entry in forecast[:MILD_TIP_LOOKAHEAD]:
        if entry.humidity_rh is None or entry.temp_c is None:
            continue
        if entry.humidity_rh < MILD_MAX_RH and MILD_MIN_TEMP_C < entry.temp_c < MILD_MAX_TEMP_C:
            at = to_local(entry.dt, timezone)
            return (
                f"Good ventilation window coming at {at:%H:%M} "
                f"({entry.temp_c:.1f}°C, {entry.humidity_rh:.0f}% RH), dry and mild."
            )
    return None


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DecisionContext:
    indoor_temp_c: float
    indoor_rh: float | None
    outdoor_temp_c: float
    outdoor_rh: float | None
    comfort_min: float
    comfort_max: float
    comfort_period: ComfortPeriod
    target_c: float
    price_cents_per_kwh: float
    period_label: str
    mold_risk_level: RiskLevel
    rain_coming: bool
    is_expensive: bool
    is_cheap: bool
    humid_threshold_rh: float = 60.0
    ventilation_margin_c: float = 10.0

    @property
    def is_comfortable(self) -> bool:
        return self.comfort_min <= self.indoor_temp_c <= self.comfort_max

    @property
    def is_too_hot(self) -> bool:
        return self.indoor_temp_c > self.comfort_max

    @property
    def is_too_cold(self) -> bool:
        return self.indoor_temp_c < self.comfort_min

    @property
    def outdoor_closer_to_target(self) -> bool:
        return abs(self.outdoor_temp_c - self.target_c) < abs(self.indoor_temp_c - self.target_c)

    @property
    def outdoor_helps_cooling(self) -> bool:
        """Cooler outside air that is closer to target or can bring the room into the band."""
        return self.outdoor_temp_c < self.indoor_temp_c and (
            self.outdoor_closer_to_target
            or self.comfort_min - self.ventilation_margin_c
            <= self.outdoor_temp_c
            <= self.comfort_max
        )

    @property
    def outdoor_helps_heating(self) -> bool:
        return self.outdoor_temp_c > self.indoor_temp_c and (
            self.outdoor_closer_to_target
            or self.comfort_min
            <= self.outdoor_temp_c
            <= self.comfort_max + self.ventilation_margin_c
        )

    @property
    def outdoor_drier(self) -> bool | None:
        if self.indoor_rh is None or self.outdoor_rh is None:
            return None
        return self.outdoor_rh < self.indoor_rh

    @property
    def indoor_humid(self) -> bool:
        return self.indoor_rh is not None and self.indoor_rh > self.humid_threshold_rh

    @property
    def price_text(self) -> str:
        return f"{self.price_cents_per_kwh:g}¢/kWh"

    @property
    def rate_name(self) -> str:
        return self.period_label or "priced"

    @property
    def band_text(self) -> str:
        return f"{self.comfort_min:.1f}–{self.comfort_max:.1f}°C"


@dataclass(frozen=True, slots=True)
class RuleOutcome:
    state: RecommendationState
    confidence: Confidence
    reasons: tuple[str, ...]
    humidity_tip: str | None = None


@dataclass(frozen=True, slots=True)
class DecisionRule:
    name: str
    evaluate: Callable[[DecisionContext], RuleOutcome | None] = field(repr=False)


def _humidity_pair(ctx: DecisionContext) -> str:
    return f"{ctx.outdoor_rh:.0f}% vs {ctx.indoor_rh:.0f}% inside"


def comfortable_but_humid(ctx: DecisionContext) -> RuleOutcome | None:
    if not ctx.is_comfortable or ctx.mold_risk_level == RiskLevel.HIGH:
        return None
    if not (ctx.indoor_humid and ctx.outdoor_drier and not ctx.rain_coming):
        return None
    return RuleOutcome(
        state=RecommendationState.OPEN_WINDOW,
        confidence=Confidence.MEDIUM,
        reasons=(
            f"Indoor humidity is {ctx.indoor_rh:.0f}%, ventilating to reduce mold risk",
            f"Outside is drier at {ctx.outdoor_rh:.0f}%",
            f"Temperature ({ctx.indoor_temp_c:.1f}°C) is already within your comfort zone "
            f"({ctx.band_text})",
        ),
    )


def comfortable(ctx: DecisionContext) -> RuleOutcome | None:
    if not ctx.is_comfortable or ctx.mold_risk_level == RiskLevel.HIGH:
        return None
    reasons = [
        f"Indoor temperature ({ctx.indoor_temp_c:.1f}°C) is within your "
        f"{ctx.comfort_period} comfort zone ({ctx.band_text})"
    ]
    if ctx.mold_risk_level == RiskLevel.MEDIUM:
        reasons.append("Mold risk is moderate, keep an eye on humidity")
    return RuleOutcome(
        state=RecommendationState.DO_NOTHING, confidence=Confidence.HIGH, reasons=tuple(reasons)
    )


def mold_ventilation(ctx: DecisionContext) -> RuleOutcome | None:
    if ctx.mold_risk_level != RiskLevel.HIGH or ctx.outdoor_drier is False or ctx.rain_coming:
        return None
    reasons = ["Mold risk is HIGH, ventilation strongly recommended"]
    if ctx.outdoor_drier:
        reasons.append(f"Outside air is drier ({_humidity_pair(ctx)})")
    elif ctx.indoor_rh is not None:
        reasons.append(f"Indoor humidity is {ctx.indoor_rh:.0f}%; outdoor humidity is unknown")
    else:
        reasons.append("Indoor humidity is unknown, ventilating on the mold history alone")
    return RuleOutcome(
        state=RecommendationState.OPEN_WINDOW, confidence=Confidence.HIGH, reasons=tuple(reasons)
    )


def too_hot_ventilate(ctx: DecisionContext) -> RuleOutcome | None:
    if not ctx.is_too_hot:
        return None
    if not ctx.outdoor_helps_cooling or ctx.rain_coming:
        return None
    reasons = [
        f"It's {ctx.indoor_temp_c - ctx.outdoor_temp_c:.1f}°C cooler outside "
        f"({ctx.outdoor_temp_c:.1f}°C) than inside ({ctx.indoor_temp_c:.1f}°C)"
    ]
    if ctx.outdoor_drier:
        reasons.append(f"Outside is also drier ({_humidity_pair(ctx)})")
    if ctx.is_expensive:
        reasons.append(
            f"Electricity is {ctx.rate_name} right now ({ctx.price_text}), "
            "save by opening a window"
        )
    confidence = Confidence.HIGH if ctx.outdoor_drier is not False else Confidence.MEDIUM
    return RuleOutcome(
        state=RecommendationState.OPEN_WINDOW, confidence=confidence, reasons=tuple(reasons)
    )


def too_hot_cool(ctx: DecisionContext) -> RuleOutcome | None:
    if not ctx.is_too_hot:
        return None
    reasons = [
        f"Indoor temperature ({ctx.indoor_temp_c:.1f}°C) is above your comfort zone "
        f"({ctx.comfort_max:.1f}°C)"
    ]
    if ctx.rain_coming and ctx.outdoor_helps_cooling:
        reasons.append(
            f"Outside ({ctx.outdoor_temp_c:.1f}°C) is cooler, but rain is expected"
        )
    else:
        reasons.append(f"Outside ({ctx.outdoor_temp_c:.1f}°C) won't help cool down enough")
    if ctx.is_expensive:
        reasons.append(f"Electricity is {ctx.rate_name} ({ctx.price_text}), AC will be costly")
    elif ctx.is_cheap:
        reasons.append(f"Good news: electricity is cheap right now ({ctx.price_text})")

    humidity_tip = None
    if ctx.indoor_humid:
        humidity_tip = (
            f"Indoor humidity is {ctx.indoor_rh:.0f}%. AC dehumidifies poorly above "
            f"{ctx.humid_threshold_rh:.0f}% RH, so ventilate first if outdoor air is drier, "
            "then run the AC."
        )
    return RuleOutcome(
        state=RecommendationState.USE_AC,
        confidence=Confidence.HIGH,
        reasons=tuple(reasons),
        humidity_tip=humidity_tip,
    )


def too_cold_ventilate(ctx: DecisionContext) -> RuleOutcome | None:
    if not ctx.is_too_cold:
        return None
    if not ctx.outdoor_helps_heating or ctx.rain_coming:
        return None
    reasons = [
        f"Outside is {ctx.outdoor_temp_c - ctx.indoor_temp_c:.1f}°C warmer "
        f"({ctx.outdoor_temp_c:.1f}°C) than inside ({ctx.indoor_temp_c:.1f}°C)"
    ]
    if ctx.is_expensive:
        reasons.append(
            f"Electricity is {ctx.rate_name} ({ctx.price_text}), opening a window saves money"
        )
    return RuleOutcome(
        state=RecommendationState.OPEN_WINDOW, confidence=Confidence.MEDIUM, reasons=tuple(reasons)
    )


def too_cold_heat(ctx: DecisionContext) -> RuleOutcome | None:
    if not ctx.is_too_cold:
        return None
    reasons = [
        f"Indoor temperature ({ctx.indoor_temp_c:.1f}°C) is below your comfort zone "
        f"({ctx.comfort_min:.1f}°C)",
        f"Outside ({ctx.outdoor_temp_c:.1f}°C) won't help warm up",
    ]
    if ctx.is_expensive:
        reasons.append(
            f"Electricity is {ctx.rate_name} ({ctx.price_text}), heating will be expensive"
        )
        reasons.append("Consider layering up if the price drops soon")
    elif ctx.is_cheap:
        reasons.append(f"Electricity is cheap right now ({ctx.price_text}), good time to heat")
    return RuleOutcome(
        state=RecommendationState.USE_HEAT, confidence=Confidence.HIGH, reasons=tuple(reasons)
    )


def monitor(ctx: DecisionContext) -> RuleOutcome:
    reasons = ["Conditions are borderline, monitor for changes"]
    if ctx.mold_risk_level == RiskLevel.HIGH:
        reasons.append(
            "Mold risk is HIGH, but outdoor air is more humid or rain is expected, "
            "so ventilating would not help"
        )
    reasons.append(
        f"Indoor {ctx.indoor_temp_c:.1f}°C, outdoor {ctx.outdoor_temp_c:.1f}°C, "
        f"comfort zone {ctx.band_text}"
    )
    return RuleOutcome(
        state=RecommendationState.DO_NOTHING, confidence=Confidence.LOW, reasons=tuple(reasons)
    )


DEFAULT_RULES: tuple[DecisionRule, ...] = (
    DecisionRule("comfortable_but_humid", comfortable_but_humid),
    DecisionRule("comfortable", comfortable),
    DecisionRule("mold_ventilation", mold_ventilation),
    DecisionRule("too_hot_ventilate", too_hot_ventilate),
    DecisionRule("too_hot_cool", too_hot_cool),
    DecisionRule("too_cold_ventilate", too_cold_ventilate),
    DecisionRule("too_cold_heat", too_cold_heat),
    DecisionRule("monitor", monitor),
)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class RecommendationEngine:
    """Turn indoor/outdoor conditions, price and mold risk into one recommendation."""

    def __init__(
        self,
        *,
        rules: Sequence[DecisionRule] | None = None,
        expensive_price_cents: float | None = None,
        cheap_price_cents: float | None = None,
        rain_probability_threshold: float | None = None,
        humid_threshold_rh: float | None = None,
        ventilation_margin_c: float | None = None,
        night_start_hour: int | None = None,
        night_end_hour: int | None = None,
        timezone: str | None = None,
    ) -> None:
        settings = get_settings()
        self._rules = tuple(DEFAULT_RULES if rules is None else rules)
        if not self._rules:
            raise ValueError("at least one decision rule is required")
        self._expensive = (
            expensive_price_cents
            if expensive_price_cents is not None
            else settings.expensive_price_cents
        )
        self._cheap = cheap_price_cents if cheap_price_cents is not None else settings.cheap_price_cents
        self._rain_probability = (
            rain_probability_threshold
            if rain_probability_threshold is not None
            else settings.rain_probability_threshold
        )
        self._humid_rh = (
            humid_threshold_rh if humid_threshold_rh is not None else settings.humid_threshold_rh
        )
        self._ventilation_margin = (
            ventilation_margin_c
            if ventilation_margin_c is not None
            else settings.ventilation_margin_c
        )
        self._night_start = night_start_hour if night_start_hour is not None else settings.night_start_hour
        self._night_end = night_end_hour if night_end_hour is not None else settings.night_end_hour
        self._timezone = timezone or settings.timezone

    @property
    def rules(self) -> tuple[DecisionRule, ...]:
        return self._rules

    def build_context(self, request: RecommendationRequest, now: datetime) -> DecisionContext:
        comfort_min, comfort_max, period = select_comfort_band(
            request, now.hour, night_start=self._night_start, night_end=self._night_end
        )
        price = request.price_cents_per_kwh
        return DecisionContext(
            indoor_temp_c=request.indoor_temp_c,
            indoor_rh=request.indoor_rh,
            outdoor_temp_c=request.outdoor_temp_c,
            outdoor_rh=request.outdoor_rh,
            comfort_min=comfort_min,
            comfort_max=comfort_max,
            comfort_period=period,
            target_c=(comfort_min + comfort_max) / 2,
            price_cents_per_kwh=price,
            period_label=request.period_label,
            mold_risk_level=request.mold_risk_level,
            rain_coming=is_rain_expected(request.forecast, self._rain_probability),
            is_expensive=price >= self._expensive,
            is_cheap=price <= self._cheap,
            humid_threshold_rh=self._humid_rh,
            ventilation_margin_c=self._ventilation_margin,
        )

    def recommend(self, request: RecommendationRequest) -> Recommendation:
        now = to_local(request.now, self._timezone)
        ctx = self.build_context(request, now)

        for rule in self._rules:
            outcome = rule.evaluate(ctx)
            if outcome is not None:
                break
        else:
            outcome = monitor(ctx)
            rule = DecisionRule("monitor", monitor)

        logger.info(
            "Recommendation: state=%s confidence=%s rule=%s",
            outcome.state,
            outcome.confidence,
            rule.name,
            extra={"rule": rule.name, "comfort_period": str(ctx.comfort_period)},
        )
        return Recommendation(
            state=outcome.state,
            confidence=outcome.confidence,
            reasons=outcome.reasons,
            proactive_tip=proactive_tip(
                request.forecast,
                now,
                rain_probability=self._rain_probability,
                timezone=self._timezone,
            ),
            humidity_tip=outcome.humidity_tip,
            comfort_period=ctx.comfort_period,
            rule=rule.name,
        )

    def get_recommendation(self, **fields: Any) -> Recommendation:
        """Build and sanitize a request from keyword fields, then decide."""

        return self.recommend(RecommendationRequest(**fields))


_default_engine = RecommendationEngine()


def get_recommendation(**fields: Any) -> Recommendation:
    return _default_engine.get_recommendation(**fields)


__all__ = [
    "DEFAULT_RULES",
    "DecisionContext",
    "DecisionRule",
    "RecommendationEngine",
    "RuleOutcome",
    "get_recommendation",
    "is_night",
    "is_rain_expected",
    "proactive_tip",
    "recommendation_text",
    "select_comfort_band",
]
