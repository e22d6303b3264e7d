"""Notification triggers raised from one advisory check.

The monitor is pure: callers pass in the advisory they just computed together
with the :class:`MonitorState` returned by the previous check, and persist the
state that comes back.  Delivery of the resulting notifications is up to the
caller.

Triggers, in the order they are evaluated:

* the recommendation changed since the last check;
* mold risk is HIGH (at most once an hour);
* the room is more than two degrees outside the active comfort band (at most
  once every 30 minutes per direction);
* the first five minutes of 07:00 and 19:00, when time-of-use prices change,
  unless a savings notification went out within the hour.

Nothing is raised, and the state is left untouched, during quiet hours.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from goldilocks.config import get_settings
from goldilocks.core.timeutil import hours_between, to_local
from goldilocks.models.enums import (
    ComfortPeriod,
    NotificationTrigger,
    RecommendationState,
    RiskLevel,
)
from goldilocks.models.schemas import (
    Advisory,
    AdvisoryRequest,
    MonitorState,
    Notification,
    QuietHours,
    TriggerResult,
)

logger = logging.getLogger(__name__)

MOLD_ALERT_COOLDOWN = timedelta(hours=1)
TEMP_ALERT_COOLDOWN = timedelta(minutes=30)
SAVINGS_ALERT_COOLDOWN = timedelta(hours=1)
TEMP_ALERT_MARGIN_C = 2.0
PEAK_START_HOUR = 7
OFF_PEAK_START_HOUR = 19
RATE_TIP_WINDOW_MINUTES = 5

STATE_CHANGE_MESSAGES = {
    RecommendationState.OPEN_WINDOW: (
        "Time to open a window! {reasons}",
        NotificationTrigger.weather_alert,
    ),
    RecommendationState.USE_AC: (
        "Consider turning on your AC. {reasons}",
        NotificationTrigger.savings_opportunity,
    ),
    RecommendationState.USE_HEAT: (
        "Your space is getting cold, turn up the heat. {reasons}",
        NotificationTrigger.savings_opportunity,
    ),
    RecommendationState.DO_NOTHING: (
        "You're back in the comfort zone. {reasons}",
        NotificationTrigger.general,
    ),
}


def _elapsed(since: datetime | None, now: datetime, tz: str | None) -> timedelta | None:
    if since is None:
        return None
    return timedelta(hours=hours_between(since, now, tz))


def _cooled_down(
    since: datetime | None, now: datetime, cooldown: timedelta, tz: str | None
) -> bool:
    elapsed = _elapsed(since, now, tz)
    return elapsed is None or elapsed > cooldown


def _rh_text(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.0f}%"


class ConditionMonitor:
    """Decide which notifications a fresh advisory warrants."""

    def __init__(
        self,
        *,
        quiet_hours: QuietHours | None = None,
        timezone: str | None = None,
    ) -> None:
        settings = get_settings()
        if quiet_hours is None and settings.quiet_hours_start and settings.quiet_hours_end:
            quiet_hours = QuietHours(
                start=settings.quiet_hours_start, end=settings.quiet_hours_end
            )
        self._quiet_hours = quiet_hours
        self._timezone = timezone or settings.timezone

    def evaluate(
        self,
        request: AdvisoryRequest,
        advisory: Advisory,
        state: MonitorState | None = None,
    ) -> TriggerResult:
        state = state or MonitorState()
        now = to_local(request.now, self._timezone)

        if self._quiet_hours is not None and self._quiet_hours.contains(now.time()):
            logger.debug("Quiet hours at %s, skipping notifications", now)
            return TriggerResult(state=state)

        notifications: list[Notification] = []
        updates: dict[str, datetime | RecommendationState] = {}

        def emit(message: str, trigger: NotificationTrigger, summary: str) -> None:
            notifications.append(
                Notification(message=message, trigger_type=trigger, summary=summary)
            )
            if trigger == NotificationTrigger.savings_opportunity:
                updates["last_savings_alert_at"] = now
            logger.info("Notification %s: %s", trigger, message[:60])

        recommendation = advisory.recommendation
        if state.previous_state is not None and recommendation.state != state.previous_state:
            template, trigger = STATE_CHANGE_MESSAGES[recommendation.state]
            emit(
                template.format(reasons=". ".join(recommendation.reasons)),
                trigger,
                f"state changed: {state.previous_state} → {recommendation.state}",
            )
        updates["previous_state"] = recommendation.state

        indoor = advisory.indoor
        outdoor = request.weather
        if advisory.mold_risk.risk_level == RiskLevel.HIGH and _cooled_down(
            state.last_mold_alert_at, now, MOLD_ALERT_COOLDOWN, self._timezone
        ):
            drier_outside = (
                outdoor.humidity_rh is not None
                and indoor.humidity_rh is not None
                and outdoor.humidity_rh < indoor.humidity_rh
            )
            advice = (
                "Outdoor air is drier, open a window to ventilate."
                if drier_outside
                else "Keep windows closed, outdoor humidity is also high."
            )
            emit(
                "Mold risk is HIGH, humidity has been above 70% for "
                f"{advisory.mold_risk.stats.minutes_over_70:.0f} minutes today. {advice}",
                NotificationTrigger.mold_risk,
                f"mold risk HIGH, RH in={_rh_text(indoor.humidity_rh)} "
                f"out={_rh_text(outdoor.humidity_rh)}",
            )
            updates["last_mold_alert_at"] = now

        comfort = request.comfort
        night = recommendation.comfort_period == ComfortPeriod.night and comfort.has_night_band
        band_min = comfort.night_min_c if night else comfort.min_c
        band_max = comfort.night_max_c if night else comfort.max_c
        tin = indoor.temp_c
        if tin < band_min - TEMP_ALERT_MARGIN_C:
            if _cooled_down(state.last_cold_alert_at, now, TEMP_ALERT_COOLDOWN, self._timezone):
                emit(
                    f"Indoor temperature is {tin:.1f}°C, that's {band_min - tin:.1f}° below "
                    f"your {'nighttime' if night else 'daytime'} comfort zone. "
                    "Consider turning up the heat.",
                    NotificationTrigger.weather_alert,
                    f"temp {tin:g}°C below comfort {band_min:g}°C",
                )
                updates["last_cold_alert_at"] = now
        elif tin > band_max + TEMP_ALERT_MARGIN_C:
            if _cooled_down(state.last_warm_alert_at, now, TEMP_ALERT_COOLDOWN, self._timezone):
                advice = (
                    "It's cooler outside, try opening a window!"
                    if outdoor.temp_c is not None and outdoor.temp_c < tin
                    else "Close blinds and use AC if available."
                )
                emit(
                    f"Indoor temperature is {tin:.1f}°C, that's {tin - band_max:.1f}° above "
                    f"your comfort zone. {advice}",
                    NotificationTrigger.weather_alert,
                    f"temp {tin:g}°C above comfort {band_max:g}°C",
                )
                updates["last_warm_alert_at"] = now

        last_savings = updates.get("last_savings_alert_at", state.last_savings_alert_at)
        if (
            now.hour in (PEAK_START_HOUR, OFF_PEAK_START_HOUR)
            and now.minute < RATE_TIP_WINDOW_MINUTES
            and _cooled_down(last_savings, now, SAVINGS_ALERT_COOLDOWN, self._timezone)
        ):
            price = f"{advisory.rate.price_cents_per_kwh:g}¢/kWh"
            if now.hour == PEAK_START_HOUR:
                emit(
                    f"Peak electricity hours starting soon, rates going up to {price}. "
                    "Reduce heavy appliance use until 7 PM if possible.",
                    NotificationTrigger.savings_opportunity,
                    "peak hours starting",
                )
            else:
                emit(
                    f"Off-peak electricity just started ({price}). "
                    "Good time to run laundry, dishwasher, or charge EVs!",
                    NotificationTrigger.savings_opportunity,
                    "off-peak hours starting",
                )

        return TriggerResult(
            notifications=tuple(notifications), state=state.model_copy(update=updates)
        )


def evaluate_triggers(
    request: AdvisoryRequest,
    advisory: Advisory,
    state: MonitorState | None = None,
    *,
    quiet_hours: QuietHours | None = None,
) -> TriggerResult:
    return ConditionMonitor(quiet_hours=quiet_hours).evaluate(request, advisory, state)


__all__ = ["ConditionMonitor", "evaluate_triggers"]
