"""Unit tests for notification triggers."""

from __future__ import annotations

from datetime import datetime, time, timedelta

import pytest

from goldilocks.config import Settings
from goldilocks.core.advisor import ClimateAdvisor
from goldilocks.core.notifications import ConditionMonitor, evaluate_triggers
from goldilocks.core.recommendation_engine import RecommendationEngine
from goldilocks.models.enums import NotificationTrigger, RecommendationState, RiskLevel
from goldilocks.models.schemas import (
    AdvisoryRequest,
    ComfortBand,
    MonitorState,
    QuietHours,
    Reading,
    WeatherSnapshot,
)

NOON = datetime(2026, 1, 14, 12, 0)  # Wednesday
BAND = ComfortBand(min_c=20.0, max_c=23.0)
OVERNIGHT = QuietHours(start=time(22, 0), end=time(7, 0))

_advisor = ClimateAdvisor(
    recommendation_engine=RecommendationEngine(
        expensive_price_cents=15.0,
        cheap_price_cents=5.0,
        night_start_hour=22,
        night_end_hour=7,
        timezone="America/Toronto",
    )
)


def _check(
    *,
    now: datetime = NOON,
    indoor_temp_c: float = 21.0,
    indoor_rh: float | None = 45.0,
    outdoor_temp_c: float | None = 10.0,
    outdoor_rh: float | None = 50.0,
    readings: tuple[Reading, ...] = (),
    comfort: ComfortBand = BAND,
    state: MonitorState | None = None,
    quiet_hours: QuietHours | None = None,
):
    request = AdvisoryRequest(
        latest_reading=Reading(
            timestamp=now, device_id="sensor-1", temp_c=indoor_temp_c, humidity_rh=indoor_rh
        ),
        readings=readings,
        weather=WeatherSnapshot(temp_c=outdoor_temp_c, humidity_rh=outdoor_rh),
        plan_type="TOU",
        comfort=comfort,
        now=now,
    )
    advisory = _advisor.advise(request)
    monitor = ConditionMonitor(quiet_hours=quiet_hours, timezone="America/Toronto")
    return monitor.evaluate(request, advisory, state)


# ===================================================================
# Recommendation changes
# ===================================================================


class TestStateChange:
    def test_first_check_only_records_state(self) -> None:
        result = _check()

        assert result.notifications == ()
        assert result.state.previous_state == RecommendationState.DO_NOTHING

    def test_unchanged_state_is_silent(self) -> None:
        state = MonitorState(previous_state=RecommendationState.DO_NOTHING)

        assert _check(state=state).notifications == ()

    def test_back_in_comfort_zone(self) -> None:
        state = MonitorState(previous_state=RecommendationState.USE_HEAT)

        result = _check(state=state)

        assert len(result.notifications) == 1
        notification = result.notifications[0]
        assert notification.trigger_type == NotificationTrigger.general
        assert notification.message.startswith("You're back in the comfort zone. ")
        assert "within your day comfort zone" in notification.message
        assert notification.summary == "state changed: USE_HEAT → DO_NOTHING"

    def test_open_window_also_raises_warm_alert(self) -> None:
        state = MonitorState(previous_state=RecommendationState.DO_NOTHING)

        result = _check(
            indoor_temp_c=26.0, indoor_rh=50.0, outdoor_temp_c=15.0, outdoor_rh=40.0, state=state
        )

        window, warm = result.notifications
        assert window.trigger_type == NotificationTrigger.weather_alert
        assert window.message.startswith("Time to open a window! It's 11.0°C cooler outside")
        assert warm.message == (
            "Indoor temperature is 26.0°C, that's 3.0° above your comfort zone. "
            "It's cooler outside, try opening a window!"
        )
        assert warm.summary == "temp 26°C above comfort 23°C"
        assert result.state.previous_state == RecommendationState.OPEN_WINDOW
        assert result.state.last_warm_alert_at == NOON


# ===================================================================
# Mold
# ===================================================================


class TestMoldAlert:
    def test_high_risk_with_drier_outside_air(self, make_readings) -> None:
        result = _check(indoor_rh=80.0, readings=tuple(make_readings([80.0] * 100)))

        assert len(result.notifications) == 1
        notification = result.notifications[0]
        assert notification.trigger_type == NotificationTrigger.mold_risk
        assert notification.message == (
            "Mold risk is HIGH, humidity has been above 70% for 100 minutes today. "
            "Outdoor air is drier, open a window to ventilate."
        )
        assert notification.summary == "mold risk HIGH, RH in=80% out=50%"
        assert result.state.last_mold_alert_at == NOON

    def test_high_risk_with_humid_outside_air(self, make_readings) -> None:
        result = _check(
            indoor_rh=80.0, outdoor_rh=90.0, readings=tuple(make_readings([80.0] * 100))
        )

        assert result.notifications[0].message.endswith(
            "Keep windows closed, outdoor humidity is also high."
        )

    @pytest.mark.parametrize(
        ("minutes_ago", "alerts"), [(30, 0), (60, 0), (61, 1)]
    )
    def test_cooldown(self, make_readings, minutes_ago: int, alerts: int) -> None:
        state = MonitorState(last_mold_alert_at=NOON - timedelta(minutes=minutes_ago))

        result = _check(
            indoor_rh=80.0, readings=tuple(make_readings([80.0] * 100)), state=state
        )

        mold = [n for n in result.notifications if n.trigger_type == NotificationTrigger.mold_risk]
        assert len(mold) == alerts

    def test_low_risk_is_silent(self, make_readings) -> None:
        result = _check(readings=tuple(make_readings([45.0] * 100)))

        assert result.notifications == ()
        assert result.state.last_mold_alert_at is None


# ===================================================================
# Temperature
# ===================================================================


class TestTemperatureAlert:
    def test_cold_room(self) -> None:
        result = _check(indoor_temp_c=17.0, outdoor_temp_c=-5.0)

        assert len(result.notifications) == 1
        notification = result.notifications[0]
        assert notification.trigger_type == NotificationTrigger.weather_alert
        assert notification.message == (
            "Indoor temperature is 17.0°C, that's 3.0° below your daytime comfort zone. "
            "Consider turning up the heat."
        )
        assert notification.summary == "temp 17°C below comfort 20°C"
        assert result.state.last_cold_alert_at == NOON

    def test_within_margin_is_silent(self) -> None:
        assert _check(indoor_temp_c=18.5, outdoor_temp_c=-5.0).notifications == ()

    def test_cold_alert_cooldown(self) -> None:
        state = MonitorState(last_cold_alert_at=NOON - timedelta(minutes=10))

        result = _check(indoor_temp_c=17.0, outdoor_temp_c=-5.0, state=state)

        assert result.notifications == ()
        assert result.state.last_cold_alert_at == NOON - timedelta(minutes=10)

    def test_night_band_is_used_overnight(self) -> None:
        comfort = ComfortBand(min_c=20.0, max_c=23.0, night_min_c=17.0, night_max_c=19.0)

        result = _check(
            now=datetime(2026, 1, 14, 23, 0),
            indoor_temp_c=14.0,
            outdoor_temp_c=-5.0,
            comfort=comfort,
        )

        assert result.notifications[0].message.startswith(
            "Indoor temperature is 14.0°C, that's 3.0° below your nighttime comfort zone."
        )

    def test_hot_room_with_hotter_outside_air(self) -> None:
        result = _check(indoor_temp_c=27.0, outdoor_temp_c=31.0, outdoor_rh=55.0)

        assert len(result.notifications) == 1
        assert result.notifications[0].message.endswith("Close blinds and use AC if available.")


# ===================================================================
# Rate changes
# ===================================================================


class TestRateTip:
    def test_peak_starting(self) -> None:
        now = datetime(2026, 1, 14, 7, 2)

        result = _check(now=now)

        assert len(result.notifications) == 1
        notification = result.notifications[0]
        assert notification.trigger_type == NotificationTrigger.savings_opportunity
        assert notification.message == (
            "Peak electricity hours starting soon, rates going up to 12.2¢/kWh. "
            "Reduce heavy appliance use until 7 PM if possible."
        )
        assert result.state.last_savings_alert_at == now

    def test_off_peak_starting(self) -> None:
        result = _check(now=datetime(2026, 1, 14, 19, 0))

        assert result.notifications[0].message == (
            "Off-peak electricity just started (8.7¢/kWh). "
            "Good time to run laundry, dishwasher, or charge EVs!"
        )
        assert result.notifications[0].summary == "off-peak hours starting"

    @pytest.mark.parametrize("now", [datetime(2026, 1, 14, 7, 5), datetime(2026, 1, 14, 8, 0)])
    def test_outside_window_is_silent(self, now: datetime) -> None:
        assert _check(now=now).notifications == ()

    def test_recent_savings_alert_suppresses_tip(self) -> None:
        now = datetime(2026, 1, 14, 7, 2)
        state = MonitorState(last_savings_alert_at=now - timedelta(minutes=30))

        assert _check(now=now, state=state).notifications == ()

    def test_savings_state_change_in_same_check_suppresses_tip(self) -> None:
        state = MonitorState(previous_state=RecommendationState.DO_NOTHING)

        result = _check(
            now=datetime(2026, 1, 14, 7, 2), indoor_temp_c=19.0, outdoor_temp_c=-5.0, state=state
        )

        assert len(result.notifications) == 1
        assert result.notifications[0].message.startswith(
            "Your space is getting cold, turn up the heat."
        )
        assert result.notifications[0].trigger_type == NotificationTrigger.savings_opportunity


# ===================================================================
# Quiet hours
# ===================================================================


class TestQuietHours:
    @pytest.mark.parametrize(
        ("moment", "expected"),
        [
            (time(23, 0), True),
            (time(22, 0), True),
            (time(6, 59), True),
            (time(7, 0), False),
            (time(12, 0), False),
        ],
    )
    def test_overnight_window_wraps(self, moment: time, expected: bool) -> None:
        assert OVERNIGHT.contains(moment) is expected

    def test_daytime_window(self) -> None:
        window = QuietHours(start=time(9, 0), end=time(17, 0))

        assert window.contains(time(12, 0))
        assert not window.contains(time(17, 0))
        assert not window.contains(time(8, 59))

    def test_empty_window(self) -> None:
        assert not QuietHours(start=time(8, 0), end=time(8, 0)).contains(time(8, 0))

    def test_nothing_raised_and_state_kept(self) -> None:
        state = MonitorState(previous_state=RecommendationState.DO_NOTHING)

        result = _check(
            now=datetime(2026, 1, 14, 23, 0),
            indoor_temp_c=14.0,
            outdoor_temp_c=-5.0,
            state=state,
            quiet_hours=OVERNIGHT,
        )

        assert result.notifications == ()
        assert result.state == state

    def test_outside_quiet_hours_raises_normally(self) -> None:
        result = _check(indoor_temp_c=17.0, outdoor_temp_c=-5.0, quiet_hours=OVERNIGHT)

        assert len(result.notifications) == 1

    def test_quiet_hours_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        settings = Settings(
            _env_file=None, quiet_hours_start=time(11, 0), quiet_hours_end=time(13, 0)
        )
        monkeypatch.setattr("goldilocks.core.notifications.get_settings", lambda: settings)
        request = AdvisoryRequest(now=NOON)

        result = ConditionMonitor().evaluate(request, _advisor.advise(request))

        assert result.notifications == ()
        assert result.state.previous_state is None


def test_module_helper(make_readings) -> None:
    request = AdvisoryRequest(
        readings=tuple(make_readings([80.0] * 100)),
        weather=WeatherSnapshot(temp_c=10.0, humidity_rh=50.0),
        comfort=BAND,
        now=NOON,
    )

    result = evaluate_triggers(request, _advisor.advise(request))

    assert [n.trigger_type for n in result.notifications] == [NotificationTrigger.mold_risk]
    assert result.state.previous_state is not None
    assert _advisor.advise(request).mold_risk.risk_level == RiskLevel.HIGH
