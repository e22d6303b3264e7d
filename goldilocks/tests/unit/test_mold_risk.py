"""Unit tests for mold risk classification."""

from __future__ import annotations

import pytest

from goldilocks.core.mold_risk import (
    NO_DATA_EXPLANATION,
    MoldRiskEngine,
    compute_mold_risk,
    round_half_up,
)
from goldilocks.models.enums import RiskLevel


def _make_engine() -> MoldRiskEngine:
    return MoldRiskEngine(
        high_cumulative_minutes=180, high_consecutive_minutes=90, medium_minutes=60
    )


class TestStats:
    def test_band_boundaries_are_strict(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([59.9, 60.0, 60.1, 70.0, 70.1]))

        assert result.stats.minutes_over_60 == 3
        assert result.stats.minutes_over_70 == 1
        assert result.stats.minutes_60_70 == 2
        assert result.stats.max_consecutive_over_70 == 1
        assert result.stats.current_humidity == 70.1
        assert result.stats.reading_count == 5

    def test_run_resets_below_seventy(self, make_readings) -> None:
        humidities = [75.0] * 10 + [65.0] + [75.0] * 20 + [50.0] + [75.0] * 5
        result = _make_engine().compute(make_readings(humidities))

        assert result.stats.max_consecutive_over_70 == 20
        assert result.stats.minutes_over_70 == 35

    def test_interval_scales_minutes(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([75.0] * 100, step_minutes=2), 2)

        assert result.stats.minutes_over_70 == 200
        assert result.stats.max_consecutive_over_70 == 200
        assert result.risk_level == RiskLevel.HIGH

    def test_readings_without_humidity_are_skipped(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([65.0, None, 65.0, float("nan")]))

        assert result.stats.reading_count == 2
        assert result.stats.minutes_over_60 == 2

    def test_accepts_plain_mappings(self) -> None:
        result = _make_engine().compute([{"humidity_rh": 72.0}, {"humidity_rh": 40.0}, {}])

        assert result.stats.minutes_over_70 == 1
        assert result.stats.reading_count == 2


class TestClassification:
    def test_long_humid_stretch_is_high(self, make_readings) -> None:
        # 200 minutes at 75% followed by the rest of the day at 30%.
        result = _make_engine().compute(make_readings([75.0] * 200 + [30.0] * 1240))

        assert result.risk_level == RiskLevel.HIGH
        assert result.stats.minutes_over_70 == 200
        assert result.stats.max_consecutive_over_70 == 200
        assert result.risk_score == 82
        assert result.explanation.startswith("Humidity has been above 70% for 3.3 hours today.")
        assert "Peak continuous stretch: 3.3 hours." in result.explanation

    def test_continuous_run_alone_is_high(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([75.0] * 91))

        assert result.risk_level == RiskLevel.HIGH
        assert result.risk_score == 70

    def test_cumulative_exposure_alone_is_high(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([75.0, 50.0] * 181))

        assert result.risk_level == RiskLevel.HIGH
        assert result.stats.max_consecutive_over_70 == 1
        assert result.risk_score == 80
        assert "Peak continuous stretch" not in result.explanation

    def test_exactly_at_thresholds_is_not_high(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([75.0] * 90))

        assert result.risk_level == RiskLevel.MEDIUM

    def test_high_score_is_capped(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([80.0] * 400))

        assert result.risk_score == 100

    def test_medium(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([65.0] * 120))

        assert result.risk_level == RiskLevel.MEDIUM
        assert result.risk_score == 43
        assert result.explanation == (
            "Humidity has been above 60% for 2.0 hours today. "
            "Monitor and ventilate when outdoor air is drier."
        )

    def test_medium_score_is_capped(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([65.0] * 1000))

        assert result.risk_level == RiskLevel.MEDIUM
        assert result.risk_score == 59

    def test_low(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([65.0] * 30 + [45.0] * 100))

        assert result.risk_level == RiskLevel.LOW
        assert result.risk_score == 12
        assert result.explanation == "Humidity levels are within safe range. No mold risk detected."

    def test_low_at_medium_threshold(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([65.0] * 60))

        assert result.risk_level == RiskLevel.LOW
        assert result.risk_score == 24

    def test_dry_day_scores_zero(self, make_readings) -> None:
        result = _make_engine().compute(make_readings([40.0] * 60))

        assert result.risk_level == RiskLevel.LOW
        assert result.risk_score == 0

    @pytest.mark.parametrize("humidities", [[], [None, None]])
    def test_no_data_is_unknown(self, make_readings, humidities) -> None:
        result = _make_engine().compute(make_readings(humidities))

        assert result.risk_level == RiskLevel.UNKNOWN
        assert result.risk_score == 0
        assert result.explanation == NO_DATA_EXPLANATION
        assert result.stats.reading_count == 0

    def test_custom_thresholds(self, make_readings) -> None:
        engine = MoldRiskEngine(
            high_cumulative_minutes=10, high_consecutive_minutes=5, medium_minutes=2
        )

        assert engine.compute(make_readings([75.0] * 6)).risk_level == RiskLevel.HIGH
        assert engine.compute(make_readings([65.0] * 3)).risk_level == RiskLevel.MEDIUM

    def test_idempotent(self, make_readings) -> None:
        readings = make_readings([62.0, 71.0, 73.0, 58.0])
        engine = _make_engine()

        assert engine.compute(readings) == engine.compute(readings)

    def test_module_helper(self, make_readings) -> None:
        assert compute_mold_risk(make_readings([50.0])).risk_level == RiskLevel.LOW


@pytest.mark.parametrize(
    ("value", "expected"), [(0.4, 0), (0.5, 1), (1.5, 2), (2.5, 3), (22.22, 22)]
)
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected


class TestIntervalSanitation:
    @pytest.mark.parametrize("interval", [float("nan"), float("inf"), None, 0, -10])
    def test_unusable_interval_counts_one_minute(self, make_readings, interval) -> None:
        result = _make_engine().compute(make_readings([80.0] * 5), interval)

        assert result.stats.minutes_over_70 == 5
        assert result.stats.max_consecutive_over_70 == 5
        assert result.risk_level == RiskLevel.LOW
        assert result.risk_score == 2

    def test_module_helper_tolerates_nan_interval(self, make_readings) -> None:
        result = compute_mold_risk(make_readings([80.0]), float("nan"))

        assert result.stats.minutes_over_70 == 1
