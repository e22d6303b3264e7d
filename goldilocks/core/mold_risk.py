"""Mold risk from a rolling window of indoor humidity readings.

Every valid reading stands for ``interval_minutes`` of exposure and falls in
exactly one band:

* ``RH > 70``       counts towards minutes over 70 and over 60 and extends
  the current run above 70;
* ``60 < RH <= 70`` counts towards minutes over 60 and 60-70, ends the run;
* ``RH <= 60``      ends the run.

Both thresholds are strict, so 60.0 is safe and 70.0 is in the 60-70 band.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

from goldilocks.config import get_settings
from goldilocks.models.enums import RiskLevel
from goldilocks.models.schemas import MoldRiskResult, MoldRiskStats, finite_or_none

logger = logging.getLogger(__name__)

HUMID_RH = 60.0
VERY_HUMID_RH = 70.0

NO_DATA_EXPLANATION = (
    "No humidity data available. Connect a humidity sensor to enable mold risk tracking."
)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _humidity_of(reading: Any) -> float | None:
    if isinstance(reading, Mapping):
        value = reading.get("humidity_rh")
    else:
        value = getattr(reading, "humidity_rh", None)
    return finite_or_none(value)


class MoldRiskEngine:
    """Derive a mold risk level, score and explanation from humidity exposure."""

    def __init__(
        self,
        *,
        high_cumulative_minutes: float | None = None,
        high_consecutive_minutes: float | None = None,
        medium_minutes: float | None = None,
    ) -> None:
        settings = get_settings()
        self.high_cumulative_minutes = (
            high_cumulative_minutes
            if high_cumulative_minutes is not None
            else settings.mold_high_cumulative_minutes
        )
        self.high_consecutive_minutes = (
            high_consecutive_minutes
            if high_consecutive_minutes is not None
            else settings.mold_high_consecutive_minutes
        )
        self.medium_minutes = (
            medium_minutes if medium_minutes is not None else settings.mold_medium_minutes
        )

    def compute(
        self, readings: Iterable[Any], interval_minutes: float | None = 1
    ) -> MoldRiskResult:
        """Scan readings (ascending by time) and classify the exposure.

        Readings without a humidity value are ignored.  An empty window yields
        ``UNKNOWN`` rather than ``LOW`` so callers can tell "no data" from
        "no risk".  An interval that is not a positive finite number falls
        back to one minute.
        """

        interval = finite_or_none(interval_minutes)
        if interval is None or interval <= 0:
            logger.debug("Invalid reading interval %r, assuming 1 minute", interval_minutes)
            interval = 1.0

        humidities = [rh for rh in (_humidity_of(r) for r in readings) if rh is not None]
        if not humidities:
            logger.debug("No valid humidity readings; mold risk unknown")
            return MoldRiskResult(
                risk_level=RiskLevel.UNKNOWN,
                risk_score=0,
                explanation=NO_DATA_EXPLANATION,
                stats=MoldRiskStats(),
            )

        minutes_over_60 = 0.0
        minutes_over_70 = 0.0
        minutes_60_70 = 0.0
        consecutive_over_70 = 0.0
        max_consecutive_over_70 = 0.0

        for rh in humidities:
            if rh > VERY_HUMID_RH:
                minutes_over_70 += interval
                minutes_over_60 += interval
                consecutive_over_70 += interval
                max_consecutive_over_70 = max(max_consecutive_over_70, consecutive_over_70)
            elif rh > HUMID_RH:
                minutes_over_60 += interval
                minutes_60_70 += interval
                consecutive_over_70 = 0.0
            else:
                consecutive_over_70 = 0.0

        stats = MoldRiskStats(
            minutes_over_60=minutes_over_60,
            minutes_over_70=minutes_over_70,
            minutes_60_70=minutes_60_70,
            max_consecutive_over_70=max_consecutive_over_70,
            current_humidity=humidities[-1],
            reading_count=len(humidities),
        )

        if (
            minutes_over_70 > self.high_cumulative_minutes
            or max_consecutive_over_70 > self.high_consecutive_minutes
        ):
            level = RiskLevel.HIGH
            score = min(100, 60 + round_half_up(minutes_over_70 / 360 * 40))
            explanation = (
                f"Humidity has been above 70% for {minutes_over_70 / 60:.1f} hours today."
            )
            if max_consecutive_over_70 > self.high_consecutive_minutes:
                explanation += (
                    f" Peak continuous stretch: {max_consecutive_over_70 / 60:.1f} hours."
                )
            explanation += (
                " Mold can begin growing in these conditions. Ventilate immediately if possible."
            )
        elif minutes_over_60 > self.medium_minutes:
            level = RiskLevel.MEDIUM
            score = min(59, 25 + round_half_up(minutes_over_60 / 240 * 35))
            explanation = (
                f"Humidity has been above 60% for {minutes_over_60 / 60:.1f} hours today. "
                "Monitor and ventilate when outdoor air is drier."
            )
        else:
            level = RiskLevel.LOW
            score = min(24, round_half_up(minutes_over_60 / 60 * 24))
            explanation = "Humidity levels are within safe range. No mold risk detected."

        logger.debug(
            "Mold risk %s (score=%d, over60=%s, over70=%s, run70=%s)",
            level,
            score,
            minutes_over_60,
            minutes_over_70,
            max_consecutive_over_70,
        )
        return MoldRiskResult(risk_level=level, risk_score=score, explanation=explanation, stats=stats)


_default_engine = MoldRiskEngine()


def compute_mold_risk(
    readings: Iterable[Any], interval_minutes: float | None = 1
) -> MoldRiskResult:
    return _default_engine.compute(readings, interval_minutes)


__all__ = ["MoldRiskEngine", "compute_mold_risk", "round_half_up"]
