"""Indoor relative-humidity estimate for rooms without a humidity sensor.

Outdoor air that leaks or is ventilated indoors keeps its absolute moisture
content; warming or cooling it to the indoor temperature changes its
relative humidity because saturation vapour pressure depends on temperature
(Magnus formula)::

    e_sat(T) = 6.112 * exp(17.67 * T / (T + 243.5))        [hPa]
    e_actual = RH_out / 100 * e_sat(T_out)
    RH_in   ~= e_actual / e_sat(T_in) * 100 + moisture_boost

The result is a lower bound: cooking, breathing and showers add moisture
that pure air exchange does not see.  The constant boost only partially
accounts for that.  Treat the value as an approximation, never a
measurement.
"""

from __future__ import annotations

import logging
import math

from goldilocks.config import get_settings
from goldilocks.models.enums import EstimateConfidence
from goldilocks.models.schemas import HumidityEstimate, HumidityEstimateDetails, finite_or_none

logger = logging.getLogger(__name__)

MAGNUS_A_HPA = 6.112
MAGNUS_B = 17.67
MAGNUS_C = 243.5

# The Magnus fit is meaningless outside this range and e_sat underflows near -243.5.
PLAUSIBLE_TEMP_C = (-80.0, 80.0)

HIGH_CONFIDENCE_DELTA_C = 5.0
MEDIUM_CONFIDENCE_DELTA_C = 15.0


def saturation_vapor_pressure(temp_c: float) -> float:
    """Saturation vapour pressure over water in hPa."""

    return MAGNUS_A_HPA * math.exp((MAGNUS_B * temp_c) / (temp_c + MAGNUS_C))


def confidence_for_gap(delta_c: float) -> EstimateConfidence:
    if delta_c < HIGH_CONFIDENCE_DELTA_C:
        return EstimateConfidence.HIGH
    if delta_c < MEDIUM_CONFIDENCE_DELTA_C:
        return EstimateConfidence.MEDIUM
    return EstimateConfidence.LOW


class HumidityEstimator:
    def __init__(self, *, moisture_boost_pct: float | None = None) -> None:
        self._boost = (
            moisture_boost_pct
            if moisture_boost_pct is not None
            else get_settings().moisture_boost_pct
        )

    def estimate(
        self,
        indoor_temp_c: float | None,
        outdoor_temp_c: float | None,
        outdoor_rh: float | None,
        moisture_boost_pct: float | None = None,
    ) -> HumidityEstimate:
        raw = (indoor_temp_c, outdoor_temp_c, outdoor_rh)
        if any(value is None for value in raw):
            logger.debug("Humidity estimate skipped: missing input %s", raw)
            return HumidityEstimate(
                humidity_rh=None, confidence=EstimateConfidence.NONE, method="missing_data"
            )
        indoor, outdoor, rh_out = (finite_or_none(value) for value in raw)
        if (
            indoor is None
            or outdoor is None
            or rh_out is None
            or not all(PLAUSIBLE_TEMP_C[0] <= t <= PLAUSIBLE_TEMP_C[1] for t in (indoor, outdoor))
        ):
            logger.debug("Humidity estimate skipped: invalid input %s", raw)
            return HumidityEstimate(
                humidity_rh=None, confidence=EstimateConfidence.NONE, method="invalid_data"
            )

        boost = finite_or_none(moisture_boost_pct)
        if boost is None:
            boost = self._boost

        e_sat_out = saturation_vapor_pressure(outdoor)
        e_sat_in = saturation_vapor_pressure(indoor)
        e_actual = (rh_out / 100) * e_sat_out
        # Same algebra as e_actual / e_sat_in * 100, but exact when the temperatures match.
        base = rh_out * (e_sat_out / e_sat_in)
        estimated = max(0.0, min(100.0, base + boost))

        return HumidityEstimate(
            humidity_rh=round(estimated, 1),
            confidence=confidence_for_gap(abs(indoor - outdoor)),
            method="magnus_estimate",
            details=HumidityEstimateDetails(
                indoor_temp_c=indoor,
                outdoor_temp_c=outdoor,
                outdoor_rh=rh_out,
                e_sat_outdoor=round(e_sat_out, 2),
                e_sat_indoor=round(e_sat_in, 2),
                e_actual=round(e_actual, 2),
                base_estimate=base,
                moisture_boost_pct=boost,
            ),
        )


_default_estimator = HumidityEstimator()


def estimate_indoor_humidity(
    indoor_temp_c: float | None,
    outdoor_temp_c: float | None,
    outdoor_rh: float | None,
    moisture_boost_pct: float | None = None,
) -> HumidityEstimate:
    return _default_estimator.estimate(
        indoor_temp_c, outdoor_temp_c, outdoor_rh, moisture_boost_pct
    )


__all__ = [
    "HumidityEstimator",
    "confidence_for_gap",
    "estimate_indoor_humidity",
    "saturation_vapor_pressure",
]
