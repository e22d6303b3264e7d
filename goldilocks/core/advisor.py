"""One-call advisory for a dashboard refresh.

Runs the full decision flow on inputs the caller has already fetched:

1. take the latest reading (21 °C when the sensor has never reported);
2. estimate indoor humidity when the sensor has no humidity channel;
3. score mold risk over the supplied reading window;
4. resolve the current electricity rate and the season's full schedule;
5. pick a recommendation using the day or night comfort band;
6. price the HVAC alternative towards the band's midpoint.

Nothing here performs I/O or keeps state between calls.
"""

from __future__ import annotations

import logging

from goldilocks.config import get_settings
from goldilocks.core.cost_model import CostModel
from goldilocks.core.humidity_estimator import HumidityEstimator
from goldilocks.core.mold_risk import MoldRiskEngine
from goldilocks.core.rate_schedule import RateSchedule
from goldilocks.core.recommendation_engine import RecommendationEngine, recommendation_text
from goldilocks.core.timeutil import to_local
from goldilocks.models.enums import ComfortPeriod
from goldilocks.models.schemas import (
    Advisory,
    AdvisoryRequest,
    IndoorConditions,
    RecommendationRequest,
)

logger = logging.getLogger(__name__)


class ClimateAdvisor:
    """Compose the rate, humidity, mold, recommendation and cost engines."""

    def __init__(
        self,
        *,
        rate_schedule: RateSchedule | None = None,
        humidity_estimator: HumidityEstimator | None = None,
        mold_engine: MoldRiskEngine | None = None,
        recommendation_engine: RecommendationEngine | None = None,
        cost_model: CostModel | None = None,
    ) -> None:
        self._rates = rate_schedule or RateSchedule()
        self._humidity = humidity_estimator or HumidityEstimator()
        self._mold = mold_engine or MoldRiskEngine()
        self._recommender = recommendation_engine or RecommendationEngine()
        self._costs = cost_model or CostModel()

    def advise(self, request: AdvisoryRequest) -> Advisory:
        settings = get_settings()
        now = to_local(request.now)
        latest = request.latest_reading
        if latest is None and request.readings:
            latest = request.readings[-1]

        indoor_temp = (
            latest.temp_c
            if latest is not None and latest.temp_c is not None
            else settings.default_indoor_temp_c
        )
        indoor_rh = latest.humidity_rh if latest is not None else None
        weather = request.weather

        estimated = False
        humidity_confidence = None
        if indoor_rh is None and weather.temp_c is not None and weather.humidity_rh is not None:
            estimate = self._humidity.estimate(indoor_temp, weather.temp_c, weather.humidity_rh)
            if estimate.humidity_rh is not None:
                indoor_rh = estimate.humidity_rh
                estimated = True
                humidity_confidence = estimate.confidence

        mold_risk = self._mold.compute(request.readings, request.reading_interval_minutes)
        rate = self._rates.get_current_rate(request.plan_type, now)
        schedule = self._rates.get_full_schedule(request.plan_type, now)

        comfort = request.comfort
        recommendation = self._recommender.recommend(
            RecommendationRequest(
                indoor_temp_c=indoor_temp,
                indoor_rh=indoor_rh,
                outdoor_temp_c=weather.temp_c,
                outdoor_rh=weather.humidity_rh,
                comfort_min=comfort.min_c,
                comfort_max=comfort.max_c,
                comfort_min_night=comfort.night_min_c,
                comfort_max_night=comfort.night_max_c,
                price_cents_per_kwh=rate.price_cents_per_kwh,
                period_label=rate.period_label,
                forecast=weather.forecast,
                mold_risk_level=mold_risk.risk_level,
                now=now,
            )
        )

        if recommendation.comfort_period == ComfortPeriod.night:
            band_min, band_max = comfort.night_min_c, comfort.night_max_c
        else:
            band_min, band_max = comfort.min_c, comfort.max_c
        cost_estimate = self._costs.estimate_cost(
            indoor_temp_c=indoor_temp,
            target_c=(band_min + band_max) / 2,
            price_cents_per_kwh=rate.price_cents_per_kwh,
            housing_type=request.housing_type,
            ac_cop=request.ac_cop,
            kwh_per_degc=request.kwh_per_degc,
        )

        logger.info(
            "Advisory: state=%s rate=%s¢/kWh mold=%s estimated_rh=%s",
            recommendation.state,
            rate.price_cents_per_kwh,
            mold_risk.risk_level,
            estimated,
        )
        return Advisory(
            indoor=IndoorConditions(
                temp_c=indoor_temp,
                humidity_rh=indoor_rh,
                humidity_estimated=estimated,
                humidity_confidence=humidity_confidence,
                pressure_hpa=latest.pressure_hpa if latest is not None else None,
                sensor_online=latest is not None,
                last_updated=latest.timestamp if latest is not None else None,
            ),
            rate=rate,
            schedule=schedule,
            recommendation=recommendation,
            recommendation_text=recommendation_text(recommendation.state),
            cost_estimate=cost_estimate,
            mold_risk=mold_risk,
            readings_count=len(request.readings),
        )


__all__ = ["ClimateAdvisor"]
