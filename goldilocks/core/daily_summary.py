"""Per-day savings and humidity summary built from a day of readings."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date

from goldilocks.config import get_settings
from goldilocks.core.carbon import daily_carbon_savings
from goldilocks.core.cost_model import CostModel
from goldilocks.core.mold_risk import MoldRiskEngine
from goldilocks.core.timeutil import to_local
from goldilocks.models.enums import HeatingSource, HousingType
from goldilocks.models.schemas import ComfortBand, DailySummary, Reading, finite_or_none

logger = logging.getLogger(__name__)

# Readings closer than this to the comfort target would not have run HVAC.
HVAC_DEADBAND_C = 0.5


def summarize_day(
    day: date,
    readings: Iterable[Reading],
    *,
    comfort: ComfortBand | None = None,
    price_cents_per_kwh: float | None,
    housing_type: HousingType | str | None = None,
    heating_source: HeatingSource | str = HeatingSource.gas,
    interval_minutes: float | None = 1.0,
    cost_model: CostModel | None = None,
    mold_engine: MoldRiskEngine | None = None,
) -> DailySummary:
    """Estimate the HVAC energy a day of ventilation advice avoided.

    Each reading stands for ``interval_minutes``; any reading at least half a
    degree away from the comfort target is credited with the energy needed to
    bring the room back, pro-rated to that slice of time.
    """

    comfort = comfort or ComfortBand()
    cost_model = cost_model or CostModel()
    mold_engine = mold_engine or MoldRiskEngine()

    price = finite_or_none(price_cents_per_kwh)
    if price is None:
        price = get_settings().default_price_cents_per_kwh
        logger.debug("Invalid price %r, using default %s", price_cents_per_kwh, price)
    interval = finite_or_none(interval_minutes)
    if interval is None or interval <= 0:
        interval = 1.0

    todays = sorted(
        (r for r in readings if to_local(r.timestamp).date() == day), key=lambda r: r.timestamp
    )
    if not todays:
        return DailySummary(day=day)

    mold = mold_engine.compute(todays, interval)
    target = (comfort.min_c + comfort.max_c) / 2
    slice_hours = interval / 60

    kwh_saved = 0.0
    for reading in todays:
        if reading.temp_c is None or abs(reading.temp_c - target) < HVAC_DEADBAND_C:
            continue
        estimate = cost_model.estimate_cost(
            indoor_temp_c=reading.temp_c,
            target_c=target,
            price_cents_per_kwh=price,
            housing_type=housing_type,
        )
        kwh_saved += estimate.kwh_room * slice_hours

    kwh_saved = round(kwh_saved, 3)
    summary = DailySummary(
        day=day,
        kwh_saved_est=kwh_saved,
        dollars_saved_est=round(kwh_saved * price / 100, 2),
        co2_saved_g=round(daily_carbon_savings(kwh_saved, heating_source), 1),
        minutes_over_60=mold.stats.minutes_over_60,
        minutes_over_70=mold.stats.minutes_over_70,
        risk_level=mold.risk_level,
        reading_count=len(todays),
    )
    logger.info(
        "Summary for %s: %s kWh, $%s, %sg CO2, %d readings, risk=%s",
        day,
        summary.kwh_saved_est,
        summary.dollars_saved_est,
        summary.co2_saved_g,
        summary.reading_count,
        summary.risk_level,
    )
    return summary


__all__ = ["summarize_day"]
