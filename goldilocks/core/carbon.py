"""CO2 avoided by ventilating instead of running HVAC.

Ontario's grid is mostly nuclear and hydro, so electric heating and cooling
are low-carbon; most avoided emissions come from gas furnaces.
"""

from __future__ import annotations

import logging

from goldilocks.core.mold_risk import round_half_up
from goldilocks.models.enums import HeatingSource, HvacMode
from goldilocks.models.schemas import (
    AvoidedCO2,
    CO2Equivalences,
    CommunityImpact,
    GenerationalMilestone,
    finite_or_none,
)

logger = logging.getLogger(__name__)

GRID_INTENSITY_G_PER_KWH = 35.0
GAS_HEAT_INTENSITY_G_PER_KWH = 185.0
FURNACE_EFFICIENCY = 0.92
HEAT_PUMP_COP = 3.0

TREE_KG_PER_YEAR = 22.0
CAR_G_PER_KM = 170.0
PHONE_CHARGE_G = 8.22
HOT_SHOWER_G_PER_MIN = 90.0
LED_BULB_G_PER_HOUR = 0.35

# Kingston CMA, 2021 census.
COMMUNITY_HOUSEHOLDS = 60_000
COMMUNITY_POPULATION = 136_685
AVG_HOME_CO2_TONNES_YEAR = 5.0

MILESTONE_YEARS = (1, 5, 10, 25, 50)
MILESTONE_DESCRIPTIONS = {
    1: "Year one: building momentum for Kingston's green future",
    5: "Half a decade of cleaner air for Kingston families",
    10: "A full decade, today's children grow up breathing cleaner",
    25: "A generation of sustainable living, setting the standard",
    50: "Two generations, a true Golden Age legacy for Kingston",
}


def _parse_source(heating_source: HeatingSource | str) -> HeatingSource | str:
    try:
        return HeatingSource(heating_source)
    except ValueError:
        return heating_source


def calculate_avoided_co2(
    kwh_avoided: float | None,
    mode: HvacMode | str = HvacMode.HEAT,
    heating_source: HeatingSource | str = HeatingSource.gas,
) -> AvoidedCO2:
    """Grams of CO2 not emitted for ``kwh_avoided`` of HVAC energy.

    An unrecognised heating source is reported back unchanged and priced at
    the raw gas intensity, without the furnace efficiency correction.
    """

    source = _parse_source(heating_source)
    kwh = finite_or_none(kwh_avoided)
    if kwh is None or kwh <= 0:
        return AvoidedCO2(co2_g=0.0, source=source)

    if mode == HvacMode.AC:
        co2_g = kwh * GRID_INTENSITY_G_PER_KWH
    elif mode == HvacMode.HEAT:
        if source == HeatingSource.gas:
            co2_g = kwh / FURNACE_EFFICIENCY * GAS_HEAT_INTENSITY_G_PER_KWH
        elif source == HeatingSource.electric:
            co2_g = kwh * GRID_INTENSITY_G_PER_KWH
        elif source == HeatingSource.heatpump:
            co2_g = kwh / HEAT_PUMP_COP * GRID_INTENSITY_G_PER_KWH
        else:
            logger.debug("Unknown heating source %r, using gas intensity", heating_source)
            co2_g = kwh * GAS_HEAT_INTENSITY_G_PER_KWH
    else:
        co2_g = 0.0
    return AvoidedCO2(co2_g=round(co2_g, 2), source=source)


def get_equivalences(co2_g: float | None) -> CO2Equivalences:
    grams = finite_or_none(co2_g)
    if grams is None or grams <= 0:
        return CO2Equivalences()
    return CO2Equivalences(
        trees_equivalent=round(grams / 1000 / TREE_KG_PER_YEAR, 3),
        km_not_driven=round(grams / CAR_G_PER_KM, 1),
        phone_charges=round_half_up(grams / PHONE_CHARGE_G),
        shower_minutes_saved=round(grams / HOT_SHOWER_G_PER_MIN, 1),
        led_bulb_hours=round_half_up(grams / LED_BULB_G_PER_HOUR),
    )


def get_community_impact(
    user_co2_saved_g: float | None, days_tracked: int | None
) -> CommunityImpact:
    """Project one household's average savings across the whole community."""

    grams = finite_or_none(user_co2_saved_g)
    days = finite_or_none(days_tracked)
    if not days or days <= 0 or not grams:
        return CommunityImpact(households=COMMUNITY_HOUSEHOLDS, population=COMMUNITY_POPULATION)

    daily_avg_g = grams / days
    annual_user_kg = daily_avg_g * 365 / 1000
    community_tonnes = annual_user_kg * COMMUNITY_HOUSEHOLDS / 1000
    residential_tonnes = AVG_HOME_CO2_TONNES_YEAR * COMMUNITY_HOUSEHOLDS

    return CommunityImpact(
        daily_avg_g=round(daily_avg_g, 1),
        annual_user_kg=round(annual_user_kg, 1),
        annual_community_tonnes=round_half_up(community_tonnes),
        annual_community_trees=round_half_up(community_tonnes * 1000 / TREE_KG_PER_YEAR),
        pct_reduction=round(community_tonnes / residential_tonnes * 100, 2),
        households=COMMUNITY_HOUSEHOLDS,
        population=COMMUNITY_POPULATION,
    )


def get_generational_projection(
    annual_community_tonnes: float | None,
) -> list[GenerationalMilestone]:
    """Cumulative savings if the community keeps it up for 1 to 50 years."""

    tonnes = finite_or_none(annual_community_tonnes) or 0.0
    milestones = []
    for years in MILESTONE_YEARS:
        cumulative = tonnes * years
        milestones.append(
            GenerationalMilestone(
                years=years,
                label="This Year" if years == 1 else f"{years} Years",
                cumulative_tonnes=round_half_up(cumulative),
                trees_equivalent=round_half_up(cumulative * 1000 / TREE_KG_PER_YEAR),
                km_equivalent=round_half_up(cumulative * 1e6 / CAR_G_PER_KM),
                description=MILESTONE_DESCRIPTIONS[years],
            )
        )
    return milestones


def daily_carbon_savings(
    kwh_saved: float | None, heating_source: HeatingSource | str = HeatingSource.gas
) -> float:
    """Grams of CO2 avoided in a day, assuming the savings displaced heating."""

    return calculate_avoided_co2(kwh_saved, HvacMode.HEAT, heating_source).co2_g


__all__ = [
    "COMMUNITY_HOUSEHOLDS",
    "COMMUNITY_POPULATION",
    "GAS_HEAT_INTENSITY_G_PER_KWH",
    "GRID_INTENSITY_G_PER_KWH",
    "calculate_avoided_co2",
    "daily_carbon_savings",
    "get_community_impact",
    "get_equivalences",
    "get_generational_projection",
]
