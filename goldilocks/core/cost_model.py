"""Heating/cooling cost model.

Energy to move a room one degree uses a lumped thermal-mass heuristic::

    kWh per degC = k * 0.000335 * V

where ``k`` is a furnishing factor (light ~3, typical room ~5, masonry ~9)
and ``V`` the room volume in cubic metres.  Heating is priced at an
effective COP of 1.0 (resistive / furnace equivalent); cooling divides by
the AC's COP.  Ventilation is assumed free, so the savings of opening a
window equal the HVAC cost it replaces.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from goldilocks.models.enums import HousingType, HvacMode
from goldilocks.models.schemas import (
    CostAssumptions,
    CostEstimate,
    CostRequest,
    PeriodSavings,
    finite_or_none,
)

logger = logging.getLogger(__name__)

THERMAL_MASS_COEFFICIENT = 0.000335
MONEY_DECIMALS = 4
ENERGY_DECIMALS = 3


@dataclass(frozen=True, slots=True)
class HousingProfile:
    volume_m3: float
    furnishing_factor: float

    @property
    def kwh_per_degc(self) -> float:
        return self.furnishing_factor * THERMAL_MASS_COEFFICIENT * self.volume_m3


HOUSING_PROFILES: Mapping[HousingType, HousingProfile] = MappingProxyType(
    {
        HousingType.dorm: HousingProfile(volume_m3=30, furnishing_factor=5),
        HousingType.apartment: HousingProfile(volume_m3=45, furnishing_factor=5),
        HousingType.house: HousingProfile(volume_m3=80, furnishing_factor=7),
        HousingType.basement: HousingProfile(volume_m3=35, furnishing_factor=7),
        HousingType.other: HousingProfile(volume_m3=40, furnishing_factor=5),
    }
)


class CostModel:
    """Next-hour cost comparison between HVAC and ventilation."""

    def __init__(self, profiles: Mapping[HousingType, HousingProfile] | None = None) -> None:
        self._profiles = MappingProxyType(dict(profiles or HOUSING_PROFILES))

    def profile(self, housing_type: HousingType) -> HousingProfile:
        return self._profiles.get(housing_type) or HOUSING_PROFILES[HousingType.apartment]

    def estimate(self, request: CostRequest) -> CostEstimate:
        profile = self.profile(request.housing_type)
        kwh_per_degc = request.kwh_per_degc or profile.kwh_per_degc
        price_dollars = request.price_cents_per_kwh / 100

        delta_t = abs(request.target_c - request.indoor_temp_c)
        kwh_room = kwh_per_degc * delta_t
        cost_heat = kwh_room * price_dollars
        cost_ac = (kwh_room / request.ac_cop) * price_dollars
        cost_window = 0.0

        if request.indoor_temp_c > request.target_c:
            mode, hvac_cost = HvacMode.AC, cost_ac
        elif request.indoor_temp_c < request.target_c:
            mode, hvac_cost = HvacMode.HEAT, cost_heat
        else:
            mode, hvac_cost = HvacMode.NONE, 0.0

        return CostEstimate(
            cost_heat=round(cost_heat, MONEY_DECIMALS),
            cost_ac=round(cost_ac, MONEY_DECIMALS),
            cost_window=cost_window,
            hvac_cost=round(hvac_cost, MONEY_DECIMALS),
            savings=round(hvac_cost - cost_window, MONEY_DECIMALS),
            delta_t=round(delta_t, 1),
            kwh_room=round(kwh_room, ENERGY_DECIMALS),
            mode=mode,
            assumptions=CostAssumptions(
                kwh_per_degc=round(kwh_per_degc, 4),
                ac_cop=request.ac_cop,
                room_volume_m3=profile.volume_m3,
                furnishing_factor=profile.furnishing_factor,
                housing_type=request.housing_type,
            ),
        )

    def estimate_cost(
        self,
        *,
        indoor_temp_c: float | None,
        target_c: float | None,
        price_cents_per_kwh: float | None = None,
        housing_type: str | HousingType | None = None,
        ac_cop: float | None = None,
        kwh_per_degc: float | None = None,
    ) -> CostEstimate:
        fields: dict[str, Any] = {
            "indoor_temp_c": indoor_temp_c,
            "target_c": target_c,
            "kwh_per_degc": kwh_per_degc,
        }
        if price_cents_per_kwh is not None:
            fields["price_cents_per_kwh"] = price_cents_per_kwh
        if housing_type is not None:
            fields["housing_type"] = housing_type
        if ac_cop is not None:
            fields["ac_cop"] = ac_cop
        return self.estimate(CostRequest(**fields))


def calculate_period_savings(daily_summaries: Iterable[Any]) -> PeriodSavings:
    """Total the estimated savings over a run of daily summaries.

    Accepts :class:`~goldilocks.models.schemas.DailySummary` objects or plain
    mappings with ``dollars_saved_est`` / ``kwh_saved_est`` keys.
    """

    dollars = 0.0
    kwh = 0.0
    days = 0
    for day in daily_summaries:
        days += 1
        if isinstance(day, Mapping):
            day_dollars, day_kwh = day.get("dollars_saved_est"), day.get("kwh_saved_est")
        else:
            day_dollars = getattr(day, "dollars_saved_est", None)
            day_kwh = getattr(day, "kwh_saved_est", None)
        dollars += finite_or_none(day_dollars) or 0.0
        kwh += finite_or_none(day_kwh) or 0.0
    return PeriodSavings(dollars_saved=round(dollars, 2), kwh_saved=round(kwh, 2), days=days)


_default_model = CostModel()


def estimate_cost(
    *,
    indoor_temp_c: float | None,
    target_c: float | None,
    price_cents_per_kwh: float | None = None,
    housing_type: str | HousingType | None = None,
    ac_cop: float | None = None,
    kwh_per_degc: float | None = None,
) -> CostEstimate:
    return _default_model.estimate_cost(
        indoor_temp_c=indoor_temp_c,
        target_c=target_c,
        price_cents_per_kwh=price_cents_per_kwh,
        housing_type=housing_type,
        ac_cop=ac_cop,
        kwh_per_degc=kwh_per_degc,
    )


__all__ = [
    "HOUSING_PROFILES",
    "CostModel",
    "HousingProfile",
    "calculate_period_savings",
    "estimate_cost",
]
