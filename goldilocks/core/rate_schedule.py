"""Electricity rate resolution for Ontario residential plans (OEB 2025/2026).

Three plan types are supported:

* ``TOU``    - time-of-use; price varies by hour and weekday/weekend.
* ``ULO``    - ultra-low overnight; very cheap 00-07, expensive on-peak.
* ``TIERED`` - flat tier-1 price up to a monthly threshold, tier-2 above it.

Seasons follow the calendar, not the weather: May through October is
summer, November through April is winter.  Monthly usage is not tracked, so
tiered plans always report the tier-1 price along with the tier-2 price and
threshold for display.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from types import MappingProxyType

from goldilocks.config import get_settings
from goldilocks.core.timeutil import to_local
from goldilocks.models.enums import DayType, PlanType, Season
from goldilocks.models.schemas import CurrentRate, FullSchedule, RatePeriod, TierRates

logger = logging.getLogger(__name__)

Schedule = tuple[RatePeriod, ...]
SeasonTables = Mapping[Season, Mapping[DayType, Schedule]]

SUMMER_MONTHS = range(5, 11)


class RateScheduleError(ValueError):
    """Raised when a rate table does not partition the day."""


def _periods(*rows: tuple[int, int, float, str]) -> Schedule:
    return tuple(
        RatePeriod(start_hour=start, end_hour=end, price_cents_per_kwh=rate, label=label)
        for start, end, rate, label in rows
    )


_TOU_WEEKDAY = _periods(
    (0, 7, 8.7, "Off-Peak"),
    (7, 11, 12.2, "Mid-Peak"),
    (11, 17, 17.0, "On-Peak"),
    (17, 19, 12.2, "Mid-Peak"),
    (19, 24, 8.7, "Off-Peak"),
)
_TOU_WEEKEND = _periods((0, 24, 8.7, "Off-Peak"))

_ULO_WEEKDAY = _periods(
    (0, 7, 2.8, "Ultra-Low Overnight"),
    (7, 11, 12.2, "Mid-Peak"),
    (11, 17, 24.2, "On-Peak"),
    (17, 19, 12.2, "Mid-Peak"),
    (19, 24, 8.7, "Off-Peak"),
)
_ULO_WEEKEND = _periods(
    (0, 7, 2.8, "Ultra-Low Overnight"),
    (7, 19, 8.7, "Weekend Off-Peak"),
    (19, 24, 8.7, "Off-Peak"),
)

TOU_RATES: SeasonTables = MappingProxyType(
    {
        Season.winter: MappingProxyType({DayType.weekday: _TOU_WEEKDAY, DayType.weekend: _TOU_WEEKEND}),
        Season.summer: MappingProxyType({DayType.weekday: _TOU_WEEKDAY, DayType.weekend: _TOU_WEEKEND}),
    }
)

ULO_RATES: SeasonTables = MappingProxyType(
    {
        Season.winter: MappingProxyType({DayType.weekday: _ULO_WEEKDAY, DayType.weekend: _ULO_WEEKEND}),
        Season.summer: MappingProxyType({DayType.weekday: _ULO_WEEKDAY, DayType.weekend: _ULO_WEEKEND}),
    }
)

TIERED_RATES: Mapping[Season, TierRates] = MappingProxyType(
    {
        Season.winter: TierRates(tier1_threshold_kwh=1000, tier1_rate=10.3, tier2_rate=12.5),
        Season.summer: TierRates(tier1_threshold_kwh=600, tier1_rate=10.3, tier2_rate=12.5),
    }
)


def validate_schedule(periods: Sequence[RatePeriod]) -> Schedule:
    """Check that ``periods`` cover [0, 24) in order with no gaps or overlaps."""

    if not periods:
        raise RateScheduleError("rate schedule has no periods")
    expected_start = 0
    for period in periods:
        if period.start_hour != expected_start:
            kind = "overlap" if period.start_hour < expected_start else "gap"
            raise RateScheduleError(
                f"rate schedule {kind} at hour {expected_start} ({period.label})"
            )
        expected_start = period.end_hour
    if expected_start != 24:
        raise RateScheduleError(f"rate schedule ends at hour {expected_start}, not 24")
    return tuple(periods)


def _validate_tables(name: str, tables: SeasonTables) -> SeasonTables:
    frozen: dict[Season, Mapping[DayType, Schedule]] = {}
    for season in Season:
        by_day = tables.get(season)
        if by_day is None:
            raise RateScheduleError(f"{name} has no {season} table")
        day_tables: dict[DayType, Schedule] = {}
        for day_type in DayType:
            periods = by_day.get(day_type)
            if periods is None:
                raise RateScheduleError(f"{name} has no {season}/{day_type} table")
            try:
                day_tables[day_type] = validate_schedule(periods)
            except RateScheduleError as exc:
                raise RateScheduleError(f"{name} {season}/{day_type}: {exc}") from exc
        frozen[season] = MappingProxyType(day_tables)
    return MappingProxyType(frozen)


def season_for(timestamp: datetime) -> Season:
    return Season.summer if timestamp.month in SUMMER_MONTHS else Season.winter


def day_type_for(timestamp: datetime) -> DayType:
    return DayType.weekend if timestamp.weekday() >= 5 else DayType.weekday


def parse_plan_type(plan_type: str | PlanType | None) -> PlanType:
    """Resolve a plan identifier, defaulting to TOU for anything unrecognized."""

    if isinstance(plan_type, PlanType):
        return plan_type
    if isinstance(plan_type, str):
        try:
            return PlanType(plan_type.strip().upper())
        except ValueError:
            pass
    logger.warning("Unknown electricity plan %r, defaulting to TOU", plan_type)
    return PlanType.TOU


class RateSchedule:
    """Resolve the current electricity price from fixed weekly/seasonal tables."""

    def __init__(
        self,
        *,
        tou: SeasonTables | None = None,
        ulo: SeasonTables | None = None,
        tiered: Mapping[Season, TierRates] | None = None,
        timezone: str | None = None,
    ) -> None:
        self._tables: dict[PlanType, SeasonTables] = {
            PlanType.TOU: _validate_tables("TOU", tou or TOU_RATES),
            PlanType.ULO: _validate_tables("ULO", ulo or ULO_RATES),
        }
        tiers = tiered or TIERED_RATES
        missing = [season for season in Season if season not in tiers]
        if missing:
            raise RateScheduleError(f"tiered plan has no {missing[0]} tiers")
        self._tiers: Mapping[Season, TierRates] = MappingProxyType(dict(tiers))
        self._timezone = timezone or get_settings().timezone

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get_current_rate(
        self, plan_type: str | PlanType | None = None, timestamp: datetime | None = None
    ) -> CurrentRate:
        plan = parse_plan_type(plan_type if plan_type is not None else get_settings().default_plan_type)
        local = to_local(timestamp, self._timezone)
        season = season_for(local)

        if plan == PlanType.TIERED:
            tiers = self._tiers[season]
            return CurrentRate(
                price_cents_per_kwh=tiers.tier1_rate,
                period_label=f"Tier 1 (up to {tiers.tier1_threshold_kwh} kWh/mo)",
                plan_type=plan,
                season=season,
                tier2_rate=tiers.tier2_rate,
                tier1_threshold_kwh=tiers.tier1_threshold_kwh,
            )

        period = self.period_at(plan, local)
        return CurrentRate(
            price_cents_per_kwh=period.price_cents_per_kwh,
            period_label=period.label,
            plan_type=plan,
            season=season,
        )

    def get_full_schedule(
        self, plan_type: str | PlanType | None = None, timestamp: datetime | None = None
    ) -> FullSchedule:
        plan = parse_plan_type(plan_type if plan_type is not None else get_settings().default_plan_type)
        season = season_for(to_local(timestamp, self._timezone))
        if plan == PlanType.TIERED:
            return FullSchedule(plan_type=plan, season=season, tiers=self._tiers[season])
        tables = self._tables[plan][season]
        return FullSchedule(
            plan_type=plan,
            season=season,
            weekday=tables[DayType.weekday],
            weekend=tables[DayType.weekend],
        )

    def period_at(self, plan_type: PlanType, local_time: datetime) -> RatePeriod:
        """Return the period containing ``local_time`` for a time-varying plan."""

        schedule = self._tables[plan_type][season_for(local_time)][day_type_for(local_time)]
        hour = local_time.hour
        for period in schedule:
            if period.contains(hour):
                return period
        logger.warning("No rate period covers hour %d; using first period", hour)
        return schedule[0]


_default_schedule: RateSchedule | None = None


def _schedule() -> RateSchedule:
    global _default_schedule
    if _default_schedule is None:
        _default_schedule = RateSchedule()
    return _default_schedule


def get_current_rate(
    plan_type: str | PlanType | None = None, timestamp: datetime | None = None
) -> CurrentRate:
    return _schedule().get_current_rate(plan_type, timestamp)


def get_full_schedule(
    plan_type: str | PlanType | None = None, timestamp: datetime | None = None
) -> FullSchedule:
    return _schedule().get_full_schedule(plan_type, timestamp)


# Built-in tables must always be valid.
_validate_tables("TOU", TOU_RATES)
_validate_tables("ULO", ULO_RATES)


__all__ = [
    "TIERED_RATES",
    "TOU_RATES",
    "ULO_RATES",
    "RateSchedule",
    "RateScheduleError",
    "day_type_for",
    "get_current_rate",
    "get_full_schedule",
    "parse_plan_type",
    "season_for",
    "validate_schedule",
]
