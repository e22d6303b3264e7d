"""Unit tests for avoided-emission estimates."""

from __future__ import annotations

import pytest

from goldilocks.core.carbon import (
    COMMUNITY_HOUSEHOLDS,
    COMMUNITY_POPULATION,
    calculate_avoided_co2,
    daily_carbon_savings,
    get_community_impact,
    get_equivalences,
    get_generational_projection,
)
from goldilocks.models.enums import HeatingSource, HvacMode


class TestAvoidedCO2:
    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            (HeatingSource.gas, 201.09),
            (HeatingSource.electric, 35.0),
            (HeatingSource.heatpump, 11.67),
        ],
    )
    def test_heating_by_source(self, source: HeatingSource, expected: float) -> None:
        result = calculate_avoided_co2(1.0, HvacMode.HEAT, source)

        assert result.co2_g == expected
        assert result.source == source

    def test_cooling_uses_grid_intensity(self) -> None:
        assert calculate_avoided_co2(2.0, HvacMode.AC, "gas").co2_g == 70.0

    def test_no_hvac_avoids_nothing(self) -> None:
        assert calculate_avoided_co2(5.0, HvacMode.NONE).co2_g == 0.0

    @pytest.mark.parametrize("kwh", [0, -1.0, None, float("nan")])
    def test_nothing_saved(self, kwh) -> None:
        assert calculate_avoided_co2(kwh).co2_g == 0.0

    def test_unknown_source_uses_raw_gas_intensity(self) -> None:
        result = calculate_avoided_co2(1.0, HvacMode.HEAT, "coal")

        assert result.source == "coal"
        assert result.co2_g == 185.0

    def test_unknown_source_is_echoed_when_nothing_saved(self) -> None:
        assert calculate_avoided_co2(0.0, HvacMode.HEAT, "wood").source == "wood"

    def test_known_source_given_as_text(self) -> None:
        result = calculate_avoided_co2(1.0, "HEAT", "heatpump")

        assert result.source == HeatingSource.heatpump
        assert result.co2_g == 11.67

    def test_daily_savings_assume_heating(self) -> None:
        assert daily_carbon_savings(2.0, "electric") == 70.0
        assert daily_carbon_savings(0.0) == 0.0


class TestEquivalences:
    def test_one_kilogram(self) -> None:
        result = get_equivalences(1000.0)

        assert result.trees_equivalent == 0.045
        assert result.km_not_driven == 5.9
        assert result.phone_charges == 122
        assert result.shower_minutes_saved == 11.1
        assert result.led_bulb_hours == 2857

    @pytest.mark.parametrize("grams", [0, -5.0, None])
    def test_empty(self, grams) -> None:
        result = get_equivalences(grams)

        assert result.km_not_driven == 0.0
        assert result.phone_charges == 0

    def test_integer_counts_round_half_up(self) -> None:
        # Both divisions land exactly on .5.
        assert get_equivalences(4.11).phone_charges == 1
        assert get_equivalences(0.175).led_bulb_hours == 1


class TestCommunityImpact:
    def test_scales_average_across_households(self) -> None:
        # 20 g/day for a year is 7.3 kg per household.
        impact = get_community_impact(7300.0, 365)

        assert impact.daily_avg_g == 20.0
        assert impact.annual_user_kg == 7.3
        assert impact.annual_community_tonnes == 438
        assert impact.annual_community_trees == 19909
        assert impact.pct_reduction == 0.15
        assert impact.households == COMMUNITY_HOUSEHOLDS
        assert impact.population == COMMUNITY_POPULATION

    @pytest.mark.parametrize(
        ("co2_g", "days"), [(7300.0, 0), (7300.0, -3), (0.0, 30), (None, 30), (500.0, None)]
    )
    def test_nothing_to_project(self, co2_g, days) -> None:
        impact = get_community_impact(co2_g, days)

        assert impact.annual_community_tonnes == 0
        assert impact.pct_reduction == 0.0
        assert impact.households == COMMUNITY_HOUSEHOLDS


class TestGenerationalProjection:
    def test_milestones(self) -> None:
        milestones = get_generational_projection(438)

        assert [m.years for m in milestones] == [1, 5, 10, 25, 50]
        assert [m.label for m in milestones][:2] == ["This Year", "5 Years"]
        assert milestones[0].cumulative_tonnes == 438
        assert milestones[0].trees_equivalent == 19909
        assert milestones[0].km_equivalent == 2576471
        assert milestones[2].cumulative_tonnes == 4380
        assert milestones[2].trees_equivalent == 199091
        assert milestones[2].km_equivalent == 25764706
        assert milestones[4].description.startswith("Two generations")

    def test_feeds_from_community_impact(self) -> None:
        impact = get_community_impact(7300.0, 365)

        first_year = get_generational_projection(impact.annual_community_tonnes)[0]

        assert first_year.cumulative_tonnes == 438

    @pytest.mark.parametrize("tonnes", [0, None, float("nan")])
    def test_no_savings(self, tonnes) -> None:
        milestones = get_generational_projection(tonnes)

        assert len(milestones) == 5
        assert all(m.cumulative_tonnes == 0 and m.km_equivalent == 0 for m in milestones)
