"""Unit tests for per-bin reducers (sum, weightedAvg, minimum, maximum)."""

from __future__ import annotations

import math

import pytest

from easybinner.binning.algorithms.aggregator import aggregate, has_tooltip_values, reduce_values
from easybinner.binning.algorithms.bin_planner import plan_bins
from easybinner.binning.algorithms.binner import Bin, bin_observations
from easybinner.binning.bin_state import BinMode, BinSettings, Reducer
from easybinner.binning.observations import Observation, data_domain


def _single_bin(members) -> list[Bin]:
    return [
        Bin(
            index=0,
            lower_bound=0.0,
            upper_bound=1.0,
            members=tuple(members),
            member_weight_total=math.fsum(m.weight for m in members),
        )
    ]


def _empty_bin() -> Bin:
    return Bin(index=1, lower_bound=1.0, upper_bound=2.0)


# --- reduce_values ---


def test_reduce_values_sum():
    assert reduce_values([1.0, 2.0, 3.5], [1.0, 1.0, 1.0], Reducer.SUM) == 6.5


def test_reduce_values_weighted_avg():
    assert reduce_values([10.0, 20.0], [1.0, 3.0], Reducer.WEIGHTED_AVG) == 17.5


def test_reduce_values_weighted_avg_zero_weight_is_zero():
    assert reduce_values([10.0, 20.0], [0.0, 0.0], Reducer.WEIGHTED_AVG) == 0.0


def test_reduce_values_min_max():
    assert reduce_values([4.0, -2.0, 7.0], [1.0, 1.0, 1.0], Reducer.MINIMUM) == -2.0
    assert reduce_values([4.0, -2.0, 7.0], [1.0, 1.0, 1.0], Reducer.MAXIMUM) == 7.0


@pytest.mark.parametrize("reducer", list(Reducer))
def test_reduce_values_empty_is_zero(reducer):
    assert reduce_values([], [], reducer) == 0.0


def test_reduce_values_accepts_string_reducer():
    assert reduce_values([1.0, 2.0], [1.0, 1.0], "maximum") == 2.0


def test_reduce_values_unknown_reducer_raises():
    with pytest.raises(ValueError):
        reduce_values([1.0], [1.0], "median")


# --- aggregate ---


def test_concrete_scenario_sum(scenario_observations):
    """Bins [0, 6) and [6, 12] both sum to 30."""
    plan = plan_bins(data_domain(scenario_observations), BinSettings(mode=BinMode.BY_COUNT, number_of_bins=2))
    bins = aggregate(bin_observations(scenario_observations, plan), Reducer.SUM)
    assert [b.aggregated_value for b in bins] == [30.0, 30.0]
    assert all(b.aggregated_tooltip_value is None for b in bins)


def test_weighted_avg_with_equal_weights_is_mean():
    members = [Observation(bin_value=0.5, measure_value=v, weight=2.0) for v in (10.0, 20.0, 60.0)]
    bins = aggregate(_single_bin(members), Reducer.WEIGHTED_AVG)
    assert bins[0].aggregated_value == pytest.approx(30.0)


def test_weighted_avg_uses_weights():
    members = [
        Observation(bin_value=0.1, measure_value=10.0, weight=1.0),
        Observation(bin_value=0.2, measure_value=20.0, weight=3.0),
    ]
    bins = aggregate(_single_bin(members), Reducer.WEIGHTED_AVG)
    assert bins[0].aggregated_value == 17.5


@pytest.mark.parametrize("reducer", list(Reducer))
def test_empty_bin_aggregates_to_zero(reducer):
    bins = aggregate([_empty_bin()], reducer)
    assert bins[0].aggregated_value == 0.0
    assert bins[0].member_weight_total == 0.0


def test_tooltip_reduced_independently():
    members = [
        Observation(bin_value=0.1, measure_value=1.0, weight=1.0, tooltip_value=5.0),
        Observation(bin_value=0.2, measure_value=2.0, weight=1.0, tooltip_value=9.0),
    ]
    bins = aggregate(_single_bin(members), measure_reducer=Reducer.SUM, tooltip_reducer=Reducer.MAXIMUM)
    assert bins[0].aggregated_value == 3.0
    assert bins[0].aggregated_tooltip_value == 9.0


def test_tooltip_skips_absent_values():
    members = [
        Observation(bin_value=0.1, measure_value=1.0, weight=1.0, tooltip_value=4.0),
        Observation(bin_value=0.2, measure_value=1.0, weight=3.0),
    ]
    bins = aggregate(_single_bin(members), Reducer.SUM, Reducer.WEIGHTED_AVG)
    assert bins[0].aggregated_tooltip_value == 4.0


def test_tooltip_empty_bin_is_zero_when_tooltips_present():
    members = [Observation(bin_value=0.1, measure_value=1.0, tooltip_value=4.0)]
    bins = aggregate(_single_bin(members) + [_empty_bin()], Reducer.SUM, Reducer.MINIMUM)
    assert bins[0].aggregated_tooltip_value == 4.0
    assert bins[1].aggregated_tooltip_value == 0.0


def test_tooltip_skipped_without_tooltip_values():
    members = [Observation(bin_value=0.1, measure_value=1.0)]
    bins = aggregate(_single_bin(members), Reducer.SUM, Reducer.SUM)
    assert bins[0].aggregated_tooltip_value is None
    assert has_tooltip_values(bins) is False


def test_tooltip_reducer_none_skips_tooltips():
    members = [Observation(bin_value=0.1, measure_value=1.0, tooltip_value=3.0)]
    bins = aggregate(_single_bin(members), Reducer.SUM, None)
    assert bins[0].aggregated_tooltip_value is None


def test_member_weight_total_independent_of_reducer():
    members = [
        Observation(bin_value=0.1, measure_value=1.0, weight=2.0),
        Observation(bin_value=0.2, measure_value=5.0, weight=3.0),
    ]
    for reducer in Reducer:
        bins = aggregate(_single_bin(members), reducer)
        assert bins[0].member_weight_total == 5.0


def test_aggregate_returns_new_bins():
    """Input bins keep their unset aggregates."""
    members = [Observation(bin_value=0.1, measure_value=7.0)]
    original = _single_bin(members)
    bins = aggregate(original, Reducer.SUM)
    assert original[0].aggregated_value == 0.0
    assert bins[0].aggregated_value == 7.0
    assert bins[0].members == original[0].members


def test_aggregate_unknown_reducer_raises():
    with pytest.raises(ValueError):
        aggregate([_empty_bin()], "median")


def test_sum_identity(random_observations):
    """With the sum reducer, bin aggregates add up to the total measure."""
    plan = plan_bins(data_domain(random_observations), BinSettings(mode=BinMode.BY_COUNT, number_of_bins=17))
    bins = aggregate(bin_observations(random_observations, plan), Reducer.SUM)
    expected = math.fsum(o.measure_value for o in random_observations)
    assert math.fsum(b.aggregated_value for b in bins) == pytest.approx(expected, rel=1e-9)
