"""Unit tests for observation ingestion and the data domain."""

from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from easybinner.binning.observations import Observation, data_domain, observations_from_dataframe


@pytest.fixture
def sample_df() -> pd.DataFrame:
    """Pre-aggregated rows, one of them with a non-numeric bin value."""
    return pd.DataFrame({
        "age": [23, 35, "n/a", 41, 58],
        "sales": [10.0, 20.0, 30.0, 40.0, 50.0],
        "orders": [1, 2, 3, 4, 5],
        "margin": [0.1, np.nan, 0.3, 0.4, 0.5],
        "customer": ["c1", "c2", "c3", "c4", "c5"],
    }, index=[10, 11, 12, 13, 14])


def test_data_domain(scenario_observations):
    assert data_domain(scenario_observations) == (1.0, 9.0)


def test_data_domain_constant_values():
    observations = [Observation(bin_value=5.0, measure_value=1.0) for _ in range(3)]
    assert data_domain(observations) == (5.0, 5.0)


def test_data_domain_empty_raises():
    with pytest.raises(ValueError) as exc_info:
        data_domain([])
    assert "non-empty" in str(exc_info.value)


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_data_domain_non_finite_raises(bad):
    observations = [Observation(bin_value=1.0, measure_value=1.0), Observation(bin_value=bad, measure_value=1.0)]
    with pytest.raises(ValueError):
        data_domain(observations)


def test_observation_defaults():
    o = Observation(bin_value=1.0, measure_value=2.0)
    assert o.weight == 1.0
    assert o.tooltip_value is None
    assert o.member_ref is None


def test_from_dataframe_drops_non_numeric_rows(sample_df):
    observations = observations_from_dataframe(
        sample_df, bin_col="age", measure_col="sales", weight_col="orders"
    )
    assert [o.bin_value for o in observations] == [23.0, 35.0, 41.0, 58.0]
    assert [o.weight for o in observations] == [1.0, 2.0, 4.0, 5.0]
    # member_ref defaults to the index label
    assert [o.member_ref for o in observations] == [10, 11, 13, 14]
    assert all(o.tooltip_value is None for o in observations)


def test_from_dataframe_tooltip_and_member_columns(sample_df):
    observations = observations_from_dataframe(
        sample_df,
        bin_col="age",
        measure_col="sales",
        weight_col="orders",
        tooltip_col="margin",
        member_col="customer",
    )
    assert [o.member_ref for o in observations] == ["c1", "c2", "c4", "c5"]
    assert [o.tooltip_value for o in observations] == [0.1, None, 0.4, 0.5]


def test_from_dataframe_missing_column_raises(sample_df):
    with pytest.raises(ValueError) as exc_info:
        observations_from_dataframe(sample_df, bin_col="age", measure_col="revenue", weight_col="orders")
    assert "revenue" in str(exc_info.value)


def test_from_dataframe_missing_optional_column_raises(sample_df):
    with pytest.raises(ValueError) as exc_info:
        observations_from_dataframe(
            sample_df, bin_col="age", measure_col="sales", weight_col="orders", tooltip_col="profit"
        )
    assert "profit" in str(exc_info.value)


def test_from_dataframe_nullable_integer_column():
    df = pd.DataFrame({
        "x": pd.array([1, None, 3], dtype="Int64"),
        "y": [1.0, 2.0, 3.0],
        "w": [1, 1, 1],
    })
    observations = observations_from_dataframe(df, bin_col="x", measure_col="y", weight_col="w")
    assert [o.bin_value for o in observations] == [1.0, 3.0]


def test_from_dataframe_all_rows_invalid_returns_empty():
    df = pd.DataFrame({"x": ["a", "b"], "y": [1.0, 2.0], "w": [1, 1]})
    assert observations_from_dataframe(df, bin_col="x", measure_col="y", weight_col="w") == []
