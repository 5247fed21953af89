"""Fixtures for binning engine tests."""

from __future__ import annotations

import numpy as np
import pytest

from easybinner.binning.observations import Observation


@pytest.fixture
def scenario_observations() -> list[Observation]:
    """Three observations (bin_value, measure, weight) = (1,10,1), (5,20,1), (9,30,1)."""
    return [
        Observation(bin_value=1.0, measure_value=10.0, weight=1.0, member_ref="a"),
        Observation(bin_value=5.0, measure_value=20.0, weight=1.0, member_ref="b"),
        Observation(bin_value=9.0, measure_value=30.0, weight=1.0, member_ref="c"),
    ]


@pytest.fixture
def random_observations() -> list[Observation]:
    """200 observations with normally distributed bin values and random weights."""
    rng = np.random.default_rng(0)
    values = rng.normal(loc=50.0, scale=12.0, size=200)
    measures = rng.uniform(-5.0, 20.0, size=200)
    weights = rng.integers(1, 6, size=200)
    tooltips = rng.uniform(0.0, 1.0, size=200)
    return [
        Observation(
            bin_value=float(v),
            measure_value=float(m),
            weight=float(w),
            tooltip_value=float(t),
            member_ref=i,
        )
        for i, (v, m, w, t) in enumerate(zip(values, measures, weights, tooltips))
    ]
