"""
Normal curve overlay: pure numpy.

mean and std_dev are the unweighted sample mean and sample standard deviation
(ddof=1) of bin_value over all raw observations; weights and bin aggregates
do not enter the fit. The unit-area density is scaled by

    total_mass * bin_width

where total_mass is the sum of aggregated bin values and bin_width the width
of bin 0, so the curve is in the same units as the bar heights.

A constant sample (std_dev == 0) or a single observation has no curve:
fit_normal_curve() returns None, which is a normal outcome.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from easybinner.binning.algorithms.binner import Bin
from easybinner.binning.bin_state import DEFAULT_CURVE_SAMPLE_COUNT
from easybinner.binning.observations import Observation
from easybinner.utils.logging import get_logger

logger = get_logger(__name__)

_SQRT_2PI = math.sqrt(2 * math.pi)


@dataclass(frozen=True)
class CurveResult:
    """Fitted normal curve, sampled across the aligned domain and at bin midpoints."""

    mean: float
    std_dev: float
    samples: tuple[tuple[float, float], ...]
    bin_midpoint_expectations: tuple[tuple[float, float], ...]


def normal_pdf(x: np.ndarray, mean: float, std_dev: float) -> np.ndarray:
    """Normal probability density at x."""
    z = (np.asarray(x, dtype=float) - mean) / std_dev
    return np.exp(-0.5 * z * z) / (std_dev * _SQRT_2PI)


def fit_normal_curve(
    observations: Sequence[Observation],
    bins: Sequence[Bin],
    sample_count: int = DEFAULT_CURVE_SAMPLE_COUNT,
) -> Optional[CurveResult]:
    """
    Fit the normal overlay for aggregated bins.

    Args:
        observations: All raw observations (not bin aggregates).
        bins: Aggregated bins from aggregate(), ordered by index.
        sample_count: Number of evenly spaced curve samples from the first
            bin's lower bound to the last bin's upper bound (inclusive).

    Returns:
        CurveResult, or None when fewer than two observations are given or
        their standard deviation is zero.

    Raises:
        ValueError: If sample_count < 2 or bins is empty.
    """
    if sample_count < 2:
        raise ValueError(f"sample_count must be >= 2, got {sample_count}")
    if len(bins) == 0:
        raise ValueError("bins must be non-empty to fit a normal curve")

    values = np.array([o.bin_value for o in observations], dtype=float)
    if values.size < 2:
        logger.debug("Normal curve skipped: fewer than two observations")
        return None
    mean = float(np.mean(values))
    std_dev = float(np.std(values, ddof=1))
    if std_dev == 0 or not math.isfinite(std_dev):
        logger.debug("Normal curve skipped: zero standard deviation")
        return None

    total_mass = math.fsum(b.aggregated_value for b in bins)
    bin_width = bins[0].width
    scale = total_mass * bin_width

    xs = np.linspace(bins[0].lower_bound, bins[-1].upper_bound, int(sample_count))
    ys = normal_pdf(xs, mean, std_dev) * scale
    mids = np.array([b.midpoint for b in bins], dtype=float)
    mid_ys = normal_pdf(mids, mean, std_dev) * scale

    return CurveResult(
        mean=mean,
        std_dev=std_dev,
        samples=tuple((float(x), float(y)) for x, y in zip(xs, ys)),
        bin_midpoint_expectations=tuple((float(x), float(y)) for x, y in zip(mids, mid_ys)),
    )
