"""Binned chart pipeline.

Runs the engine end to end on one set of observations:

    data_domain -> plan_bins -> bin_observations -> aggregate -> fit_normal_curve

Every call recomputes from scratch and returns a fresh, immutable
BinnedChartResult; nothing is cached between calls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import pandas as pd

from easybinner.binning.algorithms.aggregator import aggregate
from easybinner.binning.algorithms.bin_planner import BinPlan, BinWarning, plan_bins
from easybinner.binning.algorithms.binner import Bin, bin_observations
from easybinner.binning.algorithms.normal_curve import CurveResult, fit_normal_curve
from easybinner.binning.bin_labels import bin_range_label
from easybinner.binning.bin_state import BinSettings
from easybinner.binning.observations import Observation, data_domain
from easybinner.utils.logging import get_logger

logger = get_logger(__name__)

OnBinWarning = Callable[[BinWarning], None]

# Columns of the per-bin table returned by bins_to_dataframe().
BIN_TABLE_COLUMNS = [
    "index",
    "lower_bound",
    "upper_bound",
    "label",
    "count",
    "member_weight_total",
    "aggregated_value",
    "aggregated_tooltip_value",
]


@dataclass(frozen=True)
class BinnedChartResult:
    """Everything one engine invocation produces."""

    domain: tuple[float, float]
    plan: BinPlan
    bins: tuple[Bin, ...]
    curve: Optional[CurveResult] = None

    @property
    def warnings(self) -> tuple[BinWarning, ...]:
        return self.plan.warnings


def compute_binned_chart(
    observations: Sequence[Observation],
    settings: Optional[BinSettings] = None,
    *,
    on_warning: Optional[OnBinWarning] = None,
) -> BinnedChartResult:
    """
    Bin and aggregate observations, with the normal curve when requested.

    Args:
        observations: Non-empty, one per distinct binning key, finite bin values.
        settings: Engine options. Defaults to BinSettings().
        on_warning: Called once per advisory warning (e.g. binSizeTooSmall).
            Warnings are also available on the result.

    Returns:
        BinnedChartResult with plan.num_bins bins. curve is None unless
        settings.show_normal_curve is set and the bin values vary.

    Raises:
        ValueError: If observations is empty or holds a non-finite bin value.
    """
    if settings is None:
        settings = BinSettings()

    domain = data_domain(observations)
    total_weight = math.fsum(o.weight for o in observations)
    plan = plan_bins(domain, settings, total_weight=total_weight)
    if on_warning is not None:
        for warning in plan.warnings:
            on_warning(warning)

    bins = bin_observations(observations, plan)
    bins = aggregate(bins, settings.measure_reducer, settings.tooltip_reducer)

    curve = None
    if settings.show_normal_curve:
        curve = fit_normal_curve(observations, bins, settings.curve_sample_count)

    return BinnedChartResult(domain=domain, plan=plan, bins=tuple(bins), curve=curve)


def bins_to_dataframe(bins: Sequence[Bin]) -> pd.DataFrame:
    """Per-bin table, one row per bin in index order (columns = BIN_TABLE_COLUMNS)."""
    rows = [
        {
            "index": b.index,
            "lower_bound": b.lower_bound,
            "upper_bound": b.upper_bound,
            "label": bin_range_label(b),
            "count": b.count,
            "member_weight_total": b.member_weight_total,
            "aggregated_value": b.aggregated_value,
            "aggregated_tooltip_value": b.aggregated_tooltip_value,
        }
        for b in bins
    ]
    return pd.DataFrame(rows, columns=BIN_TABLE_COLUMNS)
