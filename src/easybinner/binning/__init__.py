"""Binning and aggregation engine with optional normal curve overlay."""

from easybinner.binning.algorithms.aggregator import aggregate
from easybinner.binning.algorithms.bin_planner import BinPlan, BinWarning, plan_bins
from easybinner.binning.algorithms.binner import Bin, bin_observations
from easybinner.binning.algorithms.normal_curve import CurveResult, fit_normal_curve
from easybinner.binning.bin_state import BinMode, BinSettings, Reducer
from easybinner.binning.binned_chart import (
    BinnedChartResult,
    OnBinWarning,
    bins_to_dataframe,
    compute_binned_chart,
)
from easybinner.binning.observations import Observation, data_domain, observations_from_dataframe

__all__ = [
    "Bin",
    "BinMode",
    "BinPlan",
    "BinSettings",
    "BinWarning",
    "BinnedChartResult",
    "CurveResult",
    "Observation",
    "OnBinWarning",
    "Reducer",
    "aggregate",
    "bin_observations",
    "bins_to_dataframe",
    "compute_binned_chart",
    "data_domain",
    "fit_normal_curve",
    "observations_from_dataframe",
    "plan_bins",
]
