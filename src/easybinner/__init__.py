"""
easybinner: Bin numeric observations into equal-width intervals and aggregate them.

This package provides:
- compute_binned_chart: domain -> bin plan -> bins -> aggregates -> optional normal curve
- BinSettings: automatic (Sturges), byCount and bySize bin modes; sum,
  weightedAvg, minimum and maximum reducers
- make_binned_chart_figure: Plotly figure dict for a binned chart
- Logging utilities for library and application use

For logging configuration in standalone scripts:
    ```python
    from easybinner.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library, logging is handled by the parent application's configuration.
"""

import logging

from easybinner.utils.logging import configure_logging, get_logger

from easybinner.binning import (
    Bin,
    BinMode,
    BinnedChartResult,
    BinPlan,
    BinSettings,
    BinWarning,
    CurveResult,
    Observation,
    Reducer,
    compute_binned_chart,
    observations_from_dataframe,
)
from easybinner.binning.figure_generator import make_binned_chart_figure

# Ensure easybinner logger has NullHandler so logs don't propagate to root
# when no application has configured logging.
_logger = logging.getLogger("easybinner")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "Bin",
    "BinMode",
    "BinnedChartResult",
    "BinPlan",
    "BinSettings",
    "BinWarning",
    "CurveResult",
    "Observation",
    "Reducer",
    "compute_binned_chart",
    "configure_logging",
    "get_logger",
    "make_binned_chart_figure",
    "observations_from_dataframe",
]

__version__ = "0.1.0"
