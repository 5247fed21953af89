"""Observations and domain analysis.

An Observation is one pre-aggregated input row: the value to bin, the
measure to aggregate, its weight (frequency) and an optional secondary
tooltip value. ``member_ref`` is an opaque handle (e.g. a selection id or
a dataframe index label) that the engine collects per bin and never inspects.

The caller guarantees one observation per distinct binning key; no
deduplication or grouping happens here.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Hashable, Optional, Sequence

import numpy as np
import pandas as pd

from easybinner.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Observation:
    """One pre-aggregated input row."""

    bin_value: float
    measure_value: float
    weight: float = 1.0
    tooltip_value: Optional[float] = None
    member_ref: Any = None


def data_domain(observations: Sequence[Observation]) -> tuple[float, float]:
    """Return (min, max) of bin_value over the observations.

    If all values are equal, min == max; the planner handles the zero range.

    Raises:
        ValueError: If observations is empty or holds a non-finite bin_value.
    """
    if len(observations) == 0:
        raise ValueError("observations must be non-empty to compute a data domain")
    values = np.array([o.bin_value for o in observations], dtype=float)
    if not np.all(np.isfinite(values)):
        raise ValueError("bin_value must be finite for every observation")
    return float(np.min(values)), float(np.max(values))


def _numeric_column(df: pd.DataFrame, col: str) -> np.ndarray:
    """Column as float array; non-numeric entries become NaN."""
    return pd.to_numeric(df[col], errors="coerce").to_numpy(dtype=float, na_value=np.nan)


def observations_from_dataframe(
    df: pd.DataFrame,
    *,
    bin_col: str,
    measure_col: str,
    weight_col: str,
    tooltip_col: Optional[str] = None,
    member_col: Optional[str] = None,
) -> list[Observation]:
    """Build observations from a pre-aggregated dataframe.

    Columns are coerced to numeric (errors become NaN). Rows whose bin value,
    measure or weight is missing or non-finite are dropped, so the result
    satisfies the engine's precondition except for emptiness, which the
    caller checks. Missing tooltip values become None.

    Args:
        df: One row per distinct binning key.
        bin_col: Column holding the value to bin.
        measure_col: Column holding the measure to aggregate per bin.
        weight_col: Column holding the frequency / weight of each row.
        tooltip_col: Optional column holding a secondary value.
        member_col: Optional column used as member_ref. Defaults to the row's index label.

    Returns:
        List of Observation, in dataframe row order.

    Raises:
        ValueError: If a named column is not in df.
    """
    required = [bin_col, measure_col, weight_col]
    optional = [c for c in (tooltip_col, member_col) if c is not None]
    for col in required + optional:
        if col not in df.columns:
            raise ValueError(f"df must contain column {col!r}")

    bin_values = _numeric_column(df, bin_col)
    measures = _numeric_column(df, measure_col)
    weights = _numeric_column(df, weight_col)
    keep = np.isfinite(bin_values) & np.isfinite(measures) & np.isfinite(weights)
    n_dropped = int((~keep).sum())
    if n_dropped:
        logger.debug(f"Dropped {n_dropped} of {len(df)} rows with non-numeric bin/measure/weight values")

    if tooltip_col is not None:
        tooltips = _numeric_column(df, tooltip_col)
    else:
        tooltips = None
    refs: list[Hashable] = df[member_col].tolist() if member_col is not None else df.index.tolist()

    out: list[Observation] = []
    for i in np.flatnonzero(keep):
        tooltip_value = None
        if tooltips is not None and not math.isnan(tooltips[i]):
            tooltip_value = float(tooltips[i])
        out.append(
            Observation(
                bin_value=float(bin_values[i]),
                measure_value=float(measures[i]),
                weight=float(weights[i]),
                tooltip_value=tooltip_value,
                member_ref=refs[i],
            )
        )
    return out
