"""
Aggregator: reduces each bin's members to one value.

Reducers (applied to measure_value or tooltip_value over a bin's members):
  sum:          sum of the field.
  weightedAvg:  sum(field * weight) / sum(weight), 0 when sum(weight) == 0.
  minimum:      min of the field, 0 for a bin with no values.
  maximum:      max of the field, 0 for a bin with no values.

The primary measure and the secondary (tooltip) value are reduced
independently, each with its own reducer. Members whose tooltip value is
absent do not take part in the tooltip reduction; when no observation
carries a tooltip value at all, the tooltip reduction is skipped and every
bin's aggregated_tooltip_value stays None.

Sums use math.fsum so results do not depend on member order.
"""

from __future__ import annotations

import math
from typing import Callable, Optional, Sequence, Union

from easybinner.binning.algorithms.binner import Bin
from easybinner.binning.bin_state import Reducer
from easybinner.utils.logging import get_logger

logger = get_logger(__name__)

ReducerLike = Union[Reducer, str]


def _sum(values: Sequence[float], weights: Sequence[float]) -> float:
    return math.fsum(values)


def _weighted_avg(values: Sequence[float], weights: Sequence[float]) -> float:
    total_weight = math.fsum(weights)
    if total_weight == 0:
        return 0.0
    return math.fsum(v * w for v, w in zip(values, weights)) / total_weight


def _minimum(values: Sequence[float], weights: Sequence[float]) -> float:
    return float(min(values)) if values else 0.0


def _maximum(values: Sequence[float], weights: Sequence[float]) -> float:
    return float(max(values)) if values else 0.0


_REDUCERS: dict[Reducer, Callable[[Sequence[float], Sequence[float]], float]] = {
    Reducer.SUM: _sum,
    Reducer.WEIGHTED_AVG: _weighted_avg,
    Reducer.MINIMUM: _minimum,
    Reducer.MAXIMUM: _maximum,
}


def reduce_values(values: Sequence[float], weights: Sequence[float], reducer: ReducerLike) -> float:
    """Apply one reducer to parallel value/weight sequences.

    Raises:
        ValueError: If reducer is not a Reducer or one of its string values.
    """
    return _REDUCERS[Reducer(reducer)](values, weights)


def _reduce_measure(b: Bin, reducer: Reducer) -> float:
    values = [m.measure_value for m in b.members]
    weights = [m.weight for m in b.members]
    return reduce_values(values, weights, reducer)


def _reduce_tooltip(b: Bin, reducer: Reducer) -> float:
    present = [m for m in b.members if m.tooltip_value is not None]
    values = [m.tooltip_value for m in present]
    weights = [m.weight for m in present]
    return reduce_values(values, weights, reducer)


def has_tooltip_values(bins: Sequence[Bin]) -> bool:
    """True if any member of any bin carries a tooltip value."""
    return any(m.tooltip_value is not None for b in bins for m in b.members)


def aggregate(
    bins: Sequence[Bin],
    measure_reducer: ReducerLike = Reducer.SUM,
    tooltip_reducer: Optional[ReducerLike] = Reducer.SUM,
) -> list[Bin]:
    """
    Return new bins carrying aggregated_value and aggregated_tooltip_value.

    Input bins are not modified. member_weight_total is carried over
    unchanged whatever the reducers are.

    Args:
        bins: Bins from bin_observations().
        measure_reducer: Reducer for measure_value.
        tooltip_reducer: Reducer for tooltip_value. None skips the tooltip reduction.

    Returns:
        List of Bin in the same order as bins.

    Raises:
        ValueError: If a reducer is not recognized.
    """
    measure_reducer = Reducer(measure_reducer)
    if tooltip_reducer is not None:
        tooltip_reducer = Reducer(tooltip_reducer)
    reduce_tooltips = tooltip_reducer is not None and has_tooltip_values(bins)

    out = []
    for b in bins:
        tooltip_value = _reduce_tooltip(b, tooltip_reducer) if reduce_tooltips else None
        out.append(b.with_aggregates(_reduce_measure(b, measure_reducer), tooltip_value))

    logger.debug(
        f"Aggregated {len(out)} bins (measure={measure_reducer.value}, "
        f"tooltip={tooltip_reducer.value if reduce_tooltips else None})"
    )
    return out
