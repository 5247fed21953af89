"""
Binner: partitions observations into the bins of a BinPlan.

Each observation lands in exactly one bin. Bins are half-open [lower, upper)
except the last, which is closed so the domain maximum is always included.
Empty bins are kept (axis continuity); nothing is ever dropped.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence

import numpy as np

from easybinner.binning.algorithms.bin_planner import BinPlan
from easybinner.binning.observations import Observation
from easybinner.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Bin:
    """One interval of the aligned domain with its members and aggregates.

    aggregated_value and aggregated_tooltip_value are filled in by aggregate();
    bin_observations() leaves them at 0.0 / None.
    """

    index: int
    lower_bound: float
    upper_bound: float
    members: tuple[Observation, ...] = ()
    aggregated_value: float = 0.0
    aggregated_tooltip_value: Optional[float] = None
    member_weight_total: float = 0.0

    @property
    def width(self) -> float:
        return self.upper_bound - self.lower_bound

    @property
    def midpoint(self) -> float:
        return (self.lower_bound + self.upper_bound) / 2

    @property
    def member_refs(self) -> list[Any]:
        """Opaque member handles, in input order."""
        return [m.member_ref for m in self.members]

    @property
    def count(self) -> int:
        return len(self.members)

    def with_aggregates(self, aggregated_value: float, aggregated_tooltip_value: Optional[float]) -> "Bin":
        return replace(
            self,
            aggregated_value=aggregated_value,
            aggregated_tooltip_value=aggregated_tooltip_value,
        )


def assign_bin_indices(values: Sequence[float], plan: BinPlan) -> np.ndarray:
    """Bin index for each value.

    A value equal to a threshold belongs to the bin on its right. Indices are
    clipped to [0, num_bins - 1], which places the domain maximum in the last
    (closed) bin and absorbs rounding at the aligned edges.
    """
    arr = np.asarray(values, dtype=float)
    if plan.num_bins == 1:
        return np.zeros(arr.shape, dtype=int)
    idx = np.searchsorted(np.asarray(plan.thresholds, dtype=float), arr, side="right")
    return np.clip(idx, 0, plan.num_bins - 1)


def bin_observations(observations: Sequence[Observation], plan: BinPlan) -> list[Bin]:
    """
    Partition observations into exactly plan.num_bins bins.

    Members keep input order within a bin. member_weight_total is the exact
    (math.fsum) sum of member weights, so the weight totals across bins add
    up to the total input weight.

    Returns:
        List of plan.num_bins Bin, ordered by index; aggregates not yet set.
    """
    edges = plan.edges
    buckets: list[list[Observation]] = [[] for _ in range(plan.num_bins)]
    indices = assign_bin_indices([o.bin_value for o in observations], plan)
    for obs, i in zip(observations, indices):
        buckets[int(i)].append(obs)

    bins = [
        Bin(
            index=i,
            lower_bound=edges[i],
            upper_bound=edges[i + 1],
            members=tuple(members),
            member_weight_total=math.fsum(m.weight for m in members),
        )
        for i, members in enumerate(buckets)
    ]
    n_empty = sum(1 for b in bins if not b.members)
    logger.debug(f"Binned {len(observations)} observations into {len(bins)} bins ({n_empty} empty)")
    return bins
