"""
Bin planning algorithm: pure python/numpy.

Decides how many bins to create and where their boundaries fall, given the
data domain [min, max] and the BinSettings mode:

  1. Initial count and width from the mode:
       automatic: Sturges' rule on the total weight, width = range / count.
       byCount:   the user's count (at least 1), width = range / count.
       bySize:    the user's width, count = ceil(range / width), unless the
                  width is not a positive finite number or would produce more
                  than MAX_BINS bins; then DEFAULT_FALLBACK_BINS bins are used.
  2. Align the domain outward to multiples of the width.
  3. byCount / automatic (and a bySize fallback): recompute the width from the
     aligned domain so the requested count is honored exactly. bySize keeps
     the user's width and lets the count follow the aligned domain instead.
  4. Interior thresholds at aligned_min + k * width, k = 1 .. count - 1.
     The final boundary is thresholds[-1] + width, never accumulated addition.

No "nice" rounding is applied: the requested count or width is authoritative.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from easybinner.binning.bin_state import (
    DEFAULT_FALLBACK_BINS,
    DEGENERATE_BIN_SIZE,
    EPSILON,
    MAX_BINS,
    BinMode,
    BinSettings,
    parse_bin_mode,
)
from easybinner.utils.logging import get_logger

logger = get_logger(__name__)

# Warning kind emitted when a user bin size is rejected for exceeding MAX_BINS.
BIN_SIZE_TOO_SMALL = "binSizeTooSmall"


@dataclass(frozen=True)
class BinWarning:
    """Advisory signal for the caller to surface; never an error."""

    kind: str
    title: str
    message: str


@dataclass(frozen=True)
class BinPlan:
    """Bin count, width and boundaries for one engine invocation.

    Invariants: aligned_min <= domain min, aligned_max >= domain max,
    len(thresholds) == num_bins - 1, and
    aligned_max - aligned_min == num_bins * bin_size within EPSILON.
    """

    mode: BinMode
    num_bins: int
    bin_size: float
    aligned_min: float
    aligned_max: float
    thresholds: tuple[float, ...]
    used_fallback: bool = False
    warnings: tuple[BinWarning, ...] = ()

    @property
    def edges(self) -> tuple[float, ...]:
        """All num_bins + 1 boundaries, aligned_min first and aligned_max last."""
        return (self.aligned_min,) + self.thresholds + (self.aligned_max,)


# -----------------------------------------------------------------------------
# Step 1: Initial bin count and width
# -----------------------------------------------------------------------------


def sturges_bin_count(total_weight: float) -> int:
    """Sturges' rule: max(1, ceil(log2(N) + 1)); N <= 0 or non-finite gives 1."""
    if not math.isfinite(total_weight) or total_weight <= 0:
        return 1
    return max(1, math.ceil(math.log2(total_weight) + 1))


def requested_bin_count(value: object) -> int:
    """byCount bin count: at least 1; non-numeric or non-finite gives DEFAULT_FALLBACK_BINS."""
    try:
        count = float(value)
    except (TypeError, ValueError):
        return DEFAULT_FALLBACK_BINS
    if not math.isfinite(count):
        return DEFAULT_FALLBACK_BINS
    return max(1, int(count))


def is_degenerate_domain(domain_min: float, domain_max: float) -> bool:
    """True when the range is zero relative to the magnitude of the values (EPSILON)."""
    return domain_max - domain_min <= EPSILON * max(abs(domain_min), abs(domain_max))


def degenerate_bin_size(domain_min: float, domain_max: float, nominal: float) -> float:
    """Width of the single bin of a degenerate domain.

    At least ``nominal``, and wide enough that adding it to the values changes
    them (large magnitudes such as epoch-nanosecond timestamps swallow 1.0).
    """
    magnitude = max(abs(domain_min), abs(domain_max))
    return max(nominal, 2 * math.ulp(magnitude), domain_max - domain_min)


def is_valid_bin_size(value: object) -> bool:
    """True if value is a real, finite, strictly positive number."""
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        return False
    return math.isfinite(value) and value > 0


def _initial_bins(
    mode: BinMode,
    domain_range: float,
    settings: BinSettings,
    total_weight: float,
) -> tuple[int, float, bool, Optional[BinWarning]]:
    """Return (num_bins, bin_size, count_is_authoritative, warning)."""
    if mode is BinMode.AUTOMATIC:
        num_bins = sturges_bin_count(total_weight)
        return num_bins, domain_range / num_bins, True, None

    if mode is BinMode.BY_COUNT:
        num_bins = requested_bin_count(settings.number_of_bins)
        return num_bins, domain_range / num_bins, True, None

    user_bin_size = settings.bin_size
    valid = is_valid_bin_size(user_bin_size)
    estimated_bins = domain_range / user_bin_size if valid else math.inf
    if valid and estimated_bins <= MAX_BINS:
        num_bins = max(1, math.ceil(estimated_bins - EPSILON))
        return num_bins, float(user_bin_size), False, None

    warning = None
    if valid:
        # Only a well-formed width rejected for the bin cap is reported to the user
        warning = BinWarning(
            kind=BIN_SIZE_TOO_SMALL,
            title="Bin size too small",
            message=(
                f"Bin size {user_bin_size!r} would produce about {estimated_bins:.0f} bins "
                f"(limit {MAX_BINS}); using {DEFAULT_FALLBACK_BINS} bins instead."
            ),
        )
    num_bins = DEFAULT_FALLBACK_BINS
    return num_bins, domain_range / num_bins, True, warning


# -----------------------------------------------------------------------------
# Step 2: Align the domain outward to multiples of the bin width
# -----------------------------------------------------------------------------


def align_domain(domain_min: float, domain_max: float, bin_size: float) -> tuple[float, float]:
    """Expand [domain_min, domain_max] outward to multiples of bin_size.

    The result always has positive width and contains the domain, even when
    floor/ceil scaling lands a rounding step inside it.
    """
    aligned_min = math.floor(domain_min / bin_size) * bin_size
    aligned_max = math.ceil(domain_max / bin_size) * bin_size
    if aligned_min > domain_min:
        aligned_min -= bin_size
    if aligned_max < domain_max:
        aligned_max += bin_size
    if aligned_max <= aligned_min:
        aligned_max = aligned_min + bin_size
    return aligned_min, aligned_max


# -----------------------------------------------------------------------------
# Step 3: Interior thresholds
# -----------------------------------------------------------------------------


def make_thresholds(aligned_min: float, bin_size: float, num_bins: int) -> tuple[float, ...]:
    """num_bins - 1 interior cut points: aligned_min + k * bin_size, k = 1 .. num_bins - 1."""
    steps = np.arange(1, num_bins, dtype=float)
    return tuple(float(t) for t in aligned_min + steps * bin_size)


# -----------------------------------------------------------------------------
# Full pipeline: domain + settings -> BinPlan
# -----------------------------------------------------------------------------


def plan_bins(
    domain: tuple[float, float],
    settings: BinSettings,
    *,
    total_weight: Optional[float] = None,
) -> BinPlan:
    """
    Compute the bin count, aligned domain and thresholds.

    Pure function of its inputs. A zero-width domain (all values equal,
    within EPSILON of their magnitude) yields a single bin of positive width
    holding every observation. A byCount count that is not a finite number
    falls back to DEFAULT_FALLBACK_BINS.

    Args:
        domain: (min, max) of bin values, from data_domain().
        settings: Mode and mode parameters.
        total_weight: Sum of observation weights (N for Sturges' rule).
            Required in automatic mode, ignored otherwise.

    Returns:
        BinPlan. When a bySize width is rejected for exceeding MAX_BINS,
        used_fallback is True and warnings holds a binSizeTooSmall BinWarning.

    Raises:
        ValueError: If mode is automatic and total_weight is not given.
    """
    domain_min, domain_max = float(domain[0]), float(domain[1])
    domain_range = domain_max - domain_min
    mode = parse_bin_mode(settings.mode)
    if mode is BinMode.AUTOMATIC and total_weight is None:
        raise ValueError("automatic bin mode requires total_weight")

    warning: Optional[BinWarning] = None
    if is_degenerate_domain(domain_min, domain_max):
        # One bin; keep a usable user width, else a nominal one
        num_bins = 1
        count_is_authoritative = True
        if mode is BinMode.BY_SIZE and is_valid_bin_size(settings.bin_size):
            nominal = float(settings.bin_size)
        else:
            nominal = DEGENERATE_BIN_SIZE
        bin_size = degenerate_bin_size(domain_min, domain_max, nominal)
    else:
        num_bins, bin_size, count_is_authoritative, warning = _initial_bins(
            mode, domain_range, settings, total_weight if total_weight is not None else 0.0
        )

    aligned_min, aligned_max = align_domain(domain_min, domain_max, bin_size)

    if count_is_authoritative:
        bin_size = (aligned_max - aligned_min) / num_bins
    else:
        # bySize: the width is fixed, the count follows the aligned domain
        num_bins = max(1, int(round((aligned_max - aligned_min) / bin_size)))

    thresholds = make_thresholds(aligned_min, bin_size, num_bins)

    # Final boundary derived from the last threshold to absorb accumulated drift
    corrected_max = (thresholds[-1] if thresholds else aligned_min) + bin_size
    aligned_max = max(corrected_max, domain_max)

    warnings: tuple[BinWarning, ...] = ()
    if warning is not None:
        logger.warning(f"{warning.title}: {warning.message}")
        warnings = (warning,)

    logger.debug(
        f"Planned {num_bins} bins of size {bin_size!r} over [{aligned_min!r}, {aligned_max!r}] "
        f"(mode={mode.value}, domain=[{domain_min!r}, {domain_max!r}])"
    )
    return BinPlan(
        mode=mode,
        num_bins=num_bins,
        bin_size=bin_size,
        aligned_min=aligned_min,
        aligned_max=aligned_max,
        thresholds=thresholds,
        used_fallback=warning is not None,
        warnings=warnings,
    )
