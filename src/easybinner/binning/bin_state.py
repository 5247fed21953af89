"""Bin settings for the binning engine.

This module defines the BinMode and Reducer enums and the BinSettings
dataclass that carries every engine option as a plain input parameter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from easybinner.utils.logging import get_logger

logger = get_logger(__name__)

# Largest bin count accepted from a user bin size before falling back.
MAX_BINS = 1000

# Bin count used when a user bin size or a byCount count is rejected.
DEFAULT_FALLBACK_BINS = 10

# Number of curve samples across the aligned domain.
DEFAULT_CURVE_SAMPLE_COUNT = 100

# Nominal bin width used when all bin values are equal (zero domain range).
DEGENERATE_BIN_SIZE = 1.0

# Relative tolerance for every floating comparison in planning (bySize count
# rounding, degenerate-domain detection).
EPSILON = 1e-9


class BinMode(str, Enum):
    """How the number of bins and their width are chosen."""
    AUTOMATIC = "automatic"
    BY_COUNT = "byCount"
    BY_SIZE = "bySize"


class Reducer(str, Enum):
    """Reduction applied to the member values of one bin."""
    SUM = "sum"
    WEIGHTED_AVG = "weightedAvg"
    MINIMUM = "minimum"
    MAXIMUM = "maximum"


def parse_bin_mode(value: Any) -> BinMode:
    """Convert a settings value to BinMode; unknown values fall back to automatic."""
    if isinstance(value, BinMode):
        return value
    try:
        return BinMode(str(value))
    except ValueError:
        logger.warning(f"Unknown bin mode {value!r}, defaulting to 'automatic'")
        return BinMode.AUTOMATIC


def parse_reducer(value: Any) -> Reducer:
    """Convert a settings value to Reducer; unknown values fall back to sum."""
    if isinstance(value, Reducer):
        return value
    try:
        return Reducer(str(value))
    except ValueError:
        logger.warning(f"Unknown reducer {value!r}, defaulting to 'sum'")
        return Reducer.SUM


def _int_setting(data: dict[str, Any], key: str, default: int) -> int:
    """data[key] as int; missing gives default, a non-integer value logs and gives default."""
    value = data.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Invalid {key} {value!r} in bin settings, using {default}")
        return default


@dataclass(frozen=True)
class BinSettings:
    """Options for one engine invocation.

    Only the parameter matching ``mode`` is consulted by the planner:
    ``number_of_bins`` for byCount, ``bin_size`` for bySize, neither for
    automatic (Sturges' rule on the total weight).
    """
    mode: BinMode = BinMode.BY_COUNT
    number_of_bins: int = 10
    bin_size: float = 50.0
    measure_reducer: Reducer = Reducer.SUM
    tooltip_reducer: Reducer = Reducer.SUM
    show_normal_curve: bool = False
    curve_sample_count: int = DEFAULT_CURVE_SAMPLE_COUNT

    def __post_init__(self) -> None:
        # Plain strings are accepted for the enum fields (e.g. mode="bySize")
        object.__setattr__(self, "mode", parse_bin_mode(self.mode))
        object.__setattr__(self, "measure_reducer", parse_reducer(self.measure_reducer))
        object.__setattr__(self, "tooltip_reducer", parse_reducer(self.tooltip_reducer))

    def visible_options(self) -> list[str]:
        """Names of the mode parameters that apply to the current mode."""
        if self.mode is BinMode.BY_COUNT:
            return ["number_of_bins"]
        if self.mode is BinMode.BY_SIZE:
            return ["bin_size"]
        return []

    def to_dict(self) -> dict[str, Any]:
        """Serialize BinSettings to a JSON-friendly dictionary."""
        return {
            "mode": self.mode.value,
            "number_of_bins": self.number_of_bins,
            "bin_size": self.bin_size,
            "measure_reducer": self.measure_reducer.value,
            "tooltip_reducer": self.tooltip_reducer.value,
            "show_normal_curve": self.show_normal_curve,
            "curve_sample_count": self.curve_sample_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BinSettings":
        """Tolerant loader.

        - missing keys use defaults
        - unknown keys are ignored with a warning
        - unknown mode falls back to automatic, unknown reducer to sum
        - a non-integer bin count or curve sample count uses its default
        - a non-numeric bin size becomes NaN, which the planner rejects
        """
        known_keys = {
            "mode", "number_of_bins", "bin_size", "measure_reducer",
            "tooltip_reducer", "show_normal_curve", "curve_sample_count",
        }
        for key in data.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in bin settings, ignoring")

        try:
            bin_size = float(data.get("bin_size", 50.0))
        except (TypeError, ValueError):
            logger.warning(f"Invalid bin_size {data.get('bin_size')!r} in bin settings, ignoring")
            bin_size = float("nan")

        return cls(
            mode=parse_bin_mode(data.get("mode", BinMode.BY_COUNT.value)),
            number_of_bins=_int_setting(data, "number_of_bins", 10),
            bin_size=bin_size,
            measure_reducer=parse_reducer(data.get("measure_reducer", Reducer.SUM.value)),
            tooltip_reducer=parse_reducer(data.get("tooltip_reducer", Reducer.SUM.value)),
            show_normal_curve=bool(data.get("show_normal_curve", False)),
            curve_sample_count=_int_setting(data, "curve_sample_count", DEFAULT_CURVE_SAMPLE_COUNT),
        )
