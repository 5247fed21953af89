"""Labels and tooltip items for bins and curve markers.

Pure helpers shared by any rendering layer. Numbers go through a caller
supplied formatter; the default is the general format "{:g}".
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from easybinner.binning.algorithms.binner import Bin
from easybinner.binning.algorithms.normal_curve import CurveResult

NumberFormatter = Callable[[float], str]

TooltipItems = list[tuple[str, str]]


def format_number(value: float) -> str:
    return f"{value:g}"


def bin_range_label(b: Bin, fmt: NumberFormatter = format_number) -> str:
    """'lower - upper', e.g. '0 - 6'."""
    return f"{fmt(b.lower_bound)} - {fmt(b.upper_bound)}"


def tick_values(bins: Sequence[Bin]) -> list[float]:
    """Every lower bound plus the last upper bound; [] for no bins."""
    if not bins:
        return []
    return [b.lower_bound for b in bins] + [bins[-1].upper_bound]


def bin_tooltip_items(
    b: Bin,
    *,
    measure_name: str = "Value",
    tooltip_name: Optional[str] = None,
    fmt: NumberFormatter = format_number,
) -> TooltipItems:
    """Ordered (display name, text) pairs describing one bin.

    The tooltip aggregate is listed only when tooltip_name is given and the
    bin carries one.
    """
    items = [
        ("Bin range", bin_range_label(b, fmt)),
        ("Bin size", fmt(b.width)),
        (measure_name, fmt(b.aggregated_value)),
    ]
    if tooltip_name is not None and b.aggregated_tooltip_value is not None:
        items.append((tooltip_name, fmt(b.aggregated_tooltip_value)))
    return items


def curve_marker_tooltip_items(
    curve: CurveResult,
    x: float,
    y: float,
    fmt: NumberFormatter = format_number,
) -> TooltipItems:
    """Tooltip for the curve marker at bin midpoint x with expected value y."""
    return [
        ("General Mean", fmt(curve.mean)),
        ("General Std Dev", fmt(curve.std_dev)),
        ("Bin Midpoint", fmt(x)),
        ("Fitted Normal Value", fmt(y)),
    ]


def tooltip_text(items: TooltipItems) -> str:
    """Join tooltip items into Plotly hover text ('name: value' lines)."""
    return "<br>".join(f"{name}: {value}" for name, value in items)
