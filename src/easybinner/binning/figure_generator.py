"""Plotly figure for a binned chart.

Returns a Plotly figure dict (never go.Figure) built from a BinnedChartResult:
one bar per bin, plus the normal curve and its bin-midpoint markers when the
result carries a curve. Each bar's customdata is its bin index, so a caller
can map a clicked bar back to ``result.bins[i].member_refs``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

import plotly.graph_objects as go

from easybinner.binning.bin_labels import (
    NumberFormatter,
    bin_range_label,
    bin_tooltip_items,
    curve_marker_tooltip_items,
    format_number,
    tick_values,
    tooltip_text,
)
from easybinner.binning.binned_chart import BinnedChartResult
from easybinner.binning.theme import (
    ThemeMode,
    get_grid_color,
    get_theme_colors,
    get_theme_template,
    resolve_theme,
)

# Headroom above the tallest bar when bar values are drawn.
Y_MAX_MULTIPLIER = 1.1

DEFAULT_BAR_COLOR = "#01B8AA"
DEFAULT_CURVE_COLOR = "#E66C37"


class XAxisLabels(str, Enum):
    """How the x-axis is labelled."""
    TICK_VALUE = "tickValue"  # one tick per bin boundary
    BIN_RANGE = "binRange"    # one 'lower - upper' label per bin


def make_binned_chart_figure(
    result: BinnedChartResult,
    *,
    theme: Optional[Union[str, ThemeMode]] = None,
    bar_color: str = DEFAULT_BAR_COLOR,
    curve_color: str = DEFAULT_CURVE_COLOR,
    curve_width: int = 2,
    show_bar_values: bool = False,
    x_labels: Union[str, XAxisLabels] = XAxisLabels.TICK_VALUE,
    measure_name: str = "Value",
    tooltip_name: Optional[str] = None,
    fmt: NumberFormatter = format_number,
) -> dict:
    """Create the binned bar chart with optional normal curve overlay.

    Args:
        result: Output of compute_binned_chart().
        theme: Theme mode (DARK or LIGHT). Defaults to LIGHT if None.
        bar_color: Fill color for all bars.
        curve_color: Line and marker color of the normal curve.
        curve_width: Line width of the normal curve.
        show_bar_values: If True, print each bin's aggregated value above its bar.
        x_labels: TICK_VALUE for boundary ticks, BIN_RANGE for one range label per bin.
        measure_name: Display name of the aggregated measure in hover text.
        tooltip_name: Display name of the tooltip aggregate in hover text (omitted if None).
        fmt: Number formatter for labels and hover text.

    Returns:
        Plotly figure dict.
    """
    theme_mode = resolve_theme(theme)
    template = get_theme_template(theme_mode)
    bg_color, fg_color = get_theme_colors(theme_mode)
    grid_color = get_grid_color(theme_mode)

    bins = result.bins
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=[b.midpoint for b in bins],
            y=[b.aggregated_value for b in bins],
            width=[b.width for b in bins],
            customdata=[b.index for b in bins],
            hovertext=[
                tooltip_text(bin_tooltip_items(b, measure_name=measure_name, tooltip_name=tooltip_name, fmt=fmt))
                for b in bins
            ],
            hoverinfo="text",
            text=[fmt(b.aggregated_value) for b in bins] if show_bar_values else None,
            textposition="outside" if show_bar_values else None,
            marker_color=bar_color,
            marker_line_width=1,
            marker_line_color=bg_color,
            name=measure_name,
        )
    )

    curve = result.curve
    if curve is not None:
        fig.add_trace(
            go.Scatter(
                x=[x for x, _ in curve.samples],
                y=[y for _, y in curve.samples],
                mode="lines",
                line=dict(color=curve_color, width=curve_width),
                hoverinfo="skip",
                name="Normal curve",
            )
        )
        fig.add_trace(
            go.Scatter(
                x=[x for x, _ in curve.bin_midpoint_expectations],
                y=[y for _, y in curve.bin_midpoint_expectations],
                mode="markers",
                marker=dict(color=curve_color, size=6),
                hovertext=[
                    tooltip_text(curve_marker_tooltip_items(curve, x, y, fmt))
                    for x, y in curve.bin_midpoint_expectations
                ],
                hoverinfo="text",
                name="Expected",
            )
        )

    if XAxisLabels(x_labels) is XAxisLabels.BIN_RANGE:
        xaxis_ticks = dict(
            tickmode="array",
            tickvals=[b.midpoint for b in bins],
            ticktext=[bin_range_label(b, fmt) for b in bins],
        )
    else:
        ticks = tick_values(bins)
        xaxis_ticks = dict(tickmode="array", tickvals=ticks, ticktext=[fmt(t) for t in ticks])

    yaxis = dict(color=fg_color, gridcolor=grid_color, title=measure_name)
    if show_bar_values and bins:
        y_max = max(b.aggregated_value for b in bins)
        if y_max > 0:
            yaxis["range"] = [0.0, y_max * Y_MAX_MULTIPLIER]

    fig.update_layout(
        template=template,
        paper_bgcolor=bg_color,
        plot_bgcolor=bg_color,
        font=dict(color=fg_color),
        bargap=0,
        xaxis=dict(
            color=fg_color,
            gridcolor=grid_color,
            range=[result.plan.aligned_min, result.plan.aligned_max],
            **xaxis_ticks,
        ),
        yaxis=yaxis,
        margin=dict(l=0, r=20, t=10, b=20),
        showlegend=False,
    )

    return fig.to_dict()
