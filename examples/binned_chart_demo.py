"""Bin a small pre-aggregated table and write the chart to binned_chart.html.

Run:
    python examples/binned_chart_demo.py
"""

from pathlib import Path

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from easybinner import BinMode, BinSettings, Reducer, compute_binned_chart, observations_from_dataframe
from easybinner.binning import bins_to_dataframe
from easybinner.binning.figure_generator import XAxisLabels, make_binned_chart_figure
from easybinner.utils.logging import configure_logging

configure_logging(level="DEBUG")

rng = np.random.default_rng(42)
ages = np.arange(18, 80)
df = pd.DataFrame(
    {
        "age": ages,
        "customers": rng.poisson(lam=40 * np.exp(-((ages - 42) / 15.0) ** 2)) + 1,
        "revenue": rng.gamma(shape=2.0, scale=150.0, size=len(ages)),
        "margin": rng.uniform(0.05, 0.35, size=len(ages)),
    }
)

observations = observations_from_dataframe(
    df,
    bin_col="age",
    measure_col="revenue",
    weight_col="customers",
    tooltip_col="margin",
)

settings = BinSettings(
    mode=BinMode.BY_COUNT,
    number_of_bins=8,
    measure_reducer=Reducer.SUM,
    tooltip_reducer=Reducer.WEIGHTED_AVG,
    show_normal_curve=True,
)


def on_warning(warning):
    print(f"WARNING [{warning.kind}]: {warning.message}")


result = compute_binned_chart(observations, settings, on_warning=on_warning)
print(bins_to_dataframe(result.bins).to_string(index=False))
if result.curve is not None:
    print(f"\nmean={result.curve.mean:.2f} std_dev={result.curve.std_dev:.2f}")

fig_dict = make_binned_chart_figure(
    result,
    x_labels=XAxisLabels.BIN_RANGE,
    show_bar_values=True,
    measure_name="Revenue",
    tooltip_name="Margin",
    fmt=lambda v: f"{v:,.4g}",
)
out = Path(__file__).resolve().parent / "binned_chart.html"
go.Figure(fig_dict).write_html(out)
print(f"\nWrote {out}")
