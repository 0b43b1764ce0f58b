from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np
import plotly.graph_objects as go

from . import config


def sturges_bins(n: int) -> int:
    if n < 1:
        return 1
    return int(math.ceil(math.log2(n) + 1))


def _base_layout(fig: go.Figure, *, title: str, uirevision: str) -> go.Figure:
    fig.update_layout(
        height=config.FIGURE_HEIGHT,
        margin=dict(config.FIGURE_MARGIN),
        title=dict(text=title, x=0.02),
        showlegend=False,
        uirevision=uirevision,
        bargap=0.02,
    )
    return fig


def build_histogram_figure(
    dataset: Sequence[float],
    *,
    title: str,
    uirevision: str,
    color: str = config.FIGURE_COLORS["normal"],
) -> go.Figure:
    values = np.asarray(dataset, dtype=float)
    fig = go.Figure(
        data=go.Histogram(
            x=values,
            nbinsx=sturges_bins(values.size),
            marker=dict(color=color, line=dict(color=config.FIGURE_COLORS["edge"], width=1)),
            hovertemplate="%{x}<br>count=%{y}<extra></extra>",
        )
    )
    fig.update_xaxes(title="value", showgrid=True, gridcolor=config.AXIS_LINE_STYLE["gridcolor"])
    fig.update_yaxes(
        title="Frequency",
        showgrid=True,
        zeroline=True,
        gridcolor=config.AXIS_LINE_STYLE["gridcolor"],
        zerolinecolor=config.AXIS_LINE_STYLE["zerolinecolor"],
    )
    return _base_layout(fig, title=title, uirevision=uirevision)


def empty_figure(uirevision: str, message: Optional[str] = None) -> go.Figure:
    fig = go.Figure()
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    if message:
        fig.add_annotation(
            text=message,
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5,
            showarrow=False,
            font=dict(color=config.FIGURE_COLORS["muted"], size=14),
        )
    return _base_layout(fig, title="", uirevision=uirevision)


def render_dataset(
    dataset: Optional[Sequence[float]],
    *,
    source_label: str,
    uirevision: str,
    color: Optional[str] = None,
) -> go.Figure:
    if dataset is None or len(dataset) == 0:
        return empty_figure(uirevision, config.EMPTY_PLOT_MESSAGE)
    return build_histogram_figure(
        dataset,
        title=f"Histogram of {source_label}",
        uirevision=uirevision,
        color=color or config.FIGURE_COLORS["normal"],
    )
