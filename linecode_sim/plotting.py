from __future__ import annotations

from typing import Sequence

import plotly.graph_objects as go

from utils import SignalSegment, axis_bounds, bits_to_points, segments_to_points


def plot_segments(segments: Sequence[SignalSegment], title: str, grid: bool = False, x_dtick: float = 1.0) -> go.Figure:
    t, x = segments_to_points(segments)
    (x0, x1), (y0, y1) = axis_bounds(t, x)

    fig = go.Figure()
    fig.add_trace(go.Scatter(x=t, y=x, mode="lines", name=title))
    fig.update_layout(title=title, xaxis_title="Time (s)", yaxis_title="Voltage")
    fig.update_xaxes(range=[x0, x1])
    fig.update_yaxes(range=[y0, y1])
    if grid:
        fig.update_xaxes(showgrid=True, tickmode="linear", dtick=x_dtick)
        fig.update_yaxes(showgrid=True)
    return fig


def plot_bits(bits: Sequence[int], tb: float, grid: bool = False) -> go.Figure:
    t, x = bits_to_points(bits, tb)
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=t, y=x, mode="lines", line_shape="hv", name="bits"))
    fig.update_layout(title="Input bits (0/1)", xaxis_title="Time (s)", yaxis_title="Bit")
    if grid:
        fig.update_xaxes(showgrid=True, tickmode="linear", dtick=tb)
        fig.update_yaxes(showgrid=True, tickmode="linear", dtick=1)
    return fig
