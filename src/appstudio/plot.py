# %%
from typing import Any, Dict

import numpy as np
import plotly.graph_objects as go

from appstudio.layout import Column, Hiccup, Row, md
from appstudio.plot_spec import MarkSpec, PlotSpec, new

# This module provides a composable way to create plots, rendered with plotly.
#
# Key features:
# - Create plot specifications declaratively by combining marks and options
# - Compose plot specs using + operator to layer marks and merge options
# - Plots start out static, like a printed chart; `interactive` adds hover
#   tooltips, zoom and pan to a PlotSpec, a plotly figure or a matplotlib figure
# - Includes shortcuts for common options like grid lines, color legends, margins

html = Hiccup


def _column(data, key, default=None):
    if key is None:
        return default
    if isinstance(key, str):
        if hasattr(data, "columns") or isinstance(data, dict):
            return np.asarray(data[key])
        raise TypeError(f"Cannot look up column {key!r} in {type(data).__name__}")
    return np.asarray(key)


def channels(data, x=None, y=None, color=None) -> Dict[str, Any]:
    """
    Resolve the x, y and color channels of a mark.

    `data` may be a Dataset, a dict of columns, a list of [x, y] pairs or a flat
    list of values (plotted against their index). Channel arguments may name
    columns or be given directly as sequences.
    """
    if data is None or hasattr(data, "columns") or isinstance(data, dict):
        xs, ys = _column(data, x), _column(data, y)
    else:
        values = np.asarray(data)
        if values.ndim == 2 and values.shape[1] == 2 and x is None and y is None:
            xs, ys = values[:, 0], values[:, 1]
        elif values.ndim == 1:
            ys = values if y is None else _column(data, y)
            xs = np.arange(len(values)) if x is None else _column(data, x)
        else:
            raise ValueError(f"Expected [x, y] pairs or a flat list, got shape {values.shape}")
    if xs is None or ys is None:
        raise ValueError("Both x and y channels are required")
    groups = None
    if isinstance(color, str) and (hasattr(data, "columns") or isinstance(data, dict)) and color in data:
        groups = np.asarray(data[color])
    elif color is not None and not isinstance(color, str):
        groups = np.asarray(color)
    return {"x": xs, "y": ys, "groups": groups}


def _axis_titles(x, y):
    layout = {}
    if isinstance(x, str):
        layout["xaxis"] = {"title": {"text": x}}
    if isinstance(y, str):
        layout["yaxis"] = {"title": {"text": y}}
    return layout


def _grouped(trace_type, resolved, color, name, trace_options):
    def build(options, colors):
        groups = resolved["groups"]
        if groups is None:
            fixed = color if isinstance(color, str) else colors(name or "default")
            yield trace_type(
                x=resolved["x"],
                y=resolved["y"],
                name=name,
                showlegend=name is not None,
                **trace_options(fixed),
            )
            return
        for group in dict.fromkeys(groups.tolist()):
            mask = groups == group
            yield trace_type(
                x=resolved["x"][mask],
                y=resolved["y"][mask],
                name=str(group),
                legendgroup=str(group),
                **trace_options(colors(group)),
            )

    return build


def dot(data=None, x=None, y=None, color=None, r=6, name=None, **options) -> PlotSpec:
    """
    A scatterplot mark.

        Plot.dot(iris(), x="sepal_length", y="petal_length", color="species")

    Args:
        data: Dataset, dict of columns, [x, y] pairs or flat values.
        x, y: column names or sequences.
        color: a column name (one colour per group, with legend) or a constant colour.
        r: marker radius in pixels.
    """
    resolved = channels(data, x, y, color)
    build = _grouped(
        go.Scatter,
        resolved,
        color,
        name,
        lambda c: {"mode": "markers", "marker": {"color": c, "size": r * 2}, **options},
    )
    return PlotSpec(MarkSpec("dot", build, layout=_axis_titles(x, y)))


def line(data=None, x=None, y=None, color=None, stroke_width=2, name=None, **options) -> PlotSpec:
    """A line mark, drawn in data order. Accepts the same data forms as `dot`."""
    resolved = channels(data, x, y, color)
    build = _grouped(
        go.Scatter,
        resolved,
        color,
        name,
        lambda c: {"mode": "lines", "line": {"color": c, "width": stroke_width}, **options},
    )
    return PlotSpec(MarkSpec("line", build, layout=_axis_titles(x, y)))


def barY(data=None, x=None, y=None, color=None, name=None, **options) -> PlotSpec:
    """Vertical bars of height y at each x."""
    resolved = channels(data, x, y, color)
    build = _grouped(
        go.Bar, resolved, color, name, lambda c: {"marker": {"color": c}, **options}
    )
    return PlotSpec(MarkSpec("barY", build, layout=_axis_titles(x, y)))


bar_y = barY


def ruleY(values, stroke="black", stroke_width=1) -> PlotSpec:
    """Horizontal rules spanning the plot at each y value."""
    shapes = [
        {
            "type": "line",
            "xref": "paper",
            "x0": 0,
            "x1": 1,
            "y0": v,
            "y1": v,
            "line": {"color": stroke, "width": stroke_width},
        }
        for v in values
    ]
    return PlotSpec(MarkSpec("ruleY", lambda options, colors: [], layout={"shapes": shapes}))


rule_y = ruleY


def histogram_bins(values, bins=30):
    """
    Split `values` into `bins` equal-width intervals spanning min..max.

    Intervals are half-open except the last, which includes the maximum, so the
    counts always sum to the number of (finite) values.

    Returns:
        (edges, counts): numpy arrays of length bins + 1 and bins.
    """
    bins = int(bins)
    if bins < 1:
        raise ValueError(f"bins must be at least 1, got {bins}")
    values = np.asarray(values, dtype=float)
    values = values[np.isfinite(values)]
    if values.size == 0:
        return np.linspace(0, 1, bins + 1), np.zeros(bins, dtype=int)
    lo, hi = values.min(), values.max()
    if lo == hi:
        lo, hi = lo - 0.5, hi + 0.5
    counts, edges = np.histogram(values, bins=bins, range=(lo, hi))
    return edges, counts


def Histogram(
    values,
    bins=30,
    color="#75AADB",
    border="white",
    cumulative=False,
    density=False,
    name=None,
    **plot_opts,
) -> PlotSpec:
    """
    Create a histogram plot from the given values.

    Args:
        values (list or array-like): The data values to be binned and plotted.
        bins (int): number of equal-width bins between the smallest and largest value.
        color (str): bar fill colour.
        border (str): bar outline colour.
        cumulative (bool): plot running totals instead of per-bin counts.
        density (bool): scale bars so their total area is 1.

    Returns:
        PlotSpec: A plot specification for a histogram with the y-axis representing the count of values in each bin.
    """
    edges, counts = histogram_bins(values, bins)
    heights = counts.astype(float)
    if cumulative:
        heights = np.cumsum(heights)
    if density and counts.sum() > 0:
        heights = heights / (counts.sum() * np.diff(edges))

    def build(options, colors):
        yield go.Bar(
            x=(edges[:-1] + edges[1:]) / 2,
            y=heights,
            width=np.diff(edges),
            customdata=np.column_stack([edges[:-1], edges[1:], counts]),
            hovertemplate="[%{customdata[0]:.4g}, %{customdata[1]:.4g}]<br>count: %{customdata[2]:d}<extra></extra>",
            marker={"color": color, "line": {"color": border, "width": 1}},
            name=name,
            showlegend=name is not None,
        )

    y_title = "Density" if density else "Cumulative frequency" if cumulative else "Frequency"
    layout = {"bargap": 0, "yaxis": {"title": {"text": y_title}}}
    return PlotSpec(MarkSpec("histogram", build, layout=layout), plot_opts or [])


histogram = Histogram


def figure(fig) -> PlotSpec:
    """Use an existing plotly figure (its traces and layout) as a layer."""
    fig = go.Figure(fig)
    traces = list(fig.data)
    layout = fig.layout.to_plotly_json()
    layout.pop("template", None)
    return PlotSpec(MarkSpec("figure", lambda options, colors: traces, layout=layout))


def interactive(obj=None, hover=True, zoom=True):
    """
    Add interactivity (hover tooltips, zoom and pan) to a chart.

    Called with no chart, returns an option dict to add to a PlotSpec:

        Plot.dot(points) + Plot.interactive()

    Called with a chart, wraps it and returns an interactive PlotSpec. The chart
    may be a PlotSpec, a plotly figure or a static matplotlib figure:

        fig, ax = plt.subplots()
        ax.scatter(xs, ys)
        Plot.interactive(fig)
    """
    option = {"interactive": {"hover": hover, "zoom": zoom}}
    if obj is None:
        return option
    from appstudio.adapters import as_plot

    return as_plot(obj) + option


def static(obj=None):
    """Turn interactivity off: the chart is drawn once and ignores the pointer."""
    option = {"interactive": False}
    if obj is None:
        return option
    from appstudio.adapters import as_plot

    return as_plot(obj) + option


# The following convenience dicts can be added directly to PlotSpec to declare additional behaviour.


def grid(x=True, y=True):
    return {"grid": x and y} if x == y else {"x": {"grid": x}, "y": {"grid": y}}


def hideAxis(x=None, y=None):
    if x is None and y is None:
        return {"axis": None}
    return {k: {"axis": None} for k, v in (("x", x), ("y", y)) if v is not None}


hide_axis = hideAxis


def colorLegend(show=True):
    return {"color": {"legend": show}}


color_legend = colorLegend


def title(title):
    return {"title": title}


def xlabel(label):
    return {"x": {"label": label}}


def ylabel(label):
    return {"y": {"label": label}}


def width(width):
    return {"width": width}


def height(height):
    return {"height": height}


def size(size, height=None):
    return {"width": size, "height": height or size}


def colorScheme(name):
    # any plotly.colors.qualitative palette, eg. "Set2", "D3", "Pastel"
    return {"color": {"scheme": name}}


color_scheme = colorScheme


def logX():
    return {"x": {"type": "log"}}


def logY():
    return {"y": {"type": "log"}}


def domainX(d):
    return {"x": {"domain": d}}


def domainY(d):
    return {"y": {"domain": d}}


def domain(xd, yd=None):
    return {"x": {"domain": xd}, "y": {"domain": yd or xd}}


def colorMap(mappings):
    # these will be merged & so are composable.
    return {"color_map": mappings}


color_map = colorMap


def margin(*args):
    """
    Set margin values for a plot using CSS-style margin shorthand.

    Supported arities:
        margin(all)
        margin(vertical, horizontal)
        margin(top, horizontal, bottom)
        margin(top, right, bottom, left)

    """
    if len(args) == 1:
        return {"margin": args[0]}
    elif len(args) == 2:
        return {
            "marginTop": args[0],
            "marginBottom": args[0],
            "marginLeft": args[1],
            "marginRight": args[1],
        }
    elif len(args) == 3:
        return {
            "marginTop": args[0],
            "marginLeft": args[1],
            "marginRight": args[1],
            "marginBottom": args[2],
        }
    elif len(args) == 4:
        return {
            "marginTop": args[0],
            "marginRight": args[1],
            "marginBottom": args[2],
            "marginLeft": args[3],
        }
    else:
        raise ValueError(f"Invalid number of arguments: {len(args)}")


__all__ = [
    "Column",
    "Histogram",
    "MarkSpec",
    "PlotSpec",
    "Row",
    "barY",
    "bar_y",
    "channels",
    "colorLegend",
    "colorMap",
    "colorScheme",
    "color_legend",
    "color_map",
    "color_scheme",
    "domain",
    "domainX",
    "domainY",
    "dot",
    "figure",
    "grid",
    "height",
    "hideAxis",
    "hide_axis",
    "histogram",
    "histogram_bins",
    "html",
    "interactive",
    "line",
    "logX",
    "logY",
    "margin",
    "md",
    "new",
    "ruleY",
    "rule_y",
    "size",
    "static",
    "title",
    "width",
    "xlabel",
    "ylabel",
]
