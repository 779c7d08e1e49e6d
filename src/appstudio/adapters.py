"""
Turn chart objects from other libraries into PlotSpecs.

`as_plot` is the dispatch used by `Plot.interactive` and by `render.plot`:
a static matplotlib chart is rebuilt as plotly traces, so it can gain hover
tooltips and zoom without being redrawn by hand.
"""

from __future__ import annotations

from typing import Any, Iterator

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from appstudio import plot as Plot
from appstudio.exceptions import UnsupportedPlotTypeError
from appstudio.plot_spec import PlotSpec

DASHES = {"--": "dash", "dashed": "dash", "-.": "dashdot", "dashdot": "dashdot", ":": "dot", "dotted": "dot"}
NONE_STYLES = (None, "None", "none", "", " ")


def _is_matplotlib_axes(obj: Any) -> bool:
    try:
        from matplotlib.axes import Axes

        return isinstance(obj, Axes)
    except ImportError:
        return False


def _extract_figure_from_axes_array(obj: Any) -> Any:
    """Extract the matplotlib Figure from a numpy array of Axes (eg. from plt.subplots(2, 2)).

    Returns the Figure if obj is an array of Axes, otherwise returns None.
    """
    if not isinstance(obj, np.ndarray) or obj.size == 0:
        return None
    first = obj.flat[0]
    if _is_matplotlib_axes(first):
        return first.get_figure()
    return None


def as_plot(obj: Any) -> PlotSpec:
    """Best-effort dispatch from a chart object to a PlotSpec."""
    if isinstance(obj, PlotSpec):
        return obj

    # plotly figures, or their dict form
    if obj.__class__.__module__.startswith("plotly") or hasattr(obj, "to_plotly_json"):
        return Plot.figure(obj)

    # numpy array of matplotlib Axes
    fig = _extract_figure_from_axes_array(obj)
    if fig is not None:
        return from_matplotlib(fig)

    if _is_matplotlib_axes(obj):
        return from_matplotlib(obj.get_figure())

    # matplotlib Figure
    if hasattr(obj, "savefig") and hasattr(obj, "get_axes"):
        return from_matplotlib(obj)

    # seaborn grids and similar wrappers expose the underlying figure
    fig = getattr(obj, "figure", None)
    if fig is not None and hasattr(fig, "savefig"):
        return from_matplotlib(fig)

    raise UnsupportedPlotTypeError(type(obj))


def _css_color(color: Any, alpha: float | None = None) -> str | None:
    from matplotlib.colors import to_rgba

    if color is None or (isinstance(color, str) and color.lower() == "none"):
        return None
    r, g, b, a = to_rgba(color)
    if alpha is not None:
        a = alpha
    return f"rgba({r * 255:.0f},{g * 255:.0f},{b * 255:.0f},{a:.3g})"


def _legend_name(label: Any) -> str | None:
    # matplotlib hides labels that start with an underscore
    label = str(label) if label is not None else ""
    return None if not label or label.startswith("_") else label


def _line_traces(ax) -> Iterator[go.Scatter]:
    for line in ax.get_lines():
        linestyle = line.get_linestyle()
        marker = line.get_marker()
        modes = [
            mode
            for mode, on in (("lines", linestyle not in NONE_STYLES), ("markers", marker not in NONE_STYLES))
            if on
        ]
        if not modes:
            continue
        name = _legend_name(line.get_label())
        yield go.Scatter(
            x=np.asarray(line.get_xdata()),
            y=np.asarray(line.get_ydata()),
            mode="+".join(modes),
            name=name,
            showlegend=name is not None,
            line={
                "color": _css_color(line.get_color(), line.get_alpha()),
                "width": line.get_linewidth(),
                "dash": DASHES.get(linestyle, "solid"),
            },
            marker={
                "color": _css_color(line.get_markerfacecolor(), line.get_alpha()),
                "size": line.get_markersize(),
            },
        )


def _scatter_traces(ax) -> Iterator[go.Scatter]:
    from matplotlib.collections import PathCollection

    for collection in ax.collections:
        if not isinstance(collection, PathCollection):
            continue
        # colour-mapped scatters only resolve their face colours on draw
        collection.update_scalarmappable()
        offsets = np.asarray(collection.get_offsets())
        if offsets.size == 0:
            continue
        alpha = collection.get_alpha()
        faces = [_css_color(c, alpha) for c in collection.get_facecolors()]
        sizes = np.sqrt(collection.get_sizes())
        name = _legend_name(collection.get_label())
        yield go.Scatter(
            x=offsets[:, 0],
            y=offsets[:, 1],
            mode="markers",
            name=name,
            showlegend=name is not None,
            marker={
                "color": faces if len(faces) > 1 else (faces[0] if faces else None),
                "size": sizes.tolist() if len(sizes) > 1 else (float(sizes[0]) if len(sizes) else 6),
            },
        )


def _bar_traces(ax) -> Iterator[go.Bar]:
    from matplotlib.container import BarContainer

    for container in ax.containers:
        if not isinstance(container, BarContainer) or not container.patches:
            continue
        patches = container.patches
        xs = np.array([p.get_x() for p in patches])
        ys = np.array([p.get_y() for p in patches])
        widths = np.array([p.get_width() for p in patches])
        heights = np.array([p.get_height() for p in patches])
        first = patches[0]
        marker = {
            "color": _css_color(first.get_facecolor()),
            "line": {"color": _css_color(first.get_edgecolor()), "width": first.get_linewidth()},
        }
        name = _legend_name(container.get_label())
        if getattr(container, "orientation", "vertical") == "horizontal":
            yield go.Bar(
                orientation="h",
                y=ys + heights / 2,
                x=widths,
                base=xs,
                width=heights,
                marker=marker,
                name=name,
                showlegend=name is not None,
            )
        else:
            yield go.Bar(
                x=xs + widths / 2,
                y=heights,
                base=ys,
                width=widths,
                marker=marker,
                name=name,
                showlegend=name is not None,
            )


def axes_traces(ax) -> list[Any]:
    """plotly traces for the lines, scatter collections and bar containers of one Axes."""
    return [*_bar_traces(ax), *_line_traces(ax), *_scatter_traces(ax)]


def _axis_options(ax, which: str) -> dict[str, Any]:
    label = getattr(ax, f"get_{which}label")()
    scale = getattr(ax, f"get_{which}scale")()
    options: dict[str, Any] = {}
    if label:
        options["title_text"] = label
    if scale == "log":
        options["type"] = "log"
    return options


def from_matplotlib(fig) -> PlotSpec:
    """
    Rebuild a matplotlib Figure as a PlotSpec.

    Keeps lines and markers, scatter collections (with per-point colours),
    bar and histogram containers, titles, axis labels, log scales, legend
    visibility and the subplot grid.
    """
    axes = [ax for ax in fig.get_axes() if ax.get_subplotspec() is not None]
    if not axes:
        return PlotSpec()
    nrows, ncols = axes[0].get_subplotspec().get_gridspec().get_geometry()
    positions = {}
    for ax in axes:
        spec = ax.get_subplotspec()
        positions[id(ax)] = (spec.rowspan.start + 1, spec.colspan.start + 1)

    single = len(axes) == 1
    titles = [""] * (nrows * ncols)
    if not single:
        for ax in axes:
            row, col = positions[id(ax)]
            titles[(row - 1) * ncols + (col - 1)] = ax.get_title()
    figure = make_subplots(rows=nrows, cols=ncols, subplot_titles=None if single else titles)

    show_legend = False
    for ax in axes:
        row, col = positions[id(ax)]
        for trace in axes_traces(ax):
            figure.add_trace(trace, row=row, col=col)
        figure.update_xaxes(row=row, col=col, **_axis_options(ax, "x"))
        figure.update_yaxes(row=row, col=col, **_axis_options(ax, "y"))
        show_legend = show_legend or ax.get_legend() is not None

    title = axes[0].get_title() if single else None
    suptitle = fig.get_suptitle() if hasattr(fig, "get_suptitle") else ""
    figure.update_layout(showlegend=show_legend, barmode="overlay", bargap=0)
    if title or suptitle:
        figure.update_layout(title_text=suptitle or title)
    return Plot.figure(figure)
