"""
Render functions: wrap a zero-argument function computing an output's value.

    output.caption = render.text(lambda: input.title)

    @output
    @render.plot
    def histogram():
        return Plot.Histogram(faithful()["waiting"], bins=input.bins)
"""

import functools
from typing import Any, Callable, Dict

import numpy as np

from appstudio.layout import render_html


class Renderer:
    kind = "output"

    def __init__(self, fn: Callable[[], Any]):
        if not callable(fn):
            raise TypeError(f"render.{self.kind} needs a function, got {type(fn).__name__}")
        self.fn = fn
        functools.update_wrapper(self, fn)

    def __call__(self) -> Any:
        return self.fn()

    def payload(self, value: Any) -> Dict[str, Any]:
        raise NotImplementedError("Subclasses must implement payload method")

    def __repr__(self):
        return f"<render.{self.kind} {getattr(self, '__name__', '?')}>"


class TextRenderer(Renderer):
    kind = "text"

    def payload(self, value):
        return {"kind": "text", "value": "" if value is None else str(value)}


class PlotRenderer(Renderer):
    kind = "plot"

    def __init__(self, fn, interactive=None):
        super().__init__(fn)
        self.interactive = interactive

    def payload(self, value):
        if value is None:
            return {"kind": "plot", "figure": None, "config": {}}
        from appstudio import plot as Plot
        from appstudio.adapters import as_plot

        spec = as_plot(value)
        if self.interactive is not None:
            spec = spec + (Plot.interactive() if self.interactive else Plot.static())
        return {"kind": "plot", **{k: v for k, v in spec.for_json().items() if k != "__type__"}}


def format_cell(value: Any, digits: int) -> str:
    if isinstance(value, (float, np.floating)):
        if np.isnan(value):
            return "NA"
        return f"{value:.{digits}f}"
    if isinstance(value, np.generic):
        value = value.item()
    return str(value)


def table_columns(value: Any) -> Dict[str, list]:
    """Normalise a Dataset, dict of columns or list of row dicts into columns."""
    if hasattr(value, "columns") and isinstance(value.columns, dict):
        return {k: list(v) for k, v in value.columns.items()}
    if isinstance(value, dict):
        return {k: list(np.atleast_1d(v)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        columns: Dict[str, list] = {}
        for row in value:
            if not isinstance(row, dict):
                raise TypeError(f"Table rows must be dicts, got {type(row).__name__}")
            for key in row:
                columns.setdefault(key, [])
        for row in value:
            for key in columns:
                columns[key].append(row.get(key))
        return columns
    raise TypeError(f"Cannot render object of type {type(value).__name__} as a table")


def table_html(value: Any, max_rows: int = 50, digits: int = 3) -> str:
    columns = table_columns(value)
    names = list(columns)
    n_rows = max((len(v) for v in columns.values()), default=0)
    shown = min(n_rows, max_rows)
    rows = [
        ["tr", *(["td", format_cell(columns[name][i], digits)] for name in names)]
        for i in range(shown)
    ]
    if n_rows > shown:
        rows.append(
            ["tr.appstudio-table-more", ["td", {"colspan": len(names)}, f"... {n_rows - shown} more rows"]]
        )
    return render_html(
        [
            "table.appstudio-table",
            ["thead", ["tr", *(["th", name] for name in names)]],
            ["tbody", *rows],
        ]
    )


class TableRenderer(Renderer):
    kind = "table"

    def __init__(self, fn, max_rows=50, digits=3):
        super().__init__(fn)
        self.max_rows = max_rows
        self.digits = digits

    def payload(self, value):
        if value is None:
            return {"kind": "table", "html": ""}
        return {"kind": "table", "html": table_html(value, self.max_rows, self.digits)}


def _renderer(cls, fn, **options):
    # usable bare (@render.plot) or with options (@render.plot(interactive=True))
    if fn is None:
        return lambda f: cls(f, **options)
    return cls(fn, **options)


def text(fn=None):
    return _renderer(TextRenderer, fn)


def plot(fn=None, *, interactive=None):
    """Render a PlotSpec, plotly figure or matplotlib figure. `interactive` overrides the chart's own setting."""
    return _renderer(PlotRenderer, fn, interactive=interactive)


def table(fn=None, *, max_rows=50, digits=3):
    """Render a Dataset, dict of columns or list of row dicts as an HTML table."""
    return _renderer(TableRenderer, fn, max_rows=max_rows, digits=digits)
