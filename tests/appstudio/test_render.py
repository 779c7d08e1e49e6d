# %%
import numpy as np
import plotly.graph_objects as go
import pytest
from matplotlib.figure import Figure

import appstudio.plot as Plot
from appstudio import render
from appstudio.datasets import faithful
from appstudio.render import format_cell, table_columns, table_html


def test_format_cell():
    assert format_cell(1.23456, 2) == "1.23"
    assert format_cell(np.float64(2.5), 1) == "2.5"
    assert format_cell(float("nan"), 3) == "NA"
    assert format_cell(np.int64(7), 3) == "7"
    assert format_cell("setosa", 3) == "setosa"


def test_table_columns():
    assert table_columns({"a": [1, 2], "b": 3}) == {"a": [1, 2], "b": [3]}
    assert table_columns([{"a": 1}, {"a": 2, "b": "x"}]) == {"a": [1, 2], "b": [None, "x"]}
    assert list(table_columns(faithful().head(2))) == ["eruptions", "waiting"]
    with pytest.raises(TypeError):
        table_columns([1, 2])
    with pytest.raises(TypeError):
        table_columns("text")


def test_table_html():
    html = table_html({"x": [1.5, 2.25], "label": ["a", "b"]}, digits=1)
    assert html.startswith('<table class="appstudio-table">')
    assert "<th>x</th><th>label</th>" in html
    assert "<tr><td>1.5</td><td>a</td></tr>" in html
    assert "<td>2.2</td>" in html or "<td>2.3</td>" in html


def test_table_truncation():
    html = table_html(faithful(), max_rows=5)
    assert html.count("<tr>") == 1 + 5
    assert '<td colspan="2">... 267 more rows</td>' in html


def test_text_renderer():
    renderer = render.text(lambda: 42)
    assert renderer.kind == "text"
    assert renderer.payload(renderer()) == {"kind": "text", "value": "42"}
    assert renderer.payload(None) == {"kind": "text", "value": ""}
    with pytest.raises(TypeError):
        render.text("not callable")


def test_plot_renderer_accepts_charts():
    renderer = render.plot(lambda: None)
    assert renderer.payload(None) == {"kind": "plot", "figure": None, "config": {}}

    payload = renderer.payload(Plot.dot([1, 2]))
    assert payload["kind"] == "plot"
    assert payload["figure"]["data"][0]["type"] == "scatter"
    assert "__type__" not in payload

    payload = renderer.payload(go.Figure(go.Bar(x=[1], y=[2])))
    assert payload["figure"]["data"][0]["type"] == "bar"

    fig = Figure()
    fig.subplots().plot([1, 2], [3, 4])
    payload = renderer.payload(fig)
    assert payload["figure"]["data"][0]["mode"] == "lines"


def test_plot_renderer_interactivity_override():
    chart = Plot.dot([1, 2]) + Plot.interactive()
    assert render.plot(interactive=False)(lambda: chart).payload(chart)["config"]["staticPlot"] is True
    assert render.plot(lambda: chart).payload(chart)["config"]["staticPlot"] is False


def test_table_renderer():
    renderer = render.table(lambda: None, digits=1)
    assert renderer.payload(None) == {"kind": "table", "html": ""}
    payload = renderer.payload({"mean": [70.897]})
    assert payload["kind"] == "table"
    assert "<td>70.9</td>" in payload["html"]
