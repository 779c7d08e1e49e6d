# %%
import pytest

import appstudio.plot as Plot
from appstudio.layout import (
    Column,
    Hiccup,
    Row,
    dumps_script_json,
    html_standalone,
    md,
    parse_tag,
    render_html,
)


def test_parse_tag():
    assert parse_tag("div.card.p-3#main") == ("div", "main", ["card", "p-3"])
    assert parse_tag(".note") == ("div", None, ["note"])
    assert parse_tag("span") == ("span", None, [])


def test_render_element():
    html = render_html(["div.a#b", {"style": {"fontSize": "12px"}}, "x<y"])
    assert html == '<div id="b" style="font-size: 12px" class="a">x&lt;y</div>'


def test_render_attributes():
    assert render_html(["input", {"type": "text", "disabled": True, "placeholder": None}]) == (
        '<input type="text" disabled>'
    )
    assert render_html(["a", {"title": 'say "hi"'}, "link"]) == '<a title="say &quot;hi&quot;">link</a>'
    with pytest.raises(TypeError):
        render_html(["button", {"onclick": lambda: None}])


def test_void_tags_have_no_children():
    assert render_html(["br"]) == "<br>"
    with pytest.raises(ValueError):
        render_html(["img", "child"])


def test_render_values_and_fragments():
    assert render_html(None) == ""
    assert render_html(3) == "3"
    assert render_html(("a", ["b", "c"])) == "a<b>c</b>"
    assert render_html(["ul", [["li", 1], ["li", 2]]]) == "<ul><li>1</li><li>2</li></ul>"
    with pytest.raises(TypeError):
        render_html({"not": "renderable"})


def test_render_plot_in_hiccup():
    html = render_html(["div", Plot.dot([1, 2, 3])])
    assert 'class="appstudio-plot"' in html
    assert '<script type="application/json">' in html
    assert '"staticPlot": true' in html


def test_dumps_script_json():
    assert dumps_script_json({"a": "</script>"}) == '{"a": "<\\/script>"}'


def test_layout_composition():
    a, b, c = Hiccup(["p", "a"]), Hiccup(["p", "b"]), Hiccup(["p", "c"])

    row = a & b & c
    assert isinstance(row, Row)
    assert len(row.items) == 3

    column = a | b
    assert isinstance(column, Column)
    assert len(column.items) == 2

    mixed = (a & b) | c
    assert isinstance(mixed, Column)
    assert isinstance(mixed.items[0], Row)


def test_row_widths():
    row = Row(Hiccup(["p", "a"]), Hiccup(["p", "b"]), widths=["1 1 30%", 2])
    html = render_html(row)
    assert 'style="flex: 1 1 30%"' in html
    assert 'style="flex: 2"' in html
    assert "flex-direction: row" in html


def test_md():
    html = render_html(md("First paragraph.\n\nSecond\nparagraph."))
    assert html == '<div class="appstudio-prose"><p>First paragraph.</p><p>Second\nparagraph.</p></div>'


def test_html_standalone():
    page = html_standalone(Hiccup(["p", "hello"]), bootstrap={"endpoint": "/"}, title="A & B")
    assert "<!DOCTYPE html>" in page
    assert "<title>A &amp; B</title>" in page
    assert "cdn.plot.ly" in page
    assert '{"endpoint": "/"}' in page
    assert "<p>hello</p>" in page
    assert "export function mount" in page


def test_save_html(tmp_path, capsys):
    path = tmp_path / "out" / "chart.html"
    Plot.histogram([1, 2, 2, 3], bins=3).save_html(str(path))
    assert path.exists()
    assert "appstudio-plot" in path.read_text()
    assert "HTML saved to" in capsys.readouterr().out


def test_display_as():
    item = Hiccup(["p", "x"])
    assert item.display_as("html").repr() is item.html()
    with pytest.raises(ValueError):
        item.display_as("pdf")
