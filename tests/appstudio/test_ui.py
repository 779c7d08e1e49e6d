# %%
import pytest

import appstudio.ui as ui
from appstudio.layout import render_html


def test_slider_coerces_client_values():
    slider = ui.slider_input("bins", "Number of bins", 1, 50, 30)
    assert slider.value == 30
    assert slider.coerce("12") == 12
    assert isinstance(slider.coerce("12"), int)
    assert slider.coerce(12.4) == 12
    assert slider.coerce(100) == 50
    assert slider.coerce(-3) == 1
    with pytest.raises(ValueError):
        slider.coerce("many")
    with pytest.raises(ValueError):
        slider.coerce(float("nan"))


def test_slider_with_fractional_step():
    slider = ui.slider_input("alpha", "Alpha", 0, 1, 0.5, step=0.1)
    assert slider.coerce(0.33) == 0.3
    assert slider.coerce(2) == 1


def test_slider_validation():
    with pytest.raises(ValueError):
        ui.slider_input("n", "N", 5, 5, 5)
    with pytest.raises(ValueError):
        ui.slider_input("n", "N", 1, 10, 11)
    with pytest.raises(ValueError):
        ui.slider_input("n", "N", 1, 10, 5, step=0)


def test_select_input():
    select = ui.select_input("color", "Colour", {"Blue": "#75AADB", "Orange": "#F28E2B"})
    assert select.value == "#75AADB"
    assert select.coerce("#F28E2B") == "#F28E2B"
    with pytest.raises(ValueError):
        select.coerce("pink")
    with pytest.raises(ValueError):
        ui.select_input("color", "Colour", ["a", "b"], selected="c")
    with pytest.raises(ValueError):
        ui.select_input("color", "Colour", [])

    numbers = ui.select_input("n", "N", [1, 2, 3], selected=2)
    assert numbers.coerce("3") == 3


def test_text_input():
    text = ui.text_input("title", "Title", "Hello")
    assert text.value == "Hello"
    assert text.coerce(None) == ""
    assert text.coerce(5) == "5"


def test_ids_must_be_identifiers():
    with pytest.raises(ValueError):
        ui.text_input("plot-title", "Title")
    with pytest.raises(ValueError):
        ui.text_output("1st")


def test_rendered_controls():
    html = render_html(ui.slider_input("bins", "Number of bins", 1, 50, 30))
    assert 'data-input="bins"' in html
    assert 'type="range"' in html
    assert '<label for="input-bins">Number of bins</label>' in html

    html = render_html(ui.select_input("color", "Colour", ["red", "blue"], selected="blue"))
    assert '<option value="blue" selected>blue</option>' in html
    assert '<option value="red">red</option>' in html

    html = render_html(ui.plot_output("histogram", height=300))
    assert 'data-output="histogram"' in html
    assert "min-height: 300px" in html


def example_page():
    return ui.page(
        ui.title_panel("Old Faithful"),
        ui.sidebar_layout(
            ui.sidebar_panel(
                ui.text_input("title", "Title"),
                ui.slider_input("bins", "Bins", 1, 50, 30),
            ),
            ui.main_panel(ui.text_output("caption"), ui.plot_output("histogram")),
        ),
    )


def test_page_walks_widgets_in_order():
    page = example_page()
    assert list(page.inputs()) == ["title", "bins"]
    assert list(page.outputs()) == ["caption", "histogram"]
    assert page.title == "Old Faithful"
    assert page.validate() is page


def test_page_title():
    assert ui.page(ui.title_panel("Shown", window_title="Tab")).title == "Tab"
    assert ui.page(title="Explicit").title == "Explicit"
    assert ui.page().title == "appstudio"


def test_duplicate_ids():
    page = ui.page(ui.text_input("x", "X"), ui.main_panel(ui.text_output("x")))
    with pytest.raises(ValueError, match="Duplicate widget id 'x'"):
        page.validate()


def test_sidebar_layout():
    html = render_html(ui.sidebar_layout(ui.sidebar_panel("SIDE CONTENT"), ui.main_panel("MAIN CONTENT"), position="right"))
    assert html.index("MAIN CONTENT") < html.index("SIDE CONTENT")
    with pytest.raises(ValueError):
        ui.sidebar_layout(ui.sidebar_panel(), ui.main_panel(), position="top")


def test_slider_default_step():
    assert ui.slider_input("n", "N", 0, 10, 2).step == 1
    # a fractional value moves the slider in hundredths of the range
    slider = ui.slider_input("x", "X", 0, 10, 2.5)
    assert slider.step == 0.1
    assert slider.value == 2.5
