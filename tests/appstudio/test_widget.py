# %%
import datetime

import numpy as np
import pytest

import appstudio.plot as Plot
import appstudio.ui as ui
from appstudio import render
from appstudio.app import App
from appstudio.layout import Hiccup
from appstudio.widget import Widget, to_json


def test_to_json():
    assert to_json(np.array([1.0, np.nan])) == [1.0, None]
    assert to_json(np.int64(3)) == 3
    assert to_json(float("nan")) is None
    assert to_json({"a": (1, 2)}) == {"a": [1, 2]}
    assert to_json(datetime.date(2024, 1, 2)) == {"__type__": "datetime", "value": "2024-01-02"}
    assert to_json(Hiccup(["p", "x"])) == ["p", "x"]


def test_to_json_generators_warn():
    with pytest.warns(UserWarning):
        assert to_json(i for i in range(3)) == [0, 1, 2]


def test_to_json_unsupported():
    with pytest.raises(TypeError):
        to_json(object())


def test_widget_for_layout_item():
    widget = Widget(Plot.dot([1, 2, 3]))
    assert widget.session is None
    assert "appstudio-plot" in widget.data["html"]


def test_layout_item_reset():
    item = Hiccup(["p", "before"])
    widget = item.widget()
    item.reset(Hiccup(["p", "after"]))
    assert widget.data["html"] == "<p>after</p>"


def make_app():
    app_ui = ui.page(ui.slider_input("n", "N", 1, 10, 2), ui.text_output("value"))

    def server(input, output):
        output.value = render.text(lambda: input.n * 10)

    return App(app_ui, server)


@pytest.fixture
def sent(monkeypatch):
    messages = []
    monkeypatch.setattr(Widget, "send", lambda self, content, buffers=None: messages.append(content))
    return messages


def test_app_widget(sent):
    widget = make_app().widget()
    assert widget.data["inputs"] == {"n": 2}
    assert widget.data["outputs"] == {"value": {"kind": "text", "value": "20"}}
    assert 'data-input="n"' in widget.data["html"]

    widget._handle_msg(widget, {"type": "set_inputs", "values": {"n": 4}}, [])
    assert sent == [{"type": "outputs", "outputs": {"value": {"kind": "text", "value": "40"}}}]


def test_app_widget_bad_input(sent):
    widget = make_app().widget()
    widget._handle_msg(widget, {"type": "set_inputs", "values": {"missing": 1}}, [])
    assert sent == [{"type": "error", "message": "Unknown input 'missing'"}]
    widget._handle_msg(widget, {"type": "something else"}, [])
    assert len(sent) == 1


def test_widget_inputs_from_python(sent):
    widget = make_app().widget()
    widget.inputs.n = 5
    assert widget.inputs.n == 5
    assert sent == [
        {
            "type": "update",
            "inputs": {"n": 5},
            "outputs": {"value": {"kind": "text", "value": "50"}},
        }
    ]


def test_set_item_ends_the_replaced_session():
    app = make_app()
    widget = Widget(app)
    first = widget.session
    widget.set_item(app)
    assert len(app.sessions) == 1
    assert first.id not in app.sessions

    widget.set_item(Hiccup(["p", "plain"]))
    assert widget.session is None
    assert len(app.sessions) == 0
