import datetime
import logging
import warnings
from typing import Any, Iterable

import anywidget
import numpy as np
import traitlets

from appstudio.layout import render_html
from appstudio.util import PARENT_PATH

logger = logging.getLogger(__name__)


def to_json(data, widget=None):
    # Handle NaN at top level
    if isinstance(data, float):
        if np.isnan(data):
            return None
        return data

    # Handle basic JSON-serializable types first since they're most common
    if isinstance(data, (str, int, bool)):
        return data

    # Handle None case
    if data is None:
        return None

    # Handle datetime objects early since isinstance check is fast
    if isinstance(data, (datetime.date, datetime.datetime)):
        return {"__type__": "datetime", "value": data.isoformat()}

    # Handle numpy scalars and arrays
    if isinstance(data, np.generic):
        return to_json(data.item())
    if isinstance(data, np.ndarray):
        return [to_json(x) for x in data.tolist()]

    # Handle objects with custom serialization
    if hasattr(data, "for_json"):
        return to_json(data.for_json(), widget)

    # Handle containers
    if isinstance(data, dict):
        return {k: to_json(v, widget) for k, v in data.items()}

    if isinstance(data, (list, tuple, set)):
        return [to_json(x, widget) for x in data]

    if isinstance(data, Iterable):
        if not hasattr(data, "__len__") and not hasattr(data, "__getitem__"):
            warnings.warn(
                "Potentially exhaustible iterator encountered: generator", UserWarning
            )
        return [to_json(x, widget) for x in data]

    # Raise error for unsupported types
    raise TypeError(f"Object of type {type(data)} is not JSON serializable")


class WidgetInputs:
    """
    Set an app widget's inputs from Python; the browser follows.

        w = app.widget()
        w.inputs.bins = 10
    """

    def __init__(self, widget):
        object.__setattr__(self, "_widget", widget)

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return self._widget.session.read(name)

    def __setattr__(self, name, value):
        self.update({name: value})

    def update(self, values: dict):
        widget = self._widget
        outputs = widget.session.set_inputs(values)
        widget.send(
            to_json(
                {
                    "type": "update",
                    "inputs": {k: widget.session.values[k] for k in values},
                    "outputs": outputs,
                }
            )
        )
        return outputs


class Widget(anywidget.AnyWidget):
    """
    A Jupyter widget showing a LayoutItem, or running an App session in the notebook kernel.
    """

    _esm = PARENT_PATH / "js/runtime.js"
    _css = PARENT_PATH / "widget.css"
    data = traitlets.Any().tag(sync=True, to_json=lambda value, widget: to_json(value, widget))

    def __init__(self, item: Any):
        self.session = None
        super().__init__()
        self.inputs = WidgetInputs(self)
        self.set_item(item)
        self.on_msg(self._handle_msg)

    def set_item(self, item: Any):
        if self.session is not None:
            self.session.app.end_session(self.session.id)
        if hasattr(item, "new_session"):
            self.session = item.new_session()
            self.data = {
                "html": render_html(item.ui),
                "inputs": self.session.values,
                "outputs": self.session.flush(),
            }
        else:
            self.session = None
            self.data = {"html": render_html(item)}

    def _handle_msg(self, widget, content, buffers):
        if not isinstance(content, dict) or content.get("type") != "set_inputs":
            return
        if self.session is None:
            logger.warning("Input change received by a widget without an app session")
            return
        try:
            outputs = self.session.set_inputs(content.get("values", {}))
        except (KeyError, ValueError) as e:
            self.send({"type": "error", "message": e.args[0] if e.args else str(e)})
            return
        self.send(to_json({"type": "outputs", "outputs": outputs}))
