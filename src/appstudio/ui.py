"""
User interface description: page layout, input widgets and output placeholders.

A `ui.py` file in an app directory assigns one `page` to `app_ui`:

    import appstudio.ui as ui

    app_ui = ui.page(
        ui.title_panel("Old Faithful"),
        ui.sidebar_layout(
            ui.sidebar_panel(ui.slider_input("bins", "Number of bins", 1, 50, 30)),
            ui.main_panel(ui.plot_output("histogram")),
        ),
    )

Inputs and outputs share one id namespace per page. Ids must be Python
identifiers, since server logic reads them as `input.<id>`.
"""

import math
import re
from typing import Any, Dict, Iterator, List

from appstudio.layout import Hiccup, LayoutItem
from appstudio.plot_spec import PlotSpec

ID_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_id(id: str) -> str:
    if not isinstance(id, str) or not ID_PATTERN.match(id):
        raise ValueError(f"Widget id must be a Python identifier, got {id!r}")
    return id


class Input(LayoutItem):
    """A widget whose value the server logic can read."""

    kind = "input"

    def __init__(self, id: str, label: str, value: Any):
        super().__init__()
        self.id = _check_id(id)
        self.label = label
        self.value = value

    def coerce(self, value: Any) -> Any:
        """Convert a value received from the browser to this input's Python type."""
        return value

    def control(self) -> list:
        raise NotImplementedError("Subclasses must implement control method")

    def attrs(self, **extra) -> Dict[str, Any]:
        return {"id": f"input-{self.id}", "data-input": self.id, "data-input-kind": self.kind, **extra}

    def for_json(self) -> Any:
        return [
            "div.appstudio-input",
            ["label", {"for": f"input-{self.id}"}, self.label],
            self.control(),
        ]

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.id}={self.value!r}>"


class TextInput(Input):
    kind = "text"

    def __init__(self, id, label, value="", placeholder=None):
        super().__init__(id, label, "" if value is None else str(value))
        self.placeholder = placeholder

    def coerce(self, value):
        return "" if value is None else str(value)

    def control(self):
        return ["input", self.attrs(type="text", value=self.value, placeholder=self.placeholder)]


class SliderInput(Input):
    kind = "slider"

    def __init__(self, id, label, min, max, value, step=None):
        if step is None:
            step = 1 if all(float(v).is_integer() for v in (min, max, value)) else (max - min) / 100
        if not min < max:
            raise ValueError(f"Slider {id!r}: min ({min}) must be less than max ({max})")
        if step <= 0:
            raise ValueError(f"Slider {id!r}: step must be positive, got {step}")
        if not min <= value <= max:
            raise ValueError(f"Slider {id!r}: value {value} is outside [{min}, {max}]")
        self.min, self.max, self.step = min, max, step
        super().__init__(id, label, value)
        self.value = self.coerce(value)

    @property
    def integral(self) -> bool:
        return all(float(v).is_integer() for v in (self.min, self.step))

    def coerce(self, value):
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Slider {self.id!r} expects a number, got {value!r}") from None
        if math.isnan(number):
            raise ValueError(f"Slider {self.id!r} expects a number, got NaN")
        number = min(max(number, self.min), self.max)
        # snap onto the step grid anchored at min
        number = self.min + round((number - self.min) / self.step) * self.step
        number = min(number, self.max)
        return int(round(number)) if self.integral else round(number, 10)

    def control(self):
        return [
            "div.appstudio-slider",
            ["input", self.attrs(type="range", min=self.min, max=self.max, step=self.step, value=self.value)],
            ["output.appstudio-slider-value", {"for": f"input-{self.id}"}, str(self.value)],
        ]


class SelectInput(Input):
    kind = "select"

    def __init__(self, id, label, choices, selected=None):
        # choices: a list of values, or a {label: value} dict
        if isinstance(choices, dict):
            self.choices = {str(k): v for k, v in choices.items()}
        else:
            self.choices = {str(v): v for v in choices}
        if not self.choices:
            raise ValueError(f"Select {id!r} needs at least one choice")
        values = list(self.choices.values())
        if selected is None:
            selected = values[0]
        elif selected not in values:
            raise ValueError(f"Select {id!r}: {selected!r} is not one of the choices")
        super().__init__(id, label, selected)

    def coerce(self, value):
        for choice in self.choices.values():
            if value == choice or str(value) == str(choice):
                return choice
        raise ValueError(f"Select {self.id!r}: {value!r} is not one of the choices")

    def control(self):
        options = [
            ["option", {"value": str(value), "selected": value == self.value}, label]
            for label, value in self.choices.items()
        ]
        return ["select", self.attrs(), *options]


class Output(LayoutItem):
    """A placeholder filled by the server logic's render function of the same id."""

    kind = "output"
    tag = "div"

    def __init__(self, id: str):
        super().__init__()
        self.id = _check_id(id)

    def attrs(self) -> Dict[str, Any]:
        return {"id": f"output-{self.id}", "data-output": self.id, "data-output-kind": self.kind}

    def for_json(self) -> Any:
        return [f"{self.tag}.appstudio-output", self.attrs()]

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.id}>"


class TextOutput(Output):
    kind = "text"


class PlotOutput(Output):
    kind = "plot"

    def __init__(self, id, height=400):
        super().__init__(id)
        self.height = height

    def attrs(self):
        return {**super().attrs(), "style": {"minHeight": f"{self.height}px"}}


class TableOutput(Output):
    kind = "table"


def walk(node: Any) -> Iterator[LayoutItem]:
    """Yield every Input and Output in a UI tree, in document order."""
    if isinstance(node, (Input, Output)):
        yield node
    elif isinstance(node, PlotSpec):
        return
    elif isinstance(node, LayoutItem):
        yield from walk(node.for_json())
    elif isinstance(node, (list, tuple)):
        for child in node:
            yield from walk(child)


class TitlePanel(LayoutItem):
    def __init__(self, title, window_title=None):
        super().__init__()
        self.title = title
        self.window_title = window_title or title

    def for_json(self):
        return ["h2.appstudio-title", self.title]


class Page(LayoutItem):
    """The top-level UI description of an app."""

    def __init__(self, *children, title=None):
        super().__init__()
        self.children = children
        self._title = title

    @property
    def title(self) -> str:
        if self._title:
            return self._title
        for child in self.children:
            if isinstance(child, TitlePanel):
                return str(child.window_title)
        return "appstudio"

    def inputs(self) -> Dict[str, Input]:
        return {item.id: item for item in walk(list(self.children)) if isinstance(item, Input)}

    def outputs(self) -> Dict[str, Output]:
        return {item.id: item for item in walk(list(self.children)) if isinstance(item, Output)}

    def validate(self) -> "Page":
        """Raise ValueError when two widgets share an id."""
        seen: Dict[str, LayoutItem] = {}
        for item in walk(list(self.children)):
            if item.id in seen:
                raise ValueError(
                    f"Duplicate widget id {item.id!r}: {seen[item.id]!r} and {item!r}"
                )
            seen[item.id] = item
        return self

    def for_json(self) -> Any:
        return ["div.appstudio-page", *self.children]


def page(*children, title=None) -> Page:
    return Page(*children, title=title)


def title_panel(title, window_title=None) -> TitlePanel:
    return TitlePanel(title, window_title)


def sidebar_layout(sidebar, main, position="left") -> Hiccup:
    if position not in ("left", "right"):
        raise ValueError(f"position must be 'left' or 'right', got {position!r}")
    panels = [sidebar, main] if position == "left" else [main, sidebar]
    return Hiccup(["div.appstudio-sidebar-layout", *panels])


def sidebar_panel(*children, width=4) -> Hiccup:
    return Hiccup(["div.appstudio-sidebar", {"style": {"flex": f"0 0 {width / 12:.2%}"}}, *children])


def main_panel(*children) -> Hiccup:
    return Hiccup(["div.appstudio-main", *children])


def text_input(id, label, value="", placeholder=None) -> TextInput:
    return TextInput(id, label, value, placeholder=placeholder)


def slider_input(id, label, min, max, value, step=None) -> SliderInput:
    """
    A slider from `min` to `max`. Without a `step`, it moves in whole numbers when
    `min`, `max` and `value` are all integers, and in hundredths of the range otherwise.
    """
    return SliderInput(id, label, min, max, value, step=step)


def select_input(id, label, choices, selected=None) -> SelectInput:
    return SelectInput(id, label, choices, selected=selected)


def text_output(id) -> TextOutput:
    return TextOutput(id)


def plot_output(id, height=400) -> PlotOutput:
    return PlotOutput(id, height=height)


def table_output(id) -> TableOutput:
    return TableOutput(id)


__all__: List[str] = [
    "Input",
    "Output",
    "Page",
    "main_panel",
    "page",
    "plot_output",
    "select_input",
    "sidebar_layout",
    "sidebar_panel",
    "slider_input",
    "table_output",
    "text_input",
    "text_output",
    "title_panel",
]
