import html as html_lib
import json
import os
import re
import uuid
from typing import Any, Sequence

from html2image import Html2Image
from PIL import Image

from appstudio.util import CONFIG, PARENT_PATH

VOID_TAGS = {"area", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"}


def create_parent_dir(path: str) -> None:
    """Create parent directory if it doesn't exist."""
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)


def dumps_script_json(data: Any) -> str:
    """JSON that is safe to place inside a <script> element."""
    return json.dumps(data).replace("</", "<\\/")


def parse_tag(tag: str) -> tuple[str, str | None, list[str]]:
    """Split "div.card.p-3#main" into ("div", "main", ["card", "p-3"])."""
    name, element_id, classes = "div", None, []
    for prefix, token in re.findall(r"([.#]?)([^.#]+)", tag):
        if prefix == ".":
            classes.append(token)
        elif prefix == "#":
            element_id = token
        else:
            name = token
    return name, element_id, classes


def _kebab(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()


def render_attrs(attrs: dict[str, Any]) -> str:
    out = []
    for key, value in attrs.items():
        if value is None or value is False:
            continue
        if callable(value):
            raise TypeError(f"Attribute {key!r} cannot be a callable when rendering HTML")
        if key == "style" and isinstance(value, dict):
            value = "; ".join(f"{_kebab(k)}: {v}" for k, v in value.items())
        elif key == "class" and isinstance(value, (list, tuple)):
            value = " ".join(value)
        if value is True:
            out.append(f" {key}")
        else:
            out.append(f' {key}="{html_lib.escape(str(value), quote=True)}"')
    return "".join(out)


def render_plot(payload: dict[str, Any]) -> str:
    height = payload["figure"].get("layout", {}).get("height")
    style = f' style="min-height: {height}px"' if height else ""
    return (
        f'<div class="appstudio-plot"{style}>'
        f'<script type="application/json">{dumps_script_json(payload)}</script>'
        "</div>"
    )


def render_html(node: Any) -> str:
    """
    Render a Hiccup tree to an HTML string.

    Hiccup maps Python lists 1:1 to HTML elements:

        ["button.btn#go", {"disabled": True}, "Click me"]
        -> <button id="go" class="btn" disabled>Click me</button>

    LayoutItems are rendered via their `for_json` form, plots become plotly
    containers that the browser runtime draws.
    """
    if node is None or node is False or node is True:
        return ""
    if isinstance(node, str):
        return html_lib.escape(node, quote=False)
    if isinstance(node, (int, float)):
        return html_lib.escape(str(node))
    if hasattr(node, "for_json"):
        return render_html(node.for_json())
    if isinstance(node, dict):
        if node.get("__type__") == "plot":
            return render_plot(node)
        if node.get("__type__") == "html":
            return node["value"]
        raise TypeError(f"Cannot render dict as HTML: {sorted(node)}")
    if isinstance(node, (list, tuple)):
        if node and isinstance(node[0], str) and isinstance(node, list):
            return render_element(node)
        return "".join(render_html(child) for child in node)
    raise TypeError(f"Cannot render object of type {type(node).__name__} as HTML")


def render_element(node: list) -> str:
    name, element_id, classes = parse_tag(node[0])
    children = node[1:]
    attrs: dict[str, Any] = {}
    if children and isinstance(children[0], dict) and "__type__" not in children[0]:
        attrs = dict(children[0])
        children = children[1:]
    if element_id and "id" not in attrs:
        attrs = {"id": element_id, **attrs}
    if classes:
        extra = attrs.get("class")
        if isinstance(extra, (list, tuple)):
            extra = " ".join(extra)
        attrs["class"] = " ".join(classes + ([extra] if extra else []))
    if name in VOID_TAGS:
        if children:
            raise ValueError(f"<{name}> cannot have children")
        return f"<{name}{render_attrs(attrs)}>"
    inner = "".join(render_html(child) for child in children)
    return f"<{name}{render_attrs(attrs)}>{inner}</{name}>"


def html_snippet(item, id=None, bootstrap=None):
    id = id or f"appstudio-{uuid.uuid4().hex}"
    body = render_html(item)

    # Read and inline the JS and CSS files
    with open(PARENT_PATH / "js/runtime.js", "r") as js_file:
        js_content = js_file.read()
    with open(PARENT_PATH / "widget.css", "r") as css_file:
        css_content = css_file.read()

    return f"""
    <style>{css_content}</style>
    <div class="appstudio" id="{id}">{body}</div>

    <script type="application/json" id="{id}-bootstrap">{dumps_script_json(bootstrap or {})}</script>

    <script type="module">
        {js_content}
        const container = document.getElementById('{id}');
        const bootstrap = JSON.parse(document.getElementById('{id}-bootstrap').textContent);
        mount(container, httpTransport(bootstrap), bootstrap);
    </script>
    """


def html_standalone(item, id=None, bootstrap=None, title="appstudio"):
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1">
        <title>{html_lib.escape(title)}</title>
        <script src="{CONFIG["plotly_cdn"]}"></script>
    </head>
    <body>
        {html_snippet(item, id, bootstrap)}
    </body>
    </html>
    """


class HTML:
    def __init__(self, item):
        self.item = item
        self.id = f"appstudio-{uuid.uuid4().hex}"

    def set_item(self, item):
        self.item = item

    def _repr_mimebundle_(self, **kwargs):
        return {"text/html": html_snippet(self.item, self.id)}, {}


class LayoutItem:
    def __init__(self):
        self._html: HTML | None = None
        self._widget = None
        self._display_as = None

    def display_as(self, display_as) -> "LayoutItem":
        if display_as not in ["html", "widget"]:
            raise ValueError(f"display_as must be 'html' or 'widget', got {display_as!r}")
        self._display_as = display_as
        return self

    def for_json(self) -> Any:
        raise NotImplementedError("Subclasses must implement for_json method")

    def __and__(self, other: Any) -> "Row":
        return Row(self, other)

    def __rand__(self, other: Any) -> "Row":
        return Row(other, self)

    def __or__(self, other: Any) -> "Column":
        return Column(self, other)

    def __ror__(self, other: Any) -> "Column":
        return Column(other, self)

    def _repr_mimebundle_(self, **kwargs: Any) -> Any:
        return self.repr()._repr_mimebundle_(**kwargs)

    def _repr_html_(self, **kwargs: Any) -> str | None:
        bundle = self.html()._repr_mimebundle_(**kwargs)
        return bundle[0].get("text/html")

    def html(self) -> HTML:
        """
        Lazily generate & cache the HTML for this LayoutItem.
        """
        if self._html is None:
            self._html = HTML(self)
        return self._html

    def widget(self):
        """
        Lazily generate & cache the widget for this LayoutItem.
        """
        from appstudio.widget import Widget

        if self._widget is None:
            self._widget = Widget(self)
        return self._widget

    def repr(self):
        display_as = self._display_as or CONFIG["display_as"]
        if display_as == "widget":
            return self.widget()
        else:
            return self.html()

    def to_html(self) -> str:
        return render_html(self)

    def save_html(self, path: str) -> None:
        create_parent_dir(path)
        with open(path, "w") as f:
            f.write(html_standalone(self))
        print(f"HTML saved to {path}")

    def save_image(self, path, width=800, height=600):
        # Save image using headless browser
        create_parent_dir(path)

        hti = Html2Image()
        hti.size = (width, height)
        hti.output_path = os.path.dirname(os.path.abspath(path))

        hti.screenshot(html_str=html_standalone(self), save_as=os.path.basename(path))

        # Crop transparent regions
        img = Image.open(path)
        img = img.crop(img.getbbox())
        img.save(path)

        print(f"Image saved to {path}")

    def reset(self, other: "LayoutItem") -> None:
        """
        Render a new LayoutItem to this LayoutItem's widget.

        Args:
            other: A LayoutItem to reset to.
        """
        if self._html is not None:
            raise ValueError(
                "Cannot reset an HTML display. Use display_as='widget' or foo.widget() to create a resettable widget."
            )
        self.widget().set_item(other)


class Hiccup(LayoutItem):
    """Wraps a Hiccup-style list so it can be displayed, composed and saved like any LayoutItem."""

    def __init__(self, *args: Any) -> None:
        LayoutItem.__init__(self)
        if len(args) == 0:
            self.child = None
        elif len(args) == 1:
            self.child = args[0]
        else:
            self.child = list(args)

    def for_json(self) -> Any:
        return self.child


def flatten_layout_items(
    items: Sequence[Any], layout_class: type
) -> tuple[list[Any], dict[str, Any]]:
    flattened: list[Any] = []
    options: dict[str, Any] = {}
    for item in items:
        if isinstance(item, layout_class):
            flattened.extend(item.items)
            options.update(item.options)
        elif isinstance(item, dict) and "__type__" not in item:
            options.update(item)
        else:
            flattened.append(item)
    return flattened, options


def _flex_style(direction: str, options: dict[str, Any]) -> dict[str, Any]:
    style = {"display": "flex", "flexDirection": direction, "gap": f"{options.get('gap', 1)}rem"}
    if "widths" in options and direction == "row":
        style["alignItems"] = "flex-start"
    return {**style, **options.get("style", {})}


class Row(LayoutItem):
    "Render children in a row."

    def __init__(self, *items: Any, **kwargs):
        super().__init__()
        self.items, options = flatten_layout_items(items, Row)
        self.options = options | kwargs

    def for_json(self) -> Any:
        widths = self.options.get("widths")
        children = [
            ["div", {"style": {"flex": widths[i] if widths and i < len(widths) else 1}}, item]
            for i, item in enumerate(self.items)
        ]
        attrs = {"style": _flex_style("row", self.options), "class": self.options.get("className")}
        return ["div.appstudio-row", attrs, *children]


class Column(LayoutItem):
    """Render children in a column."""

    def __init__(self, *items: Any, **kwargs):
        super().__init__()
        self.items, options = flatten_layout_items(items, Column)
        self.options = options | kwargs

    def for_json(self) -> Any:
        attrs = {"style": _flex_style("column", self.options), "class": self.options.get("className")}
        return ["div.appstudio-column", attrs, *self.items]


def md(text: str) -> Hiccup:
    """A block of preformatted prose; paragraphs are separated by blank lines."""
    paragraphs = [p.strip() for p in re.split(r"\n\s*\n", text.strip()) if p.strip()]
    return Hiccup(["div.appstudio-prose", *(["p", p] for p in paragraphs)])
