"""
The reactive runtime behind an app session.

Server logic binds render functions to output ids. While a render function
runs, every `input.<id>` it reads is recorded as a dependency; when inputs
change, only the outputs that read one of them are run again. Dependencies are
collected afresh on every run, so an output that stops reading an input stops
reacting to it.
"""

import inspect
import logging
import threading
import time
import uuid
from typing import Any, Dict, Set

from appstudio.render import Renderer

logger = logging.getLogger(__name__)


class Inputs:
    """Read-only view of a session's input values: `input.bins`, `input["bins"]`."""

    def __init__(self, session: "Session"):
        object.__setattr__(self, "_session", session)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._session.read(name)

    def __getitem__(self, name: str) -> Any:
        try:
            return self._session.read(name)
        except AttributeError as e:
            raise KeyError(name) from e

    def __setattr__(self, name, value):
        raise AttributeError("Inputs are read-only in server logic; they change in the browser")

    def __contains__(self, name: str) -> bool:
        return name in self._session.values

    def __dir__(self):
        return list(self._session.values)


class Outputs:
    """
    Binds render functions to output ids, either by assignment

        output.caption = render.text(lambda: input.title)

    or as a decorator, using the function's name as the id

        @output
        @render.plot
        def histogram(): ...
    """

    def __init__(self, session: "Session"):
        object.__setattr__(self, "_session", session)

    def __setattr__(self, name: str, renderer: Renderer) -> None:
        self._session.bind(name, renderer)

    def __setitem__(self, name: str, renderer: Renderer) -> None:
        self._session.bind(name, renderer)

    def __call__(self, renderer: Renderer) -> Renderer:
        self._session.bind(renderer.__name__, renderer)
        return renderer


def _call_server(server, input: Inputs, output: Outputs, session: "Session") -> None:
    params = inspect.signature(server).parameters
    if len(params) >= 3:
        server(input, output, session)
    else:
        server(input, output)


class Session:
    """One browser's view of an app: input values, bound outputs, and their last results."""

    def __init__(self, app):
        self.id = uuid.uuid4().hex
        self.app = app
        self.input_widgets = app.ui.inputs()
        self.output_widgets = app.ui.outputs()
        self.values: Dict[str, Any] = {k: w.value for k, w in self.input_widgets.items()}
        self.renderers: Dict[str, Renderer] = {}
        self.dependencies: Dict[str, Set[str]] = {}
        self.results: Dict[str, Dict[str, Any]] = {}
        self._invalidated: Set[str] = set()
        self._current: str | None = None
        self._lock = threading.RLock()
        self.last_active = time.monotonic()

        _call_server(app.server, Inputs(self), Outputs(self), self)

    def read(self, name: str) -> Any:
        if name not in self.values:
            raise AttributeError(
                f"No input named {name!r}. Inputs: {', '.join(self.values) or '(none)'}"
            )
        if self._current is not None:
            self.dependencies[self._current].add(name)
        return self.values[name]

    def bind(self, output_id: str, renderer: Renderer) -> None:
        if not isinstance(renderer, Renderer):
            raise TypeError(
                f"output.{output_id} must be bound to render.text, render.plot or render.table, "
                f"got {type(renderer).__name__}"
            )
        if output_id in self.renderers:
            raise ValueError(f"Output {output_id!r} is bound twice")
        widget = self.output_widgets.get(output_id)
        if widget is None:
            logger.warning("Output %r is not in the UI; skipping it", output_id)
            return
        if widget.kind != renderer.kind:
            logger.warning(
                "Output %r is a %s placeholder bound to render.%s", output_id, widget.kind, renderer.kind
            )
        self.renderers[output_id] = renderer
        self.dependencies[output_id] = set()
        self._invalidated.add(output_id)

    def _run(self, output_id: str) -> Dict[str, Any]:
        renderer = self.renderers[output_id]
        self.dependencies[output_id] = set()
        self._current = output_id
        try:
            payload = renderer.payload(renderer())
        except Exception as e:
            logger.exception("Error rendering output %r", output_id)
            payload = {"kind": "error", "message": f"{type(e).__name__}: {e}"}
        finally:
            self._current = None
        self.results[output_id] = payload
        return payload

    def flush(self) -> Dict[str, Dict[str, Any]]:
        """Run every invalidated output, in page order, and return their payloads."""
        with self._lock:
            self.last_active = time.monotonic()
            pending = [k for k in self.output_widgets if k in self._invalidated]
            self._invalidated.clear()
            return {output_id: self._run(output_id) for output_id in pending}

    def set_inputs(self, changes: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        """
        Apply input changes and return the payloads of the outputs that re-ran.

        All values are validated before any is applied: an unknown id raises
        KeyError, a value the widget rejects raises ValueError.
        """
        with self._lock:
            coerced = {}
            for name, value in changes.items():
                if name not in self.input_widgets:
                    raise KeyError(f"Unknown input {name!r}")
                coerced[name] = self.input_widgets[name].coerce(value)
            changed = {k for k, v in coerced.items() if self.values[k] != v}
            self.values.update(coerced)
            if changed:
                logger.debug("Session %s inputs changed: %s", self.id, sorted(changed))
            for output_id, deps in self.dependencies.items():
                if deps & changed:
                    self._invalidated.add(output_id)
            return self.flush()

    def invalidate(self, *output_ids: str) -> None:
        """Mark outputs (all bound outputs by default) to re-run on the next flush."""
        with self._lock:
            self._invalidated.update(output_ids or self.renderers)
