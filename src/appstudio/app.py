import hashlib
import importlib.util
import logging
import os
import sys
import threading
import time
import webbrowser
from pathlib import Path
from typing import Callable, Dict

from appstudio.exceptions import AppLoadError
from appstudio.layout import LayoutItem, html_standalone
from appstudio.reactive import Session
from appstudio.ui import Page
from appstudio.util import CONFIG, setup_logging

logger = logging.getLogger(__name__)


class App:
    """
    A reactive app: a UI description plus the server logic that fills its outputs.

    Each browser (or notebook widget) gets its own Session. Building an App
    validates the UI, so a malformed widget definition fails at startup.
    """

    def __init__(self, ui: Page, server: Callable):
        if isinstance(ui, LayoutItem) and not isinstance(ui, Page):
            ui = Page(ui)
        if not isinstance(ui, Page):
            raise TypeError(f"ui must be a Page (see appstudio.ui.page), got {type(ui).__name__}")
        if not callable(server):
            raise TypeError(f"server must be a function, got {type(server).__name__}")
        self.ui = ui.validate()
        self.server = server
        self.sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._widget = None

    def new_session(self) -> Session:
        session = Session(self)
        with self._lock:
            self.sessions[session.id] = session
        logger.info("Session %s started (%d active)", session.id, len(self.sessions))
        return session

    def get_session(self, session_id: str) -> Session:
        with self._lock:
            return self.sessions[session_id]

    def end_session(self, session_id: str) -> bool:
        """Forget a session; returns False when there was no such session."""
        with self._lock:
            removed = self.sessions.pop(session_id, None)
        if removed is None:
            return False
        logger.info("Session %s ended", session_id)
        return True

    def prune_sessions(self, max_idle: float) -> int:
        """Drop sessions idle for more than `max_idle` seconds; returns how many were dropped."""
        cutoff = time.monotonic() - max_idle
        with self._lock:
            stale = [k for k, s in self.sessions.items() if s.last_active < cutoff]
            for key in stale:
                del self.sessions[key]
        if stale:
            logger.info("Pruned %d idle sessions", len(stale))
        return len(stale)

    def html(self, endpoint: str | None = None) -> str:
        return html_standalone(self.ui, bootstrap={"endpoint": endpoint}, title=self.ui.title)

    def widget(self):
        from appstudio.widget import Widget

        if self._widget is None:
            self._widget = Widget(self)
        return self._widget

    def _repr_mimebundle_(self, **kwargs):
        return self.widget()._repr_mimebundle_(**kwargs)


def _load_module(path: Path, name: str):
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise AppLoadError(f"Cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise AppLoadError(f"Error while importing {path}: {type(e).__name__}: {e}") from e
    return module


def load_app_dir(path) -> App:
    """
    Build an App from a directory holding `ui.py` (defining `app_ui`) and
    `server.py` (defining `server`).
    """
    directory = Path(path).resolve()
    if not directory.is_dir():
        raise AppLoadError(f"App directory not found: {directory}")
    files = {name: directory / f"{name}.py" for name in ("ui", "server")}
    missing = [str(p) for p in files.values() if not p.is_file()]
    if missing:
        raise AppLoadError(f"App directory is missing {', '.join(missing)}")

    prefix = "_appstudio_" + hashlib.sha1(str(directory).encode()).hexdigest()[:8]
    # helper modules next to ui.py / server.py stay importable
    sys.path.insert(0, str(directory))
    try:
        ui_module = _load_module(files["ui"], f"{prefix}_ui")
        server_module = _load_module(files["server"], f"{prefix}_server")
    finally:
        sys.path.remove(str(directory))

    if not hasattr(ui_module, "app_ui"):
        raise AppLoadError(f"{files['ui']} must define `app_ui`")
    if not hasattr(server_module, "server"):
        raise AppLoadError(f"{files['server']} must define `server`")
    try:
        return App(ui_module.app_ui, server_module.server)
    except (TypeError, ValueError) as e:
        raise AppLoadError(f"{directory}: {e}") from e


def run_app(target=".", host=None, port=None, launch_browser=True, log_level=None):
    """
    Serve an app until interrupted. `target` is an App or an app directory.
    """
    from appstudio.server import create_server

    if log_level is not None:
        setup_logging(log_level)
    app = target if isinstance(target, App) else load_app_dir(target)
    host = host or CONFIG["server"]["host"]
    port = int(port or CONFIG["server"]["port"])
    server = create_server(app)

    url = f"http://{host}:{port}/"
    logger.info("Serving %s at %s", app.ui.title, url)
    # Flask's reloader runs the module twice; only open the browser once
    if launch_browser and not os.environ.get("WERKZEUG_RUN_MAIN"):
        threading.Timer(0.5, webbrowser.open, args=(url,)).start()
    server.run(host=host, port=port, debug=False, threaded=True)
