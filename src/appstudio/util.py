# %%
import copy
import importlib.util
import logging
import os
import pathlib
import sys


PARENT_PATH = pathlib.Path(importlib.util.find_spec("appstudio.util").origin).parent


def deep_merge(dict1, dict2):
    """
    Recursively merge two dictionaries into a new one.
    Values in dict2 overwrite values in dict1. If both values are dictionaries, recursively merge them.
    """
    if not isinstance(dict1, dict) or not isinstance(dict2, dict):
        return copy.deepcopy(dict2)
    out = dict(dict1)
    for k, v in dict2.items():
        if k in out:
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def server_defaults(environ=os.environ):
    """Server settings seeded from APPSTUDIO_HOST and APPSTUDIO_PORT."""
    port = environ.get("APPSTUDIO_PORT", "8050")
    try:
        port = int(port)
    except ValueError:
        raise ValueError(f"APPSTUDIO_PORT must be an integer, got {port!r}") from None
    return {
        "host": environ.get("APPSTUDIO_HOST", "127.0.0.1"),
        "port": port,
        # seconds a browser session may sit idle before it is dropped
        "session_ttl": 3600,
    }


CONFIG = {
    # "widget" renders live anywidgets in Jupyter, "html" renders inert snippets
    "display_as": "widget",
    "plotly_cdn": "https://cdn.plot.ly/plotly-2.35.2.min.js",
    "plot": {"height": 400, "template": "simple_white"},
    "server": server_defaults(),
}


def configure(options=None, **kwargs):
    """
    Update the global CONFIG. Nested dictionaries are merged, not replaced.

        configure(display_as="html")
        configure({"server": {"port": 9000}})
    """
    CONFIG.update(deep_merge(CONFIG, {**(options or {}), **kwargs}))
    return CONFIG


_logging_configured = False


def setup_logging(level="INFO"):
    """Configure root logging once. Later calls only adjust the level."""
    global _logging_configured
    root_level = getattr(logging, str(level).upper(), logging.INFO)
    if _logging_configured:
        logging.getLogger().setLevel(root_level)
        return
    logging.basicConfig(
        level=root_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )
    _logging_configured = True
