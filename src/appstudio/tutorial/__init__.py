"""
The code of the walkthrough in `docs/`.

Part one takes a static chart and makes it interactive:

    from appstudio.tutorial import iris_chart, interactive_iris_chart

Part two builds an Old Faithful explorer in ten revisions. Each revision is a
directory holding the two files of an app, `ui.py` and `server.py`; copy one
out to follow along:

    appstudio tutorial 5 my-app
    appstudio run my-app
"""

import logging
import shutil
from pathlib import Path

from appstudio import plot as Plot
from appstudio.app import App, load_app_dir
from appstudio.datasets import iris

logger = logging.getLogger(__name__)

STEPS_PATH = Path(__file__).parent / "steps"
APP_FILES = ("ui.py", "server.py")

REVISIONS = [
    (1, "Page skeleton: a title panel and an empty sidebar layout"),
    (2, "A text box for the plot title"),
    (3, "A text output echoing the title"),
    (4, "A slider for the number of bins"),
    (5, "A histogram of waiting times with that many bins"),
    (6, "The histogram title follows the text box"),
    (7, "A dropdown for the bar colour"),
    (8, "The histogram colour follows the dropdown"),
    (9, "A table of bin counts"),
    (10, "A dropdown choosing the variable behind the histogram and the table"),
]


def revision_dir(n: int) -> Path:
    if not isinstance(n, int) or not 1 <= n <= len(REVISIONS):
        raise ValueError(f"Revision must be between 1 and {len(REVISIONS)}, got {n!r}")
    return STEPS_PATH / f"step{n:02d}"


def load_revision(n: int) -> App:
    """Build the App of revision `n`."""
    return load_app_dir(revision_dir(n))


def write_revision(n: int, dest, overwrite: bool = False) -> Path:
    """
    Copy the `ui.py` and `server.py` of revision `n` into `dest`, creating it
    if needed. Existing files are left alone unless `overwrite` is set.
    """
    source = revision_dir(n)
    dest = Path(dest)
    existing = [dest / name for name in APP_FILES if (dest / name).exists()]
    if existing and not overwrite:
        raise FileExistsError(
            f"{', '.join(str(p) for p in existing)} already exists; pass overwrite=True to replace"
        )
    dest.mkdir(parents=True, exist_ok=True)
    for name in APP_FILES:
        shutil.copyfile(source / name, dest / name)
    logger.info("Wrote revision %d to %s", n, dest)
    return dest


def iris_chart():
    """A static matplotlib scatter of sepal length against petal length, one colour per species."""
    from matplotlib.figure import Figure

    data = iris()
    fig = Figure(figsize=(6, 4))
    ax = fig.subplots()
    for species in dict.fromkeys(data["species"].tolist()):
        mask = data["species"] == species
        ax.scatter(data["sepal_length"][mask], data["petal_length"][mask], s=20, label=species)
    ax.set_xlabel("Sepal length (cm)")
    ax.set_ylabel("Petal length (cm)")
    ax.set_title("Iris measurements")
    ax.legend(title="Species")
    return fig


def interactive_iris_chart():
    return Plot.interactive(iris_chart())
