# %% [markdown]
# # Building a reactive app
#
# An app is a directory with two files:
#
# - `ui.py` describes the page: its layout, the input widgets a user changes, and
#   placeholders for outputs. It assigns the page to `app_ui`.
# - `server.py` defines `server(input, output)`, which says how each output is
#   computed from the inputs.
#
# Outputs are reactive: whenever an input changes, the outputs that read it are
# computed again. Nothing else has to be wired up.
#
# We build an explorer for the Old Faithful geyser in ten revisions. Each one is
# shipped with appstudio; to follow along in a terminal, copy a revision into a
# directory and run it:
#
# ```
# appstudio tutorial --list
# appstudio tutorial 1 faithful-app
# appstudio run faithful-app
# ```
#
# In a notebook, `load_revision` builds the same app and displays it in place.

# %%
from pathlib import Path

from appstudio.tutorial import load_revision, revision_dir


def show_source(n):
    for name in ("ui.py", "server.py"):
        print(f"# {name}\n{(revision_dir(n) / name).read_text()}")


# %% [markdown]
# ## 1. The skeleton
#
# A title panel, and a sidebar layout with nothing in it yet. The server has
# nothing to compute.

# %%
show_source(1)
load_revision(1)

# %% [markdown]
# ## 2. A text box
#
# `text_input(id, label, value)` adds a text box. Its id, `title`, is how the server
# refers to it.

# %%
show_source(2)
load_revision(2)

# %% [markdown]
# ## 3. A first output
#
# `text_output("caption")` reserves a spot on the page. In the server, a function
# named `caption`, decorated with `@output` and `@render.text`, fills it. Because it
# reads `input.title`, it runs again each time the text box changes.

# %%
show_source(3)
load_revision(3)

# %% [markdown]
# ## 4. A slider
#
# `slider_input("bins", "Number of bins", 1, 50, 30)` adds a slider from 1 to 50
# starting at 30.

# %%
show_source(4)

# %% [markdown]
# ## 5. A histogram
#
# `plot_output("histogram")` and a `@render.plot` function draw a histogram of
# waiting times using `input.bins` bins. Moving the slider redraws the histogram,
# but the caption, which does not read `bins`, is left alone.

# %%
show_source(5)
load_revision(5)

# %% [markdown]
# ## 6. Binding the title
#
# The histogram now reads `input.title` too, so typing in the text box updates both
# the caption and the plot title.

# %%
show_source(6)

# %% [markdown]
# ## 7. A dropdown
#
# `select_input("color", "Bar colour", COLORS)` offers a few colours. Labels are
# shown in the dropdown, and the server sees the matching values.

# %%
show_source(7)

# %% [markdown]
# ## 8. Binding the colour

# %%
show_source(8)
load_revision(8)

# %% [markdown]
# ## 9. A table of bin counts
#
# `table_output("counts")` and `@render.table` list the bins behind the bars.
# A dict of columns, a list of row dicts or a `Dataset` can be returned.

# %%
show_source(9)

# %% [markdown]
# ## 10. Choosing the variable
#
# A second dropdown picks the column, waiting time or eruption duration, that
# both the histogram and the table summarise.

# %%
show_source(10)
app = load_revision(10)
app

# %% [markdown]
# ## Driving the app from Python
#
# In a notebook the app runs in the kernel. Its widget exposes the inputs, so
# changing them from code updates the page just like the browser controls do.

# %%
widget = app.widget()
widget.inputs.update({"variable": "eruptions", "bins": 15})

# %% [markdown]
# ## Serving the app
#
# `run_app` serves an app directory (or an `App`) over HTTP; each browser tab gets
# its own session.

# %%
from appstudio.app import run_app

if __name__ == "__main__":
    run_app(Path(revision_dir(10)))
