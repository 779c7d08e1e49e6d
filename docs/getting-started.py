# %% [markdown]
# # Interactive plots
#
# A chart printed in a paper is static: you cannot hover over a point to read its
# value or zoom into a crowded region. This page starts from such a chart and adds
# that interactivity.
#
# First import the plotting module and the bundled datasets:

# %%
import appstudio.plot as Plot
from appstudio.datasets import faithful, iris
from appstudio.tutorial import iris_chart

# %% [markdown]
# ## A static chart
#
# Here is a plain matplotlib scatter of the iris measurements, one colour per species.
# It is drawn once, like an image.

# %%
chart = iris_chart()
chart

# %% [markdown]
# ## Adding interactivity
#
# `Plot.interactive` takes the chart and rebuilds it as an interactive plot. The
# points, colours, labels and legend carry over; hovering shows values, dragging
# zooms and double-clicking resets the view.

# %%
Plot.interactive(chart)

# %% [markdown]
# Hover and zoom can be switched on separately:

# %%
Plot.interactive(chart, zoom=False)

# %% [markdown]
# `interactive` also accepts plotly figures and matplotlib `Axes`, including the
# array of axes returned by `subplots`.
#
# ## Plots built with appstudio
#
# Plots can also be described directly. Marks such as `dot`, `line` and `histogram`
# are layered with `+`, and option helpers are added the same way.

# %%
data = iris()
scatter = (
    Plot.dot(data, x="sepal_length", y="petal_length", color="species")
    + Plot.title("Iris measurements")
    + Plot.xlabel("Sepal length (cm)")
    + Plot.ylabel("Petal length (cm)")
)
scatter

# %% [markdown]
# Like a printed chart, it is static until interactivity is added:

# %%
scatter + Plot.interactive()

# %% [markdown]
# ## Histograms
#
# The Old Faithful dataset records the time between eruptions of the geyser. A
# histogram shows its two clusters:

# %%
waiting = faithful()["waiting"]
Plot.histogram(waiting, bins=30) + Plot.xlabel("Waiting time to next eruption (mins)")

# %% [markdown]
# The bins behind the bars are available on their own:

# %%
edges, counts = Plot.histogram_bins(waiting, 10)
list(zip(edges[:-1].round(1), counts))

# %% [markdown]
# ## Layouts and saving
#
# `&` places items side by side and `|` stacks them. Anything displayable can be
# saved as a standalone HTML page or a PNG image.

# %%
layout = (Plot.histogram(waiting, bins=20) & Plot.histogram(faithful()["eruptions"], bins=20)) | scatter
layout

# %%
layout.save_html("scratch/faithful.html")
