from appstudio import plot as Plot
from appstudio import render
from appstudio.datasets import faithful

LABELS = {
    "waiting": "Waiting time to next eruption (mins)",
    "eruptions": "Eruption duration (mins)",
}


def server(input, output):
    @output
    @render.text
    def caption():
        return input.title

    @output
    @render.plot
    def histogram():
        values = faithful()[input.variable]
        return (
            Plot.Histogram(values, bins=input.bins, color=input.color)
            + Plot.title(input.title)
            + Plot.xlabel(LABELS[input.variable])
        )

    @output
    @render.table(digits=2)
    def counts():
        edges, counts = Plot.histogram_bins(faithful()[input.variable], input.bins)
        return {"from": edges[:-1], "to": edges[1:], "count": counts}
