from appstudio import plot as Plot
from appstudio import render
from appstudio.datasets import faithful


def server(input, output):
    @output
    @render.text
    def caption():
        return input.title

    @output
    @render.plot
    def histogram():
        waiting = faithful()["waiting"]
        return (
            Plot.Histogram(waiting, bins=input.bins, color=input.color)
            + Plot.title(input.title)
            + Plot.xlabel("Waiting time to next eruption (mins)")
        )

    @output
    @render.table(digits=1)
    def counts():
        edges, counts = Plot.histogram_bins(faithful()["waiting"], input.bins)
        return {"from": edges[:-1], "to": edges[1:], "count": counts}
