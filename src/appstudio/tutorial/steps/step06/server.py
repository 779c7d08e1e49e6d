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
            Plot.Histogram(waiting, bins=input.bins)
            + Plot.title(input.title)
            + Plot.xlabel("Waiting time to next eruption (mins)")
        )
