from appstudio import render


def server(input, output):
    @output
    @render.text
    def caption():
        return input.title
