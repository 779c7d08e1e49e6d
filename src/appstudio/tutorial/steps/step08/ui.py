import appstudio.ui as ui

COLORS = {
    "Blue": "#75AADB",
    "Orange": "#F28E2B",
    "Green": "#59A14F",
    "Grey": "#8C8C8C",
}

app_ui = ui.page(
    ui.title_panel("Old Faithful"),
    ui.sidebar_layout(
        ui.sidebar_panel(
            ui.text_input("title", "Plot title", "Geyser eruptions"),
            ui.slider_input("bins", "Number of bins", 1, 50, 30),
            ui.select_input("color", "Bar colour", COLORS),
        ),
        ui.main_panel(
            ui.text_output("caption"),
            ui.plot_output("histogram"),
        ),
    ),
)
