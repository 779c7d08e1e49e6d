import appstudio.ui as ui

app_ui = ui.page(
    ui.title_panel("Old Faithful"),
    ui.sidebar_layout(
        ui.sidebar_panel(
            ui.text_input("title", "Plot title", "Geyser eruptions"),
        ),
        ui.main_panel(),
    ),
)
