"""Exceptions raised by appstudio."""


class AppLoadError(RuntimeError):
    """An app directory could not be turned into an App."""


class UnsupportedPlotTypeError(TypeError):
    """The plot object type is not supported."""

    def __init__(self, obj_type: type) -> None:
        self.obj_type = obj_type
        super().__init__(f"Don't know how to plot object of type {obj_type.__name__}")
