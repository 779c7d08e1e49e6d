# %%
import textwrap

import pytest

import appstudio.ui as ui
from appstudio import render
from appstudio.app import App, load_app_dir
from appstudio.exceptions import AppLoadError
from appstudio.layout import Hiccup


def echo_server(input, output):
    output.echo = render.text(lambda: input.word)


def echo_ui():
    return ui.page(ui.title_panel("Echo"), ui.text_input("word", "Word", "hi"), ui.text_output("echo"))


def write_app(directory, ui_source, server_source, **extra):
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "ui.py").write_text(textwrap.dedent(ui_source))
    (directory / "server.py").write_text(textwrap.dedent(server_source))
    for name, source in extra.items():
        (directory / f"{name}.py").write_text(textwrap.dedent(source))
    return directory


UI_SOURCE = """
    import appstudio.ui as ui

    app_ui = ui.page(ui.text_input("word", "Word", "hi"), ui.text_output("echo"))
"""

SERVER_SOURCE = """
    from appstudio import render


    def server(input, output):
        output.echo = render.text(lambda: input.word.upper())
"""


def test_app_validates_its_arguments():
    with pytest.raises(TypeError):
        App("not a page", echo_server)
    with pytest.raises(TypeError):
        App(echo_ui(), "not a function")
    with pytest.raises(ValueError):
        App(ui.page(ui.text_input("x", "X"), ui.text_output("x")), echo_server)


def test_app_wraps_layout_items_in_a_page():
    app = App(Hiccup(["div", ui.text_input("word", "Word"), ui.text_output("echo")]), echo_server)
    assert isinstance(app.ui, ui.Page)
    assert list(app.ui.inputs()) == ["word"]


def test_sessions():
    app = App(echo_ui(), echo_server)
    first, second = app.new_session(), app.new_session()
    assert first.id != second.id
    assert app.get_session(first.id) is first

    first.set_inputs({"word": "changed"})
    # sessions do not share input values
    assert second.values == {"word": "hi"}

    app.end_session(first.id)
    with pytest.raises(KeyError):
        app.get_session(first.id)
    app.end_session(first.id)


def test_prune_sessions():
    app = App(echo_ui(), echo_server)
    idle, active = app.new_session(), app.new_session()
    idle.last_active -= 100
    assert app.prune_sessions(50) == 1
    assert list(app.sessions) == [active.id]


def test_app_html():
    html = App(echo_ui(), echo_server).html(endpoint="/")
    assert "<title>Echo</title>" in html
    assert '{"endpoint": "/"}' in html
    assert 'data-input="word"' in html
    assert 'data-output="echo"' in html


def test_load_app_dir(tmp_path):
    app = load_app_dir(write_app(tmp_path / "echo", UI_SOURCE, SERVER_SOURCE))
    assert app.new_session().flush() == {"echo": {"kind": "text", "value": "HI"}}


def test_load_app_dir_with_helper_module(tmp_path):
    server_source = """
        from appstudio import render
        from shout import shout


        def server(input, output):
            output.echo = render.text(lambda: shout(input.word))
    """
    helper = """
        def shout(word):
            return word.upper() + "!"
    """
    app = load_app_dir(write_app(tmp_path / "helper", UI_SOURCE, server_source, shout=helper))
    assert app.new_session().flush()["echo"]["value"] == "HI!"


def test_load_app_dir_errors(tmp_path):
    with pytest.raises(AppLoadError, match="not found"):
        load_app_dir(tmp_path / "missing")

    (tmp_path / "half").mkdir()
    (tmp_path / "half" / "ui.py").write_text(UI_SOURCE)
    with pytest.raises(AppLoadError, match="missing"):
        load_app_dir(tmp_path / "half")

    no_ui = write_app(tmp_path / "no_ui", "import appstudio.ui as ui\n", SERVER_SOURCE)
    with pytest.raises(AppLoadError, match="must define `app_ui`"):
        load_app_dir(no_ui)

    no_server = write_app(tmp_path / "no_server", UI_SOURCE, "def serve(input, output): pass\n")
    with pytest.raises(AppLoadError, match="must define `server`"):
        load_app_dir(no_server)

    broken = write_app(tmp_path / "broken", UI_SOURCE, "def server(input, output)\n")
    with pytest.raises(AppLoadError, match="SyntaxError"):
        load_app_dir(broken)


def test_malformed_widget_definition_fails_at_startup(tmp_path):
    duplicate = """
        import appstudio.ui as ui

        app_ui = ui.page(ui.text_input("echo", "Word"), ui.text_output("echo"))
    """
    with pytest.raises(AppLoadError, match="Duplicate widget id 'echo'"):
        load_app_dir(write_app(tmp_path / "dup", duplicate, SERVER_SOURCE))

    bad_slider = """
        import appstudio.ui as ui

        app_ui = ui.page(ui.slider_input("n", "N", 10, 1, 5))
    """
    with pytest.raises(AppLoadError, match="ValueError"):
        load_app_dir(write_app(tmp_path / "slider", bad_slider, SERVER_SOURCE))


def test_end_session_reports_removal():
    app = App(echo_ui(), echo_server)
    session = app.new_session()
    assert app.end_session(session.id) is True
    assert app.end_session(session.id) is False
