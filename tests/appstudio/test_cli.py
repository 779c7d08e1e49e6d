# %%
import copy

import pytest

from appstudio import cli
from appstudio.app import run_app
from appstudio.tutorial import load_revision, revision_dir
from appstudio.util import CONFIG, configure


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda level="INFO": None)


def test_tutorial_list(capsys):
    assert cli.main(["tutorial", "--list"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 10
    assert lines[0].split()[0] == "1"


def test_tutorial_write(tmp_path, capsys):
    dest = tmp_path / "app"
    assert cli.main(["tutorial", "3", str(dest)]) == 0
    assert (dest / "ui.py").exists()
    assert "appstudio run" in capsys.readouterr().out

    # refuses to overwrite
    assert cli.main(["tutorial", "4", str(dest)]) == 1
    assert cli.main(["tutorial", "4", str(dest), "--overwrite"]) == 0


def test_tutorial_bad_revision(tmp_path):
    assert cli.main(["tutorial", "11", str(tmp_path)]) == 1


def test_tutorial_needs_dest():
    with pytest.raises(SystemExit):
        cli.main(["tutorial", "3"])


def test_run_missing_app(tmp_path):
    assert cli.main(["run", str(tmp_path / "missing"), "--no-browser"]) == 1


def test_run_arguments():
    args = cli.build_parser().parse_args(["run", "my-app", "--port", "9000", "--log-level", "debug"])
    assert args.app_dir == "my-app"
    assert args.port == 9000
    assert args.log_level == "DEBUG"
    assert args.no_browser is False


class RecordingServer:
    def __init__(self):
        self.calls = []

    def run(self, **kwargs):
        self.calls.append(kwargs)


@pytest.fixture
def recording_server(monkeypatch):
    import appstudio.server

    server = RecordingServer()
    monkeypatch.setattr(appstudio.server, "create_server", lambda app: server)
    return server


@pytest.fixture
def server_config():
    saved = copy.deepcopy(CONFIG)
    configure(server={"host": "0.0.0.0", "port": 8123})
    yield CONFIG["server"]
    CONFIG.clear()
    CONFIG.update(saved)


def test_run_app_uses_configured_address(recording_server, server_config):
    run_app(load_revision(1), launch_browser=False)
    assert recording_server.calls[0]["host"] == "0.0.0.0"
    assert recording_server.calls[0]["port"] == 8123


def test_explicit_port_wins(recording_server, server_config):
    run_app(load_revision(1), port=9001, launch_browser=False)
    assert recording_server.calls[0]["port"] == 9001
    assert recording_server.calls[0]["host"] == "0.0.0.0"


def test_cli_flags_reach_the_server(recording_server, server_config):
    revision = str(revision_dir(1))
    assert cli.main(["run", revision, "--host", "localhost", "--port", "9002", "--no-browser"]) == 0
    assert recording_server.calls[0]["host"] == "localhost"
    assert recording_server.calls[0]["port"] == 9002
