import logging
import urllib.parse

import pytest

from clickatell_client import config as config_module


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code


class FakeTransport:
    """Records GET calls and answers with canned bodies keyed by command name"""

    def __init__(self, bodies=None, error=None):
        self.bodies = bodies or {}
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, host, port, path, secure=False):
        self.calls.append({"host": host, "port": port, "path": path, "secure": secure})
        if self.error is not None:
            raise self.error
        command = urllib.parse.urlsplit(path).path.rsplit("/", 1)[-1]
        return FakeResponse(self.bodies.get(command, ""))

    def close(self):
        self.closed = True

    def last_params(self):
        query = urllib.parse.urlsplit(self.calls[-1]["path"]).query
        return dict(urllib.parse.parse_qsl(query))


@pytest.fixture
def fake_transport():
    return FakeTransport


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    for variable in config_module.ENV_OVERRIDES:
        monkeypatch.delenv(variable, raising=False)
    monkeypatch.setenv("CLICKATELL_CONFIG", str(tmp_path / "missing-config.json"))
    config_module.reset_default_config()
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    config_module.reset_default_config()
    # Drop handlers installed by setup_logging in CLI runs
    for handler in list(root_logger.handlers):
        if type(handler) is logging.StreamHandler:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
