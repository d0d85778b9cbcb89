import json
from pathlib import Path

import pytest

from clickatell_client import config as config_module
from clickatell_client.config import APIConfig, AuthOptions, SendOptions


def write_config(tmp_path: Path, data) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_load_reads_modes_and_credentials(tmp_path: Path):
    path = write_config(tmp_path, {
        "service_host": "api.clickatell-custom.co.uk",
        "secure_mode": True,
        "credentials": {"api_id": "1234", "user": "joebloggs", "password": "superpass"},
    })

    config = APIConfig.load(path)

    assert config.service_host == "api.clickatell-custom.co.uk"
    assert config.secure_mode is True
    assert config.test_mode is False
    assert config.has_credentials()
    assert config.auth_options().as_params() == {
        "api_id": "1234", "user": "joebloggs", "password": "superpass",
    }


def test_explicit_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        APIConfig.load(str(tmp_path / "nope.json"))


def test_missing_default_file_gives_defaults():
    config = APIConfig.load()
    assert config.service_host is None
    assert (config.secure_mode, config.debug_mode, config.test_mode) == (False, False, False)


def test_unknown_fields_are_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        APIConfig.load(write_config(tmp_path, {"colour": "blue"}))
    with pytest.raises(ValueError):
        APIConfig.load(write_config(tmp_path, {"credentials": {"token": "x"}}))


def test_environment_overrides_file(tmp_path: Path, monkeypatch):
    path = write_config(tmp_path, {"secure_mode": False, "service_host": "a.example"})
    monkeypatch.setenv("CLICKATELL_SECURE_MODE", "TRUE")
    monkeypatch.setenv("CLICKATELL_TEST_MODE", "0")
    monkeypatch.setenv("CLICKATELL_SERVICE_HOST", "b.example")

    config = APIConfig.load(path)

    assert config.secure_mode is True
    assert config.test_mode is False
    assert config.service_host == "b.example"


def test_default_config_is_loaded_once(monkeypatch, tmp_path: Path):
    path = write_config(tmp_path, {"debug_mode": True})
    monkeypatch.setenv("CLICKATELL_CONFIG", path)

    first = config_module.default_config()
    assert first.debug_mode is True
    assert config_module.default_config() is first

    replacement = config_module.configure(APIConfig())
    assert config_module.default_config() is replacement


def test_to_dict_round_trips_through_file(tmp_path: Path):
    original = APIConfig(api_id="1", user="u", password="p", sender="LUKE")
    loaded = APIConfig.load(write_config(tmp_path, original.to_dict()))
    assert loaded.to_dict() == original.to_dict()


def test_auth_options_only_include_set_fields():
    assert AuthOptions(session_id="abc").as_params() == {"session_id": "abc"}
    assert AuthOptions.coerce(None).as_params() == {}
    with pytest.raises(ValueError):
        AuthOptions.coerce({"token": "abc"})


def test_send_options_map_to_wire_keys():
    options = SendOptions.from_mapping({
        "from": "LUKE",
        "callback": 3,
        "client_message_id": "abc",
        "concat": 2,
        "mo": 1,
    })
    assert options.to_params() == {
        "from": "LUKE",
        "req_feat": "48",
        "callback": 3,
        "climsgid": "abc",
        "concat": 2,
    }
    assert SendOptions().to_params() == {}
