import json
import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from magic_login.config import Settings, load_settings, save_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("BASE_URL", "STATE_FILE", "SETTLE_DELAY", "HOME_URL", "LOG_LEVEL", "DEMO_DELAY"):
        monkeypatch.delenv(f"MAGIC_LOGIN_{name}", raising=False)


def test_defaults_when_file_missing(tmp_path):
    settings = load_settings(tmp_path / "config.json")
    assert settings == Settings()
    assert settings.base_url is None
    assert settings.settle_delay == 1.0
    assert settings.log_level == "WARNING"


def test_file_values_and_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"base_url": "https://file.example.com", "home_url": "/dashboard"}))
    monkeypatch.setenv("MAGIC_LOGIN_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("MAGIC_LOGIN_SETTLE_DELAY", "0.5")

    settings = load_settings(path)

    assert settings.base_url == "https://env.example.com"
    assert settings.home_url == "/dashboard"
    assert settings.settle_delay == 0.5


def test_log_level_is_normalized(tmp_path, monkeypatch):
    monkeypatch.setenv("MAGIC_LOGIN_LOG_LEVEL", "debug")
    settings = load_settings(tmp_path / "missing.json")
    assert settings.log_level == "DEBUG"


def test_invalid_file_value_is_dropped(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"settle_delay": -1, "home_url": "/dashboard"}))

    with caplog.at_level(logging.WARNING, logger="magic_login.config"):
        settings = load_settings(path)

    assert settings.settle_delay == 1.0
    assert settings.home_url == "/dashboard"
    assert any("settle_delay" in r.getMessage() for r in caplog.records)


def test_env_override_survives_invalid_file_value(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"settle_delay": -1}))
    monkeypatch.setenv("MAGIC_LOGIN_STATE_FILE", str(tmp_path / "s.json"))

    settings = load_settings(path)

    assert settings.state_file == tmp_path / "s.json"
    assert settings.settle_delay == 1.0


def test_invalid_env_value_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("MAGIC_LOGIN_SETTLE_DELAY", "-2")
    with pytest.raises(ValidationError):
        load_settings(tmp_path / "missing.json")


def test_unknown_file_keys_are_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"theme": "dark", "home_url": "/x"}))
    assert load_settings(path).home_url == "/x"


def test_corrupt_file_is_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2")
    assert load_settings(path) == Settings()


def test_save_round_trip(tmp_path):
    path = tmp_path / "dir" / "config.json"
    settings = Settings(base_url="https://auth.example.com", state_file=Path("/tmp/state.json"))

    save_settings(settings, path)

    assert json.loads(path.read_text()) == {
        "base_url": "https://auth.example.com",
        "state_file": "/tmp/state.json",
    }
    assert load_settings(path) == settings
