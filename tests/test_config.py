"""Tests for configuration loading."""

from __future__ import annotations

import dataclasses

import pytest

from qrguard.config import QrGuardConfig, load_config

_ENV_KEYS = (
    "QRGUARD_PASSPHRASE",
    "QRGUARD_API_KEY",
    "QRGUARD_HOST",
    "QRGUARD_PORT",
    "QRGUARD_LOG_LEVEL",
    "QRGUARD_MEMBERS_FILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_file(tmp_path):
    config = load_config(tmp_path / "missing.ini")
    assert config == QrGuardConfig()
    assert config.passphrase == ""
    assert config.port == 8000


def test_ini_file(tmp_path):
    ini = tmp_path / "qrguard.ini"
    ini.write_text(
        "[codec]\n"
        "passphrase = s3cret%value\n"
        "[gateway]\n"
        "api_key = k\n"
        "host = 0.0.0.0\n"
        "port = 9001\n"
        "log_level = DEBUG\n"
        "[store]\n"
        "members_file = /srv/members.json\n"
    )
    config = load_config(ini)
    assert config.passphrase == "s3cret%value"
    assert config.api_key == "k"
    assert config.host == "0.0.0.0"
    assert config.port == 9001
    assert config.log_level == "debug"
    assert config.members_file == "/srv/members.json"


def test_env_overrides_ini(tmp_path, monkeypatch):
    ini = tmp_path / "qrguard.ini"
    ini.write_text("[codec]\npassphrase = from-file\n[gateway]\nport = 9001\n")
    monkeypatch.setenv("QRGUARD_PASSPHRASE", "from-env")
    monkeypatch.setenv("QRGUARD_PORT", "9100")
    config = load_config(ini)
    assert config.passphrase == "from-env"
    assert config.port == 9100


def test_empty_env_passphrase_disables_encryption(tmp_path, monkeypatch):
    ini = tmp_path / "qrguard.ini"
    ini.write_text("[codec]\npassphrase = from-file\n")
    monkeypatch.setenv("QRGUARD_PASSPHRASE", "")
    assert load_config(ini).passphrase == ""


def test_invalid_port(tmp_path, monkeypatch):
    monkeypatch.setenv("QRGUARD_PORT", "eighty")
    with pytest.raises(ValueError):
        load_config(tmp_path / "missing.ini")


def test_config_is_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        QrGuardConfig().passphrase = "x"
