"""Configuration for the qrguard gateway.

Reads from config/qrguard.ini if present, environment variables override.
The passphrase is a deployment secret: keep it out of version control.
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path

_CONFIG_FILE = Path(__file__).resolve().parent.parent.parent / "config" / "qrguard.ini"


@dataclass(frozen=True)
class QrGuardConfig:
    """Gateway configuration. Immutable once loaded.

    An empty passphrase disables token encryption; an empty api_key
    disables authentication.
    """

    passphrase: str = ""
    api_key: str = ""
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "info"
    members_file: str = ""


_INI_KEYS = [
    ("codec", "passphrase", "passphrase"),
    ("gateway", "api_key", "api_key"),
    ("gateway", "host", "host"),
    ("gateway", "port", "port"),
    ("gateway", "log_level", "log_level"),
    ("store", "members_file", "members_file"),
]

_ENV_MAP = {
    "QRGUARD_PASSPHRASE": "passphrase",
    "QRGUARD_API_KEY": "api_key",
    "QRGUARD_HOST": "host",
    "QRGUARD_PORT": "port",
    "QRGUARD_LOG_LEVEL": "log_level",
    "QRGUARD_MEMBERS_FILE": "members_file",
}


def load_config(config_path: Path | None = None) -> QrGuardConfig:
    """Load config from INI file, then override with environment variables."""
    path = config_path or _CONFIG_FILE
    kwargs: dict = {}

    if path.exists():
        parser = configparser.ConfigParser(interpolation=None)
        parser.read(path)
        for section, ini_key, config_key in _INI_KEYS:
            val = parser.get(section, ini_key, fallback=None)
            if val is not None:
                kwargs[config_key] = val

    for env_key, config_key in _ENV_MAP.items():
        val = os.getenv(env_key)
        if val is not None:
            kwargs[config_key] = val

    if "port" in kwargs:
        kwargs["port"] = int(kwargs["port"])
    if "log_level" in kwargs:
        kwargs["log_level"] = kwargs["log_level"].lower()
    return QrGuardConfig(**kwargs)
