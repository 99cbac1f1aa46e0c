# utils/config.py
"""
Programmer configuration.

Settings live in config/programmer.toml next to the repository root. Missing
files or sections fall back to DEFAULTS so the tool runs without one.
"""
from __future__ import annotations

import copy
import os
import tomllib

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "config", "programmer.toml")

DEFAULTS = {
    "programmer": {"name": "developerbox", "params": ""},
    "gpio": {"strict_errors": False},
    "logging": {
        "log_dir": "logs",
        "overwrite": True,
        "log_level": "DEBUG",
        "console_level": "INFO",
    },
    "profiler": {"warn_ms": 1000.0},
}


def _load_toml(path: str) -> dict:
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_config(path: str | None = None) -> dict:
    """
    Load the TOML config at path (default config/programmer.toml) merged over
    DEFAULTS. An explicit path that does not exist is an error; a missing
    default file is not.
    """
    cfg = copy.deepcopy(DEFAULTS)
    if path is None:
        path = DEFAULT_CONFIG_PATH
        if not os.path.exists(path):
            return cfg

    for section, values in _load_toml(path).items():
        if isinstance(values, dict):
            cfg.setdefault(section, {}).update(values)
        else:
            cfg[section] = values
    return cfg
