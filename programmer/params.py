# programmer/params.py
"""
Programmer parameter strings.

A programmer is selected as ``name[:key=value[,key=value...]]``, e.g.
``developerbox:serial=FT3A``. Drivers pull out the keys they understand with
extract(); anything left over after init is reported as unhandled.
"""

from __future__ import annotations

import logging
from typing import Optional

_log = logging.getLogger("programmer")


class ProgrammerParamError(ValueError):
    pass


def parse_programmer_spec(spec: str) -> tuple[str, str]:
    """Split 'name:params' into (name, params)."""
    name, _, params = spec.partition(":")
    name = name.strip()
    if not name:
        raise ProgrammerParamError(f"No programmer name in {spec!r}")
    return name, params


class ProgrammerParams:
    def __init__(self, values: Optional[dict[str, str]] = None) -> None:
        self._values: dict[str, str] = dict(values or {})

    @classmethod
    def parse(cls, text: str | None) -> "ProgrammerParams":
        values: dict[str, str] = {}
        for item in (text or "").split(","):
            item = item.strip()
            if not item:
                continue
            key, sep, value = item.partition("=")
            key = key.strip()
            if not sep or not key:
                raise ProgrammerParamError(f"Malformed programmer parameter {item!r}, expected key=value")
            if key in values:
                raise ProgrammerParamError(f"Programmer parameter {key!r} given more than once")
            values[key] = value.strip()
        return cls(values)

    def extract(self, name: str) -> Optional[str]:
        """Remove and return the value for name, or None if absent or empty."""
        if name not in self._values:
            return None
        value = self._values.pop(name)
        if not value:
            _log.error("Missing argument for parameter %s.", name)
            return None
        return value

    def remaining(self) -> list[str]:
        return sorted(self._values)

    def __str__(self) -> str:
        return ",".join(f"{k}={v}" for k, v in self._values.items())
