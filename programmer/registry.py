# programmer/registry.py
"""
Table of programmer variants.

Each entry names a programmer, the bus it sits on, the devices it supports
and the init function that binds it. programmer_init() selects an entry,
hands it the parsed parameters and rejects parameters nobody consumed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from programmer.developerbox import DEVS_DEVELOPERBOX, developerbox_spi_init
from programmer.devices import DevEntry
from programmer.params import ProgrammerParamError, ProgrammerParams

_log = logging.getLogger("programmer")


@dataclass(frozen=True)
class ProgrammerEntry:
    name: str
    bus: str
    devs: list[DevEntry]
    init: Callable[..., int]


PROGRAMMERS: dict[str, ProgrammerEntry] = {
    "developerbox": ProgrammerEntry(
        name="developerbox",
        bus="usb",
        devs=DEVS_DEVELOPERBOX,
        init=developerbox_spi_init,
    ),
}


def programmer_init(name: str, param_string: str | None = None, **init_kwargs) -> int:
    """Initialize the named programmer. Returns 0 on success, non-zero on failure."""
    entry = PROGRAMMERS.get(name)
    if entry is None:
        _log.error("Unknown programmer %r. Valid choices are: %s", name, ", ".join(sorted(PROGRAMMERS)))
        return 1

    try:
        params = ProgrammerParams.parse(param_string)
    except ProgrammerParamError as e:
        _log.error("%s", e)
        return 1

    _log.info("Initializing %s programmer", entry.name)
    ret = entry.init(params, **init_kwargs)
    if ret == 0 and params.remaining():
        _log.error("Unhandled programmer parameters: %s", params)
        _log.error("Aborting.")
        ret = 1
    return ret
