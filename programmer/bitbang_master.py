# programmer/bitbang_master.py
"""
Bit-bang SPI master capability.

A bit-bang master is the pin-level half of a software SPI programmer: it knows
how to drive CS, SCK and MOSI and how to sample MISO on one particular piece
of hardware. A generic bit-bang engine (not part of this project) sequences
those calls into byte transfers, one call at a time and in program order.

Each hardware variant subclasses BitbangSpiMaster and tags itself with a
BitbangMasterType. Registering a master publishes it as the active one; only
one master can be active until the registry is cleared.
"""

from __future__ import annotations

import abc
import logging
from enum import Enum

_log = logging.getLogger("programmer")


class BitbangMasterType(Enum):
    INVALID = 0
    DEVELOPERBOX = 1


class BitbangSpiMaster(abc.ABC):
    """Pin-level operations required by the generic bit-bang SPI engine."""

    master_type: BitbangMasterType = BitbangMasterType.INVALID

    # Optional bus arbitration hooks; either both or neither.
    request_bus = None
    release_bus = None

    @abc.abstractmethod
    def set_chip_select(self, level: int) -> None: ...

    @abc.abstractmethod
    def set_clock(self, level: int) -> None: ...

    @abc.abstractmethod
    def set_data_out(self, level: int) -> None: ...

    @abc.abstractmethod
    def get_data_in(self) -> bool: ...

    @abc.abstractmethod
    def set_clock_and_data_out(self, clock_level: int, data_out_level: int) -> None: ...


class BitbangMasterRegistry:
    def __init__(self) -> None:
        self._active: BitbangSpiMaster | None = None

    def register(self, master) -> int:
        """Publish master as the active bit-bang master. Returns 0 on success."""
        if not isinstance(master, BitbangSpiMaster):
            _log.error("Bitbanging SPI master init failed: %r is not a bit-bang master.", master)
            return 1
        if master.master_type is BitbangMasterType.INVALID:
            _log.error("Bitbanging SPI master init failed: master has no valid type.")
            return 1
        if (master.request_bus is None) != (master.release_bus is None):
            _log.error("Bitbanging SPI master init failed: request_bus and release_bus must come as a pair.")
            return 1
        if self._active is not None:
            _log.error("Bitbanging SPI master init failed: a %s master is already registered.",
                       self._active.master_type.name)
            return 1

        self._active = master
        _log.debug("Registered bit-bang SPI master %s", master.master_type.name)
        return 0

    @property
    def active(self) -> BitbangSpiMaster | None:
        return self._active

    def clear(self) -> None:
        self._active = None

    def __len__(self) -> int:
        return 0 if self._active is None else 1


default_registry = BitbangMasterRegistry()


def register_spi_bitbang_master(master, registry: BitbangMasterRegistry | None = None) -> int:
    return (registry or default_registry).register(master)
