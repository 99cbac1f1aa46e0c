# programmer/developerbox.py
"""
Developerbox programmer lifecycle.

Binds the CP2102N bit-bang pins to the host: open a libusb context, find the
bridge, register a teardown hook and publish the bit-bang master.

    UNINITIALIZED --init()--> BOUND --shutdown()--> TORN_DOWN

init() returns 0 on success and 1 on failure. If registering the hook or the
master fails the handle and context stay open; the process is expected to
exit.
"""

from __future__ import annotations

import logging
from enum import Enum

import usb1  # from 'libusb1' package

from hardware.cp210x_gpio import Cp210xGpio
from hardware.developerbox_spi import DeveloperboxBitbangMaster
from hardware.usb_locator import find_device
from programmer.bitbang_master import BitbangMasterRegistry, default_registry
from programmer.devices import DevEntry, TestState
from programmer.errors import ProgrammerStateError
from programmer.params import ProgrammerParams
from programmer.shutdown import ShutdownRegistry, default_shutdown

_log = logging.getLogger("programmer")

DEVS_DEVELOPERBOX = [
    DevEntry(0x10C4, 0xEA60, TestState.OK, "Silicon Labs", "CP2102N USB to UART Bridge Controller"),
]


class BinderState(Enum):
    UNINITIALIZED = "uninitialized"
    BOUND = "bound"
    TORN_DOWN = "torn-down"


class DeveloperboxProgrammer:
    def __init__(
        self,
        context_factory=usb1.USBContext,
        *,
        shutdown: ShutdownRegistry | None = None,
        masters: BitbangMasterRegistry | None = None,
        strict: bool = False,
        observer=None,
    ) -> None:
        self._context_factory = context_factory
        self._shutdown = shutdown if shutdown is not None else default_shutdown
        self._masters = masters if masters is not None else default_registry
        self.strict = strict
        self.observer = observer

        self.state = BinderState.UNINITIALIZED
        self.context = None
        self.handle = None
        self.master: DeveloperboxBitbangMaster | None = None

    def _open_context(self):
        try:
            context = self._context_factory()
            context.open()
        except usb1.USBError as e:
            _log.error("Could not initialize libusb! (%s)", e)
            return None
        return context

    def init(self, params: ProgrammerParams | None = None) -> int:
        if self.state is not BinderState.UNINITIALIZED or self.handle is not None:
            raise ProgrammerStateError(f"init() called in state {self.state.value}")

        serial = (params or ProgrammerParams()).extract("serial")
        if serial:
            _log.info("Looking for serial number commencing %s", serial)

        context = self._open_context()
        if context is None:
            return 1

        entry = DEVS_DEVELOPERBOX[0]
        handle = find_device(context, entry.vendor_id, entry.device_id, serial)
        if handle is None:
            _log.error("Could not find a Developerbox programmer on USB.")
            context.close()
            return 1

        self.context = context
        self.handle = handle
        self.master = DeveloperboxBitbangMaster(
            Cp210xGpio(handle, strict=self.strict, observer=self.observer)
        )

        if self._shutdown.register(self.shutdown):
            return 1

        if self._masters.register(self.master):
            # This should never happen.
            _log.error("Developerbox bitbang SPI master init failed!")
            return 1

        self.state = BinderState.BOUND
        _log.info("Developerbox programmer bound.")
        return 0

    def shutdown(self) -> int:
        if self.state is BinderState.TORN_DOWN or self.handle is None:
            raise ProgrammerStateError(f"shutdown() called in state {self.state.value}")
        self.handle.close()
        self.context.close()
        self.state = BinderState.TORN_DOWN
        _log.debug("Developerbox programmer torn down.")
        return 0


def developerbox_spi_init(params: ProgrammerParams | None = None, **kwargs) -> int:
    """Programmer table entry point."""
    return DeveloperboxProgrammer(**kwargs).init(params)
