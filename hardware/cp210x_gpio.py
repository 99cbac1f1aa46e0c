# hardware/cp210x_gpio.py
"""
CP210x GPIO latch access over vendor control transfers.

The CP2102N exposes four GPIO pins through a single 4-bit latch register.
Two vendor-specific control requests read and write it:

    read : bmRequestType=0xC0, bRequest=0xFF, wValue=0x00C2, 1 byte IN
    write: bmRequestType=0x40, bRequest=0xFF, wValue=0x37E1,
           wIndex=(value << 8) | mask, no data stage

The write carries both the new pin levels and a mask in one transfer, so only
the masked pins change and one or two pins can be updated together.

No timeout is configured (libusb timeout 0 waits forever) and nothing is
cached: every read goes to the device.
"""

from __future__ import annotations

import logging

import usb1  # from 'libusb1' package

from programmer.errors import LatchTransportError
from utils.logger import set_transfer_index

_log = logging.getLogger("gpio")

# Request types
REQTYPE_HOST_TO_DEVICE = 0x40
REQTYPE_DEVICE_TO_HOST = 0xC0

# Request code
CP210X_VENDOR_SPECIFIC = 0xFF

# CP210X_VENDOR_SPECIFIC sub-commands (wValue)
CP210X_WRITE_LATCH = 0x37E1
CP210X_READ_LATCH = 0x00C2

LATCH_MASK = 0x0F
USB_TIMEOUT_MS = 0


def encode_latch_write(value: int, mask: int) -> int:
    """Pack value (high byte) and mask (low byte) into the write wIndex."""
    return ((value & LATCH_MASK) << 8) | (mask & LATCH_MASK)


class Cp210xGpio:
    """
    Reads and writes the CP210x GPIO latch through an open device handle.

    By default transport failures are logged and degraded: a failed read
    returns 0 and a failed write is dropped. With strict=True both raise
    LatchTransportError instead.

    The observer, if given, is told about every completed transfer through
    on_write(value, mask) and on_read(value).
    """

    def __init__(self, handle, *, strict: bool = False, observer=None) -> None:
        self._handle = handle
        self.strict = bool(strict)
        self.observer = observer
        self.transfers = 0

    def _next_transfer(self) -> None:
        self.transfers += 1
        set_transfer_index(self.transfers)

    def read_latch(self) -> int:
        self._next_transfer()
        try:
            data = self._handle.controlRead(
                REQTYPE_DEVICE_TO_HOST,
                CP210X_VENDOR_SPECIFIC,
                CP210X_READ_LATCH,
                0,
                1,
                USB_TIMEOUT_MS,
            )
        except usb1.USBError as e:
            _log.error("Failed to read GPIO pins (%s)", e)
            if self.strict:
                raise LatchTransportError(f"Failed to read GPIO pins ({e})") from e
            return 0

        if len(data) < 1:
            _log.error("Failed to read GPIO pins (short read: %d bytes)", len(data))
            if self.strict:
                raise LatchTransportError("Failed to read GPIO pins (short read)")
            return 0

        value = data[0] & LATCH_MASK
        _log.debug("latch read 0x%X", value)
        if self.observer is not None:
            self.observer.on_read(value)
        return value

    def write_latch(self, value: int, mask: int) -> None:
        self._next_transfer()
        w_index = encode_latch_write(value, mask)
        try:
            self._handle.controlWrite(
                REQTYPE_HOST_TO_DEVICE,
                CP210X_VENDOR_SPECIFIC,
                CP210X_WRITE_LATCH,
                w_index,
                b"",
                USB_TIMEOUT_MS,
            )
        except usb1.USBError as e:
            _log.error("Failed to write GPIO pins (%s)", e)
            if self.strict:
                raise LatchTransportError(f"Failed to write GPIO pins ({e})") from e
            return

        _log.debug("latch write value=0x%X mask=0x%X", value & LATCH_MASK, mask & LATCH_MASK)
        if self.observer is not None:
            self.observer.on_write(value & LATCH_MASK, mask & LATCH_MASK)
