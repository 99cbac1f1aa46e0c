# hardware/developerbox_spi.py
"""
Bit-bang SPI pins for the 96Boards Developerbox debug UART.

The Developerbox builds its debug UART from a CP2102N, whose four GPIO pins
are wired to the on-board SPI NOR flash. With DSW4-1 and DSW4-5 switched on
they can drive the flash directly, which makes the debug UART usable as an
emergency de-brick programmer. Every pin change costs one USB round trip, so
this is slow and only meant for recovery.
"""

from __future__ import annotations

from enum import IntEnum

from programmer.bitbang_master import BitbangMasterType, BitbangSpiMaster


class PinAssignment(IntEnum):
    """Latch bit for each SPI signal."""
    CLOCK = 0
    CHIP_SELECT = 1
    DATA_IN = 2
    DATA_OUT = 3


def _bit(pin: PinAssignment) -> int:
    return 1 << int(pin)


def _level(level) -> int:
    return 1 if level else 0


class DeveloperboxBitbangMaster(BitbangSpiMaster):
    master_type = BitbangMasterType.DEVELOPERBOX

    def __init__(self, gpio) -> None:
        self.gpio = gpio

    def _set_pin(self, pin: PinAssignment, level) -> None:
        self.gpio.write_latch(_level(level) << int(pin), _bit(pin))

    def set_chip_select(self, level) -> None:
        self._set_pin(PinAssignment.CHIP_SELECT, level)

    def set_clock(self, level) -> None:
        self._set_pin(PinAssignment.CLOCK, level)

    def set_data_out(self, level) -> None:
        self._set_pin(PinAssignment.DATA_OUT, level)

    def get_data_in(self) -> bool:
        return bool(self.gpio.read_latch() & _bit(PinAssignment.DATA_IN))

    def set_clock_and_data_out(self, clock_level, data_out_level) -> None:
        # one transfer so SCK and MOSI change together
        value = (_level(clock_level) << PinAssignment.CLOCK) | (_level(data_out_level) << PinAssignment.DATA_OUT)
        mask = _bit(PinAssignment.CLOCK) | _bit(PinAssignment.DATA_OUT)
        self.gpio.write_latch(value, mask)
