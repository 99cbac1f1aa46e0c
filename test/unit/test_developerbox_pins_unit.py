# test/unit/test_developerbox_pins_unit.py
import pytest

from hardware.cp210x_gpio import Cp210xGpio
from hardware.developerbox_spi import DeveloperboxBitbangMaster, PinAssignment
from programmer.bitbang_master import BitbangMasterType, BitbangSpiMaster


class FakeGpio:
    """Records write_latch calls and serves a fixed read_latch value."""
    def __init__(self, read_value=0):
        self.writes = []
        self.read_value = read_value
        self.reads = 0

    def write_latch(self, value, mask):
        self.writes.append((value, mask))

    def read_latch(self):
        self.reads += 1
        return self.read_value


SETTERS = [
    ("set_clock", PinAssignment.CLOCK),
    ("set_chip_select", PinAssignment.CHIP_SELECT),
    ("set_data_out", PinAssignment.DATA_OUT),
]


@pytest.mark.unit
def test_pin_assignment_is_fixed_and_distinct():
    assert [int(p) for p in (PinAssignment.CLOCK, PinAssignment.CHIP_SELECT,
                             PinAssignment.DATA_IN, PinAssignment.DATA_OUT)] == [0, 1, 2, 3]
    assert len({int(p) for p in PinAssignment}) == 4


@pytest.mark.unit
@pytest.mark.parametrize("method, pin", SETTERS)
def test_setters_use_a_single_bit_mask(method, pin):
    gpio = FakeGpio()
    master = DeveloperboxBitbangMaster(gpio)

    getattr(master, method)(1)
    getattr(master, method)(0)

    bit = 1 << int(pin)
    assert gpio.writes == [(bit, bit), (0, bit)]
    assert gpio.reads == 0


@pytest.mark.unit
def test_truthy_levels_are_normalised():
    gpio = FakeGpio()
    master = DeveloperboxBitbangMaster(gpio)

    master.set_data_out(5)
    master.set_clock(True)

    assert gpio.writes == [(0b1000, 0b1000), (0b0001, 0b0001)]


@pytest.mark.unit
@pytest.mark.parametrize("clock, mosi, value", [
    (0, 0, 0b0000),
    (1, 0, 0b0001),
    (0, 1, 0b1000),
    (1, 1, 0b1001),
])
def test_set_clock_and_data_out_is_one_transfer(clock, mosi, value):
    gpio = FakeGpio()
    DeveloperboxBitbangMaster(gpio).set_clock_and_data_out(clock, mosi)
    assert gpio.writes == [(value, 0b1001)]


@pytest.mark.unit
@pytest.mark.parametrize("latch, expected", [
    (0b0100, True),
    (0b1111, True),
    (0b0000, False),
    (0b1011, False),
])
def test_get_data_in_follows_bit_two(latch, expected):
    gpio = FakeGpio(read_value=latch)
    assert DeveloperboxBitbangMaster(gpio).get_data_in() is expected
    assert gpio.reads == 1


@pytest.mark.unit
def test_master_satisfies_bitbang_contract():
    master = DeveloperboxBitbangMaster(FakeGpio())
    assert isinstance(master, BitbangSpiMaster)
    assert master.master_type is BitbangMasterType.DEVELOPERBOX
    assert master.request_bus is None and master.release_bus is None


@pytest.mark.unit
def test_pins_against_emulated_latch(latch_handle):
    master = DeveloperboxBitbangMaster(Cp210xGpio(latch_handle))

    master.set_chip_select(1)
    master.set_clock_and_data_out(1, 1)
    assert latch_handle.latch == 0b1011

    master.set_clock(0)
    assert latch_handle.latch == 0b1010

    assert master.get_data_in() is False
    latch_handle.input_bits = 0b0100
    assert master.get_data_in() is True
    assert len(latch_handle.transfers) == 5
