# test/test_latch_trace.py

import numpy as np

from analysis.latch_trace import LatchTrace
from hardware.cp210x_gpio import Cp210xGpio
from hardware.developerbox_spi import DeveloperboxBitbangMaster


def _traced_master(handle):
    trace = LatchTrace()
    return DeveloperboxBitbangMaster(Cp210xGpio(handle, observer=trace)), trace


def test_levels_follow_commanded_writes(latch_handle):
    master, trace = _traced_master(latch_handle)

    master.set_chip_select(1)
    master.set_clock_and_data_out(1, 1)
    master.set_clock(0)

    lv = trace.levels()
    assert lv.shape == (3, 4)
    assert lv.dtype == np.uint8
    # columns: CLOCK, CHIP_SELECT, DATA_IN, DATA_OUT
    assert lv.tolist() == [
        [0, 1, 0, 0],
        [1, 1, 0, 1],
        [0, 1, 0, 1],
    ]


def test_reads_record_data_in(latch_handle):
    master, trace = _traced_master(latch_handle)

    latch_handle.input_bits = 0b0100
    master.get_data_in()
    latch_handle.input_bits = 0
    master.get_data_in()

    assert trace.levels()[:, 2].tolist() == [1, 0]
    assert len(trace) == 2


def test_plot_writes_png(latch_handle, tmp_path):
    master, trace = _traced_master(latch_handle)
    for i in range(4):
        master.set_clock_and_data_out(i & 1, (i >> 1) & 1)

    out = tmp_path / "trace.png"
    trace.plot(str(out))
    assert out.exists() and out.stat().st_size > 0


def test_plot_of_empty_trace(tmp_path):
    out = tmp_path / "empty.png"
    LatchTrace().plot(str(out))
    assert out.exists()
