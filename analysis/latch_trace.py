# analysis/latch_trace.py
"""
Record CP210x latch traffic and plot it as SPI pin waveforms.

Attach a LatchTrace as the observer of a Cp210xGpio. Each completed write
updates the commanded level of the masked pins (pins never written start
low); each read records the DATA_IN level the device reported. The result is
one row per transfer, which plots like a slow logic analyzer capture.
"""

from __future__ import annotations

import logging

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from hardware.developerbox_spi import PinAssignment

trace_log = logging.getLogger("trace")

SIGNALS = [PinAssignment.CLOCK, PinAssignment.CHIP_SELECT, PinAssignment.DATA_IN, PinAssignment.DATA_OUT]


class LatchTrace:
    def __init__(self) -> None:
        self.events: list[tuple[str, int, int]] = []   # (kind, value, mask)

    def on_write(self, value: int, mask: int) -> None:
        self.events.append(("w", value, mask))

    def on_read(self, value: int) -> None:
        self.events.append(("r", value, 0x0F))

    def __len__(self) -> int:
        return len(self.events)

    def levels(self) -> np.ndarray:
        """Return an (events x 4) uint8 array of pin levels, columns in bit order."""
        out = np.zeros((len(self.events), 4), dtype=np.uint8)
        state = 0
        din = 0
        din_bit = 1 << int(PinAssignment.DATA_IN)
        for row, (kind, value, mask) in enumerate(self.events):
            if kind == "w":
                state = (state & ~mask) | (value & mask)
            else:
                din = value & din_bit
            snapshot = (state & ~din_bit) | din
            out[row] = [(snapshot >> bit) & 1 for bit in range(4)]
        return out

    def plot(self, path: str, title: str = "CP210x latch trace") -> None:
        """Write a step plot of all four signals to path."""
        lv = self.levels()
        n = np.arange(len(lv))

        fig, axes = plt.subplots(len(SIGNALS), 1, sharex=True, figsize=(10, 6))
        for ax, pin in zip(axes, SIGNALS):
            col = lv[:, int(pin)] if len(lv) else np.zeros(0)
            ax.step(n, col, where="post")
            ax.set_ylim(-0.2, 1.2)
            ax.set_yticks([0, 1])
            ax.set_ylabel(pin.name)
            ax.grid(True)
        axes[0].set_title(title)
        axes[-1].set_xlabel("USB transfer")
        fig.tight_layout()
        fig.savefig(path)
        plt.close(fig)
        trace_log.info("Latch trace with %d transfers written to %s", len(lv), path)
