"""
A simple context manager for timing USB work.

Every bit-bang pin change is a full USB control transfer, so it is useful to
see how long a diagnostic action actually took and how much of that each
transfer cost.
"""
import time
import logging

profiler_log = logging.getLogger('profiler')

class CodeProfiler:
    """
    A context manager to time the execution of a code block.

    Example:
        with CodeProfiler("read pins", gpio=gpio):
            # code to time goes here

    Attributes:
        name (str): The name of the code block being timed.
        warn_ms (float): Log a warning when the block takes longer than this.
        gpio: Optional latch accessor whose transfer counter is sampled to
            report the average cost per transfer.
        elapsed_ms (float): Measured time, set on exit.
    """
    def __init__(self, name="", warn_ms=1000.0, gpio=None):
        self.name = name
        self.warn_ms = float(warn_ms)
        self.gpio = gpio
        self.elapsed_ms = 0.0

    def __enter__(self):
        self._start_transfers = self.gpio.transfers if self.gpio is not None else 0
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self.start_time) * 1000
        profiler_log.info("'%s' execution time: %.3f ms", self.name, self.elapsed_ms)
        if self.gpio is not None:
            n = self.gpio.transfers - self._start_transfers
            if n:
                profiler_log.info("'%s' %d USB transfers, %.3f ms each", self.name, n, self.elapsed_ms / n)
        if self.elapsed_ms > self.warn_ms:
            profiler_log.warning("'%s' took longer than %.1f ms.", self.name, self.warn_ms)
