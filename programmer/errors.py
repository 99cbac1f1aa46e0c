# programmer/errors.py
from __future__ import annotations


class ProgrammerError(Exception):
    """Base class for errors raised by the programmer drivers."""


class LatchTransportError(ProgrammerError):
    """
    Raised by the GPIO latch accessor in strict mode when a control transfer
    fails, so callers can tell "pins are low" from "the bus is unreachable".
    """


class ProgrammerStateError(ProgrammerError):
    """Raised when a programmer lifecycle step is called in the wrong state."""
