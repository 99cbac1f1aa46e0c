# programmer/devices.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TestState(Enum):
    OK = "OK"     # tested and working
    NT = "NT"     # not tested
    BAD = "BAD"   # known not to work
    DEP = "DEP"   # depends on other hardware or settings
    NA = "N/A"    # not applicable

    __test__ = False


@dataclass(frozen=True)
class DevEntry:
    vendor_id: int
    device_id: int
    status: TestState
    vendor_name: str
    device_name: str

    def __str__(self) -> str:
        return f"{self.vendor_name} {self.device_name} [{self.vendor_id:04x}:{self.device_id:04x}] ({self.status.value})"
