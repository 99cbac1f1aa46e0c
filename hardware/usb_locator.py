# hardware/usb_locator.py
"""
Find and open a USB device by vendor/product ID and optional serial prefix.

Several identical bridges can be attached at once, so the operator may pass
the leading characters of the wanted unit's serial number. Every USB failure
along the way (descriptor, open, serial read) only skips that candidate; the
search fails only when the candidates run out.

Every enumerated device object that is not handed back is closed exactly
once before returning, whatever path the search takes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import usb1  # from 'libusb1' package

_log = logging.getLogger("usb.locator")

# libusb_get_string_descriptor_ascii() buffer, NUL included
SERIAL_BUFFER_LEN = 64


@dataclass(frozen=True)
class DeviceInfo:
    bus: int
    address: int
    vendor_id: int
    product_id: int
    serial: Optional[str]


def _device_list(context) -> list:
    """
    Enumerate attached devices.

    libusb1 reads each device descriptor while building the device object and
    silently drops failures when skip_on_error is set, so enumerate strictly
    first; on a descriptor failure, warn and enumerate again skipping the bad
    devices. A failure of the list itself propagates.
    """
    partial = []
    try:
        for dev in context.getDeviceIterator(skip_on_error=False):
            partial.append(dev)
        return partial
    except usb1.USBError as e:
        _release(partial)
        error = e

    devices = list(context.getDeviceIterator(skip_on_error=True))
    _log.warning("Reading the USB device descriptor failed (%s)!", error)
    return devices


def _release(devices, keep=None) -> None:
    """Close every enumerated device except keep."""
    for dev in devices:
        if dev is not keep:
            dev.close()


def _ids(dev) -> tuple[int, int]:
    return dev.getVendorID(), dev.getProductID()


def _read_serial(dev, handle) -> Optional[str]:
    serial = handle.getASCIIStringDescriptor(dev.getSerialNumberDescriptor())
    if serial is None:
        return None
    return serial[: SERIAL_BUFFER_LEN - 1]


def find_device(context, vendor_id: int, product_id: int, serial_prefix: Optional[str] = None):
    """
    Return an open handle to the first device matching vendor_id and
    product_id (and whose serial starts with serial_prefix, if given), or
    None when nothing matches.
    """
    try:
        devices = _device_list(context)
    except usb1.USBError as e:
        _log.error("Getting the USB device list failed (%s)!", e)
        return None

    found = keep = None
    try:
        for dev in devices:
            dev_vid, dev_pid = _ids(dev)
            if dev_vid != vendor_id or dev_pid != product_id:
                continue

            _log.debug(
                "Found USB device %04x:%04x at address %d-%d.",
                dev_vid, dev_pid, dev.getBusNumber(), dev.getDeviceAddress(),
            )

            try:
                handle = dev.open()
            except usb1.USBError as e:
                _log.error("Opening the USB device failed (%s)!", e)
                continue

            if serial_prefix:
                try:
                    serial = _read_serial(dev, handle)
                except usb1.USBError as e:
                    _log.error("Reading the USB serialno failed (%s)!", e)
                    handle.close()
                    continue
                _log.debug("Serial number is %s", serial)

                if serial is None or not serial.startswith(serial_prefix):
                    handle.close()
                    continue

            # the open handle still needs its device
            found, keep = handle, dev
            break
    finally:
        _release(devices, keep)

    return found


def list_devices(context, vendor_id: int, product_id: int) -> list[DeviceInfo]:
    """Describe every attached device with the given IDs, reading serials where possible."""
    out: list[DeviceInfo] = []
    try:
        devices = _device_list(context)
    except usb1.USBError as e:
        _log.error("Getting the USB device list failed (%s)!", e)
        return out

    try:
        for dev in devices:
            if _ids(dev) != (vendor_id, product_id):
                continue

            serial = None
            try:
                handle = dev.open()
            except usb1.USBError as e:
                _log.warning("Opening the USB device failed (%s)!", e)
            else:
                try:
                    serial = _read_serial(dev, handle)
                except usb1.USBError as e:
                    _log.warning("Reading the USB serialno failed (%s)!", e)
                finally:
                    handle.close()

            out.append(DeviceInfo(dev.getBusNumber(), dev.getDeviceAddress(), vendor_id, product_id, serial))
    finally:
        _release(devices)

    return out
