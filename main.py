"""
Main entry point for the Developerbox debug-UART programmer.

Selects a programmer (``-p developerbox[:serial=PREFIX]``), binds it through
the programmer table and then runs one of the pin-level diagnostic actions
against the bit-bang master it published. Whatever happens, the registered
shutdown hooks run before exit so the USB handle and context are released.

Exit status is 0 on success and 1 if the programmer could not be bound.
"""

import argparse
import logging
import sys

import usb1  # from 'libusb1' package

from utils.config import load_config
from utils.logger import setup_logging
from utils.profiler import CodeProfiler
from analysis.latch_trace import LatchTrace
from hardware.developerbox_spi import PinAssignment
from hardware.usb_locator import list_devices
from programmer.bitbang_master import default_registry
from programmer.params import ProgrammerParamError, parse_programmer_spec
from programmer.registry import PROGRAMMERS, programmer_init
from programmer.shutdown import programmer_shutdown


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Bit-bang SPI over the Developerbox CP2102N debug UART.")
    p.add_argument("-p", "--programmer", help="programmer name with optional params, e.g. developerbox:serial=DN01")
    p.add_argument("-c", "--config", help="path to a programmer TOML config")
    p.add_argument("--list", action="store_true", help="list attached programmer devices and exit")
    p.add_argument("--read-pins", action="store_true", help="print the current level of every pin")
    p.add_argument("--cs", type=int, choices=(0, 1), help="drive chip select to this level")
    p.add_argument("--clock-test", type=int, metavar="N", default=0,
                   help="toggle SCK N times with CS asserted, alternating MOSI")
    p.add_argument("--trace", metavar="PNG", help="save a plot of every latch transfer")
    return p


def list_programmer_devices(log, context_factory=usb1.USBContext) -> int:
    try:
        context = context_factory().open()
    except usb1.USBError as e:
        log.error("Could not initialize libusb! (%s)", e)
        return 1

    try:
        for entry in PROGRAMMERS.values():
            for dev in entry.devs:
                found = list_devices(context, dev.vendor_id, dev.device_id)
                log.info("%s: %s, %d attached", entry.name, dev, len(found))
                for info in found:
                    print(f"{entry.name}: bus {info.bus:03d} address {info.address:03d} "
                          f"{info.vendor_id:04x}:{info.product_id:04x} serial={info.serial or '?'}")
    finally:
        context.close()
    return 0


def read_pins(master) -> dict:
    value = master.gpio.read_latch()
    return {pin.name: (value >> int(pin)) & 1 for pin in PinAssignment}


def clock_test(master, cycles: int) -> list[bool]:
    """Clock SCK with CS low and MOSI alternating; return MISO per cycle."""
    samples = []
    master.set_chip_select(0)
    for i in range(cycles):
        master.set_clock_and_data_out(0, i & 1)
        master.set_clock(1)
        samples.append(master.get_data_in())
    master.set_clock(0)
    master.set_chip_select(1)
    return samples


def main(argv=None, context_factory=usb1.USBContext) -> int:
    args = build_parser().parse_args(argv)

    cfg = load_config(args.config)
    log_cfg = cfg["logging"]
    setup_logging(
        log_dir=log_cfg["log_dir"],
        overwrite=log_cfg["overwrite"],
        log_level=log_cfg["log_level"],
        console_level=log_cfg["console_level"],
    )
    main_log = logging.getLogger("main")

    if args.list:
        return list_programmer_devices(main_log, context_factory)

    spec = args.programmer or cfg["programmer"]["name"]
    try:
        name, params = parse_programmer_spec(spec)
    except ProgrammerParamError as e:
        main_log.error("%s", e)
        return 1
    if not params and not args.programmer:
        params = cfg["programmer"].get("params", "")

    trace = LatchTrace() if args.trace else None
    warn_ms = float(cfg["profiler"]["warn_ms"])

    try:
        ret = programmer_init(
            name, params,
            context_factory=context_factory,
            strict=bool(cfg["gpio"]["strict_errors"]),
            observer=trace,
        )
        if ret:
            main_log.error("Programmer initialization failed.")
            return ret

        master = default_registry.active
        if args.cs is not None:
            with CodeProfiler("set chip select", warn_ms, gpio=master.gpio):
                master.set_chip_select(args.cs)
            main_log.info("Chip select driven %s", "high" if args.cs else "low")

        if args.clock_test:
            with CodeProfiler("clock test", warn_ms, gpio=master.gpio):
                samples = clock_test(master, args.clock_test)
            main_log.info("MISO samples: %s", "".join("1" if s else "0" for s in samples))

        if args.read_pins or (args.cs is None and not args.clock_test):
            with CodeProfiler("read pins", warn_ms, gpio=master.gpio):
                pins = read_pins(master)
            for pin, level in pins.items():
                print(f"{pin:12s} {level}")

        if trace is not None:
            trace.plot(args.trace)
        return 0
    except Exception as e:
        main_log.critical("Unhandled exception: %s", e, exc_info=True)
        return 1
    finally:
        if programmer_shutdown():
            main_log.error("Programmer shutdown reported an error.")
        default_registry.clear()
        main_log.info("Application finished.")


if __name__ == "__main__":
    sys.exit(main())
