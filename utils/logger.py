# utils/logger.py
import os, glob, logging
from contextvars import ContextVar

_TRANSFER_I = ContextVar("transfer_i", default=0)

LOGGER_NAMES = [
    "main",
    "programmer",
    "usb",
    "gpio",
    "profiler",
    "trace",
]

# loggers that also echo to the console
CONSOLE_LOGGERS = ["main", "programmer"]

LOG_FORMAT = "%(i)06d | %(levelname)s | %(name)s | %(message)s"


def set_transfer_index(i: int) -> None:
    _TRANSFER_I.set(int(i))


def get_transfer_index() -> int:
    return _TRANSFER_I.get()


class TransferIndexFilter(logging.Filter):
    def filter(self, record):
        # every record carries the number of the last USB control transfer
        record.i = _TRANSFER_I.get()
        return True


def _level(value) -> int:
    if isinstance(value, str):
        return logging.getLevelName(value.upper())
    return int(value)


def setup_logging(
    log_dir: str = "logs",
    overwrite: bool = True,
    log_level=logging.DEBUG,
    console_level=logging.INFO,
    cleanup_rotated: bool = True,
) -> None:
    log_level = _level(log_level)
    console_level = _level(console_level)

    os.makedirs(log_dir, exist_ok=True)
    if cleanup_rotated:
        for path in glob.glob(os.path.join(log_dir, "*.log.*")):
            try: os.remove(path)
            except OSError: pass

    fmt = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    console.setLevel(console_level)
    console.addFilter(TransferIndexFilter())

    for name in LOGGER_NAMES:
        log = logging.getLogger(name)
        log.setLevel(log_level)
        log.propagate = False
        for h in list(log.handlers):
            log.removeHandler(h)
            h.close()

        mode = "w" if overwrite else "a"
        fh = logging.FileHandler(os.path.join(log_dir, f"{name}.log"), mode=mode, encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(log_level)
        fh.addFilter(TransferIndexFilter())
        log.addHandler(fh)

    for name in CONSOLE_LOGGERS:
        logging.getLogger(name).addHandler(console)
    logging.getLogger("main").info("Logging system initialized.")
