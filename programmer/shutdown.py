# programmer/shutdown.py
from __future__ import annotations

import logging
from typing import Any, Callable

_log = logging.getLogger("programmer")

SHUTDOWN_MAXFN = 32


class ShutdownRegistry:
    """
    Teardown callbacks registered by programmer drivers during init.

    run() calls them once each, newest first, and empties the table. No hook
    may be registered while run() is in progress.
    """

    def __init__(self, max_hooks: int = SHUTDOWN_MAXFN) -> None:
        self.max_hooks = max_hooks
        self._hooks: list[tuple[Callable[..., Any], Any]] = []
        self._running = False

    def register(self, fn: Callable[..., Any], data: Any = None) -> int:
        if self._running:
            _log.error("Tried to register a shutdown function during shutdown!")
            return 1
        if len(self._hooks) >= self.max_hooks:
            _log.error("Tried to register more than %d shutdown functions.", self.max_hooks)
            return 1
        self._hooks.append((fn, data))
        return 0

    def run(self) -> int:
        ret = 0
        self._running = True
        try:
            while self._hooks:
                fn, data = self._hooks.pop()
                try:
                    rc = fn() if data is None else fn(data)
                except Exception:
                    _log.exception("Shutdown function %r failed", fn)
                    rc = 1
                ret |= int(rc or 0)
        finally:
            self._running = False
        return ret

    def __len__(self) -> int:
        return len(self._hooks)


default_shutdown = ShutdownRegistry()


def register_shutdown(fn: Callable[..., Any], data: Any = None) -> int:
    return default_shutdown.register(fn, data)


def programmer_shutdown() -> int:
    return default_shutdown.run()
