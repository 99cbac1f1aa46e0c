# test/conftest.py
import pytest

from mocks.mock_usb1 import FakeContext, FakeDevice, FakeHandle


@pytest.fixture
def fake_device():
    """Factory for fake USB devices: fake_device(vid=..., pid=..., serial=...)."""
    return FakeDevice


@pytest.fixture
def make_context():
    """
    Build a FakeContext holding the given devices.
    Usage:
        ctx = make_context([FakeDevice(), ...], open_error=None)
    """
    def _builder(devices=None, **kwargs):
        return FakeContext(devices, **kwargs)
    return _builder


@pytest.fixture
def latch_handle():
    """A bare fake handle with an emulated GPIO latch, not tied to enumeration."""
    return FakeHandle(FakeDevice())


@pytest.fixture
def registries():
    """Fresh shutdown and bit-bang master registries so tests do not share state."""
    from programmer.bitbang_master import BitbangMasterRegistry
    from programmer.shutdown import ShutdownRegistry
    return ShutdownRegistry(), BitbangMasterRegistry()


@pytest.fixture
def clean_default_registries():
    """Empty the process-wide registries around a test that goes through them."""
    from programmer.bitbang_master import default_registry
    from programmer.shutdown import default_shutdown
    default_shutdown.run()
    default_registry.clear()
    yield default_shutdown, default_registry
    default_shutdown.run()
    default_registry.clear()


@pytest.fixture
def restore_loggers():
    """Undo setup_logging() so later tests can still capture records with caplog."""
    import logging
    from utils.logger import LOGGER_NAMES
    yield
    for name in LOGGER_NAMES:
        log = logging.getLogger(name)
        for h in list(log.handlers):
            log.removeHandler(h)
            h.close()
        log.propagate = True
        log.setLevel(logging.NOTSET)
