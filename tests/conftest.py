"""Pytest fixtures for tests."""

import logging
import threading
from typing import Optional

import pytest

from piglow.core import ControllerRegistry, PiGlowController
from piglow.devices.protocol import BUS_ADDRESS


class RecordingTransport:
    """In-memory stand-in for an I2C bus that records every write."""

    def __init__(self, fail_on_write: Optional[int] = None, fail_on_close: bool = False):
        """
        Args:
            fail_on_write: Raise on this write number (1-based)
            fail_on_close: Raise from close()
        """
        self.writes: list[tuple[int, bytes]] = []
        self.close_count = 0
        self.fail_on_write = fail_on_write
        self.fail_on_close = fail_on_close
        self.write_gate: Optional[threading.Event] = None
        self.write_started = threading.Event()
        self.closed = threading.Event()

    def write(self, address: int, data: bytes) -> None:
        self.write_started.set()
        if self.write_gate is not None:
            self.write_gate.wait(5.0)
        if self.fail_on_write is not None and len(self.writes) + 1 == self.fail_on_write:
            raise OSError(121, "Remote I/O error")
        self.writes.append((address, bytes(data)))

    def close(self) -> None:
        self.close_count += 1
        self.closed.set()
        if self.fail_on_close:
            raise OSError("close failed")

    @property
    def data(self) -> list[bytes]:
        """Written byte strings, without addresses."""
        return [data for _, data in self.writes]


@pytest.fixture
def make_transport():
    """Factory for recording transports with failure injection."""
    return RecordingTransport


@pytest.fixture
def transport():
    """A fresh recording transport."""
    return RecordingTransport()


@pytest.fixture
def transport_factory(transport):
    """Transport factory that hands out the recording transport."""
    opened: list[int] = []

    def factory(bus: int) -> RecordingTransport:
        opened.append(bus)
        return transport

    factory.opened = opened
    return factory


@pytest.fixture
def registry():
    """An empty controller registry."""
    return ControllerRegistry()


@pytest.fixture
def controller(transport_factory):
    """A started controller on the recording transport, killed after the test."""
    glow = PiGlowController(bus=1, transport_factory=transport_factory)
    assert glow.start()
    yield glow
    glow.kill()
    glow.join(5.0)


@pytest.fixture
def address():
    """The PiGlow's bus address."""
    return BUS_ADDRESS


@pytest.fixture
def clean_root_logger():
    """Remove handlers the CLI adds to the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
