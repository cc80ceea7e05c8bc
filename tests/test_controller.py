"""Tests for PiGlowController ordering, lifecycle and failure handling."""

import logging
import threading

import pytest

from piglow.core import ControllerState, PiGlowController
from piglow.core.controller import _kill_live_controllers
from piglow.exceptions import (
    BusNotFoundError,
    ControllerAlreadyRegisteredError,
    ControllerCrashedError,
    ControllerNotRunningError,
    ControllerTimeoutError,
    EncodingError,
)

START_WRITES = [
    bytes([0x00, 0x01]),
    bytes([0x13, 0x3F, 0x3F, 0x3F]),
    bytes([0x16, 0xFF]),
]
STOP_WRITES = [
    bytes([0x13, 0x00, 0x00, 0x00]),
    bytes([0x16, 0xFF]),
]
LATCH = bytes([0x16, 0xFF])


def power(values) -> bytes:
    return bytes([0x01]) + bytes(values)


def enable(values) -> bytes:
    return bytes([0x13]) + bytes(values)


def after_start(transport) -> list[bytes]:
    return transport.data[len(START_WRITES):]


# =================================================================
# Startup
# =================================================================


@pytest.mark.unit
class TestControllerStart:
    """Test controller startup."""

    def test_start_writes_init_sequence(self, controller, transport, transport_factory, address):
        """Test enable output, enable all LEDs and latch are written on start."""
        controller.wait()

        assert transport.data == START_WRITES
        assert all(addr == address for addr, _ in transport.writes)
        assert transport_factory.opened == [1]
        assert controller.state == ControllerState.RUNNING
        assert controller.is_running

    def test_start_without_enable(self, transport, transport_factory):
        """Test only output enable is written when enable_on_start is off."""
        glow = PiGlowController(transport_factory=transport_factory, enable_on_start=False)
        assert glow.start()
        glow.wait()

        assert transport.data == [bytes([0x00, 0x01])]
        glow.stop()

    def test_start_twice(self, controller, transport_factory):
        """Test a second start is a no-op that reports running."""
        assert controller.start()
        assert transport_factory.opened == [1]

    def test_missing_bus_returns_false(self, registry):
        """Test a missing bus is logged and reported, not raised."""

        def missing(bus):
            raise BusNotFoundError(bus)

        glow = PiGlowController(bus=7, name="board", registry=registry, transport_factory=missing)

        assert glow.start() is False
        assert glow.state == ControllerState.STOPPED
        assert isinstance(glow.error, BusNotFoundError)
        assert "board" not in registry
        assert glow.join(0)

    def test_unexpected_open_error_returns_false(self):
        """Test any other open failure also returns False."""

        def broken(bus):
            raise PermissionError("denied")

        glow = PiGlowController(transport_factory=broken)

        assert glow.start() is False
        assert isinstance(glow.error, PermissionError)

    def test_init_write_failure(self, make_transport):
        """Test a failing init write stops the controller and closes the bus."""
        transport = make_transport(fail_on_write=1)
        glow = PiGlowController(transport_factory=lambda bus: transport)

        assert glow.start() is False
        assert glow.join(5.0)
        assert transport.close_count == 1
        assert glow.state == ControllerState.STOPPED


# =================================================================
# Ordering
# =================================================================


@pytest.mark.unit
class TestControllerWrites:
    """Test requests become bus writes in submission order."""

    def test_set_power(self, controller, transport):
        """Test a power request writes the payload then latches."""
        controller.set_power(list(range(18)))
        controller.wait()

        assert after_start(transport) == [power(range(18)), LATCH]

    def test_set_enable(self, controller, transport):
        """Test an enable request writes the mask then latches."""
        controller.set_enable([True] * 6 + [False] * 12)
        controller.wait()

        assert after_start(transport) == [enable([0x3F, 0x00, 0x00]), LATCH]

    def test_requests_in_submission_order(self, controller, transport):
        """Test several requests are written in the order they were made."""
        controller.set_power([1] * 18)
        controller.set_enable(b"\x00\x3f\x00")
        controller.set_power(bytes([2] * 18))
        controller.wait()

        assert after_start(transport) == [
            power([1] * 18), LATCH,
            enable([0x00, 0x3F, 0x00]), LATCH,
            power([2] * 18), LATCH,
        ]

    def test_combined_has_single_latch(self, controller, transport):
        """Test enable and power are written back-to-back with no latch between."""
        controller.set_enable_and_power([(True, 5)] * 18)
        controller.wait()

        assert after_start(transport) == [
            enable([0x3F, 0x3F, 0x3F]),
            power([5] * 18),
            LATCH,
        ]

    def test_map_power(self, controller, transport):
        """Test per-LED projection in wire order."""
        controller.map_power(lambda led: led.arm * 10 + led.ring)
        controller.wait()

        assert after_start(transport)[0] == power(
            [36, 35, 34, 33, 12, 13, 16, 15, 14, 11, 21, 22, 31, 23, 32, 24, 25, 26]
        )

    def test_map_enable(self, controller, transport):
        """Test enabling one arm by projection."""
        controller.map_enable(lambda led: led.arm == 1)
        controller.wait()

        # Arm 1 sits at register indices 5-10
        assert after_start(transport)[0] == enable([0b000011, 0b111100, 0b000000])

    def test_map_enable_and_power(self, controller, transport):
        """Test combined projection."""
        controller.map_enable_and_power(lambda led: (led.ring == 1, 255 if led.ring == 1 else 0))
        controller.wait()

        written = after_start(transport)
        assert len(written) == 3
        assert written[1][10] == 255  # register 10 is arm 1, ring 1
        assert written[2] == LATCH

    def test_encoding_error_raises_on_caller(self, controller, transport):
        """Test malformed input raises immediately and writes nothing."""
        with pytest.raises(EncodingError):
            controller.set_power([255] * 17)
        controller.wait()

        assert after_start(transport) == []
        assert controller.is_running

    def test_concurrent_callers(self, controller, transport):
        """Test requests from several threads are never interleaved mid-request."""

        def worker(level):
            for _ in range(20):
                controller.set_power([level] * 18)

        threads = [threading.Thread(target=worker, args=(level,)) for level in range(1, 5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        controller.wait()

        written = after_start(transport)
        assert len(written) == 160
        for payload, latch in zip(written[::2], written[1::2]):
            assert payload[0] == 0x01
            assert len(set(payload[1:])) == 1
            assert latch == LATCH


# =================================================================
# Stop / kill
# =================================================================


@pytest.mark.unit
class TestControllerStop:
    """Test orderly and abnormal shutdown."""

    def test_stop_disables_and_closes_once(self, controller, transport):
        """Test stop drains, turns LEDs off, latches and closes the bus once."""
        controller.set_power([9] * 18)
        controller.stop()

        assert after_start(transport) == [power([9] * 18), LATCH] + STOP_WRITES
        assert transport.close_count == 1
        assert controller.state == ControllerState.STOPPED
        assert not controller.is_running

    def test_requests_after_stop(self, controller, transport, caplog):
        """Test requests after stop are dropped and blocking calls raise."""
        controller.stop()
        count = len(transport.writes)

        with caplog.at_level(logging.WARNING):
            controller.set_power([1] * 18)
        assert "not running" in caplog.text

        with pytest.raises(ControllerNotRunningError):
            controller.wait()
        with pytest.raises(ControllerNotRunningError):
            controller.stop()
        assert len(transport.writes) == count

    def test_close_failure_is_logged(self, make_transport, caplog):
        """Test a failing close does not stop the controller from stopping."""
        transport = make_transport(fail_on_close=True)
        glow = PiGlowController(transport_factory=lambda bus: transport)
        assert glow.start()

        with caplog.at_level(logging.ERROR):
            glow.stop()

        assert glow.state == ControllerState.STOPPED
        assert transport.close_count == 1
        assert "error closing I2C bus" in caplog.text

    def test_kill_skips_disable(self, controller, transport):
        """Test kill closes the bus without writing the turn-off sequence."""
        controller.wait()
        controller.kill()

        assert controller.join(5.0)
        assert transport.data == START_WRITES
        assert transport.close_count == 1
        assert controller.state == ControllerState.STOPPED

    def test_kill_fails_pending_wait(self, controller, transport):
        """Test a caller blocked in wait sees the kill as a crash."""
        transport.write_gate = threading.Event()
        controller.set_power([3] * 18)

        def kill_then_release():
            controller.kill()
            transport.write_gate.set()

        timer = threading.Timer(0.1, kill_then_release)
        timer.start()

        with pytest.raises(ControllerCrashedError):
            controller.wait(timeout=5.0)
        timer.join()

        assert controller.join(5.0)
        assert STOP_WRITES[0] not in transport.data
        assert transport.close_count == 1

    def test_context_manager(self, transport, transport_factory):
        """Test the with-block starts and stops the controller."""
        with PiGlowController(transport_factory=transport_factory) as glow:
            assert glow.is_running
            glow.set_power([1] * 18)

        assert glow.state == ControllerState.STOPPED
        assert transport.data[-2:] == STOP_WRITES
        assert transport.close_count == 1

    def test_exit_hook_kills_running_controllers(self, transport, transport_factory):
        """Test the interpreter exit hook releases buses still held."""
        glow = PiGlowController(transport_factory=transport_factory)
        assert glow.start()

        _kill_live_controllers()

        assert glow.state == ControllerState.STOPPED
        assert transport.close_count == 1
        assert transport.data == START_WRITES


# =================================================================
# Failures and timeouts
# =================================================================


@pytest.mark.unit
class TestControllerFailures:
    """Test crash and timeout behaviour."""

    def test_write_failure_crashes_controller(self, make_transport):
        """Test a failed write fails the pending wait and closes the bus once."""
        transport = make_transport(fail_on_write=len(START_WRITES) + 1)
        transport.write_gate = threading.Event()
        transport.write_gate.set()
        glow = PiGlowController(transport_factory=lambda bus: transport)
        assert glow.start()

        transport.write_gate.clear()
        glow.set_power([1] * 18)
        timer = threading.Timer(0.1, transport.write_gate.set)
        timer.start()

        with pytest.raises(ControllerCrashedError) as exc_info:
            glow.wait(timeout=5.0)
        timer.join()

        assert isinstance(exc_info.value.cause, OSError)
        assert glow.join(5.0)
        assert isinstance(glow.error, OSError)
        assert transport.close_count == 1
        assert glow.state == ControllerState.STOPPED

    @pytest.mark.parametrize("failing_write", [1, 2], ids=["disable", "latch"])
    def test_stop_write_failure_reports_crash(self, make_transport, failing_write):
        """Test stop raises the crash when the turn-off writes fail."""
        transport = make_transport(fail_on_write=len(START_WRITES) + failing_write)
        glow = PiGlowController(transport_factory=lambda bus: transport)
        assert glow.start()

        with pytest.raises(ControllerCrashedError) as exc_info:
            glow.stop(timeout=5.0)

        assert isinstance(exc_info.value.cause, OSError)
        assert glow.join(5.0)
        assert transport.close_count == 1
        assert glow.state == ControllerState.STOPPED

    def test_blocking_calls_after_kill_report_crash(self, controller, transport):
        """Test wait and stop raise the crash while a kill is still in progress."""
        transport.write_gate = threading.Event()
        transport.write_started.clear()
        controller.set_power([6] * 18)
        assert transport.write_started.wait(5.0)
        controller.kill()

        assert controller.state == ControllerState.RUNNING
        with pytest.raises(ControllerCrashedError):
            controller.wait(timeout=1.0)
        with pytest.raises(ControllerCrashedError):
            controller.stop(timeout=1.0)

        transport.write_gate.set()
        assert controller.join(5.0)
        with pytest.raises(ControllerNotRunningError):
            controller.wait()

    def test_wait_timeout(self, controller, transport):
        """Test wait times out while the worker is busy and keeps processing."""
        transport.write_gate = threading.Event()
        controller.set_power([4] * 18)

        with pytest.raises(ControllerTimeoutError) as exc_info:
            controller.wait(timeout=0.05)
        assert exc_info.value.operation == "wait"
        assert isinstance(exc_info.value, TimeoutError)

        transport.write_gate.set()
        controller.wait(timeout=5.0)
        assert after_start(transport) == [power([4] * 18), LATCH]

    def test_stop_timeout(self, controller, transport):
        """Test stop times out while earlier requests are still being written."""
        transport.write_gate = threading.Event()
        controller.set_power([4] * 18)

        with pytest.raises(ControllerTimeoutError):
            controller.stop(timeout=0.05)

        transport.write_gate.set()
        assert controller.join(5.0)
        assert transport.data[-2:] == STOP_WRITES


# =================================================================
# Registration
# =================================================================


@pytest.mark.unit
class TestControllerRegistration:
    """Test named controllers and the registry."""

    def test_registered_while_running(self, registry, transport_factory):
        """Test a named controller is reachable until it stops."""
        glow = PiGlowController(name="board", registry=registry, transport_factory=transport_factory)
        assert glow.start()

        assert registry.get("board") is glow
        assert glow.name == "board"

        glow.stop()
        assert "board" not in registry

    def test_duplicate_name_rejected(self, registry, transport_factory):
        """Test a second live controller cannot take the same name."""
        first = PiGlowController(name="board", registry=registry, transport_factory=transport_factory)
        assert first.start()

        second = PiGlowController(name="board", registry=registry, transport_factory=transport_factory)
        with pytest.raises(ControllerAlreadyRegisteredError):
            second.start()

        assert registry.get("board") is first
        assert transport_factory.opened == [1]
        first.stop()

    def test_name_reusable_after_stop(self, registry, transport_factory):
        """Test a name is free again once its controller has stopped."""
        first = PiGlowController(name="board", registry=registry, transport_factory=transport_factory)
        assert first.start()
        first.stop()

        second = PiGlowController(name="board", registry=registry, transport_factory=transport_factory)
        assert second.start()
        assert registry.get("board") is second
        second.stop()
