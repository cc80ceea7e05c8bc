"""PiGlow controller: serialized command execution on a worker thread.

Every request a caller makes is encoded on the caller's thread and then
pushed onto a FIFO queue. A single worker thread owns the I2C bus and
drains that queue, so bus writes happen strictly in submission order and
no two threads ever touch the handle at once.

    caller threads                     worker thread             monitor thread
    ──────────────                     ─────────────             ──────────────
    set_power([...]) ─┐
    set_enable(...)  ─┼─► queue ─────► write payload(s)
    wait()           ─┤                write latch
    stop()           ─┘                ...
                                       stop: disable, latch ──►  join worker
                                       exit                      close bus once
                                                                 STOPPED, unregister
                                                                 reply to stop()

``wait()`` and ``stop()`` are barriers: they enqueue a reply object and
block until the worker reaches it, so returning from either means every
earlier request has been written. ``stop()`` additionally blocks until the
bus has been released.

A failed bus write is fatal: the worker records the error, fails every
pending ``wait``/``stop`` with ``ControllerCrashedError``, and exits. The
``BusReleaseMonitor`` closes the bus whatever the exit cause.
"""

import atexit
import logging
import queue
import threading
import weakref
from collections.abc import Callable
from enum import Enum
from typing import Any, Optional

from piglow.core.monitor import BusReleaseMonitor
from piglow.core.registry import ControllerRegistry
from piglow.devices.codec import (
    EnableAndPowerValues,
    EnableValues,
    PowerValues,
    map_leds,
    to_enable_and_power,
    to_enable_bytes,
    to_power_bytes,
)
from piglow.devices.protocol import ALL_DISABLED, ALL_ENABLED, BUS_ADDRESS, DEFAULT_BUS, PiGlowCommands
from piglow.devices.transport import I2CTransport, SMBusTransport, TransportFactory
from piglow.exceptions import (
    ControllerAlreadyRegisteredError,
    ControllerCrashedError,
    ControllerNotRunningError,
    ControllerTimeoutError,
    PiGlowError,
)
from piglow.models.led import LED

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0
START_TIMEOUT = 5.0
EXIT_JOIN_TIMEOUT = 1.0


class ControllerState(str, Enum):
    """Lifecycle state of a controller."""

    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class _Reply:
    """One-shot reply slot for a blocking request."""

    def __init__(self):
        self._event = threading.Event()
        self.error: Optional[BaseException] = None

    def set(self, error: Optional[BaseException] = None) -> None:
        self.error = error
        self._event.set()

    def wait(self, timeout: Optional[float]) -> bool:
        return self._event.wait(timeout)


_live_controllers: "weakref.WeakSet[PiGlowController]" = weakref.WeakSet()
_live_lock = threading.Lock()


def _kill_live_controllers() -> None:
    """Kill controllers still running at interpreter exit so their buses get closed."""
    with _live_lock:
        controllers = list(_live_controllers)

    for controller in controllers:
        controller.kill()
    for controller in controllers:
        controller.join(EXIT_JOIN_TIMEOUT)


atexit.register(_kill_live_controllers)


class PiGlowController:
    """
    Serializes PiGlow commands onto a dedicated worker thread.

    Example:
        >>> with PiGlowController(bus=1) as glow:
        ...     glow.set_power([gamma_correct(0.5)] * 18)
        ...     glow.wait()
    """

    def __init__(
        self,
        bus: int = DEFAULT_BUS,
        name: Optional[str] = None,
        registry: Optional[ControllerRegistry] = None,
        address: int = BUS_ADDRESS,
        enable_on_start: bool = True,
        transport_factory: TransportFactory = SMBusTransport.open,
    ):
        """
        Initialize the controller (does not open the bus).

        Args:
            bus: I2C bus number
            name: Name to register under (requires ``registry``)
            registry: Registry to register with while running
            address: Device address on the bus
            enable_on_start: Enable all LEDs as part of startup
            transport_factory: Opens a bus by number
        """
        self._bus = bus
        self._name = name
        self._registry = registry
        self.address = address
        self.enable_on_start = enable_on_start
        self._transport_factory = transport_factory

        self._label = f"PiGlow '{name}'" if name else f"PiGlow (bus {bus})"
        self._state = ControllerState.STOPPED
        self._started = False
        self._error: Optional[BaseException] = None

        self._lock = threading.Lock()
        self._queue: queue.Queue[tuple[str, Any]] = queue.Queue()
        self._kill_requested = threading.Event()
        self._ready = threading.Event()
        self._released = threading.Event()
        self._stop_replies: list[_Reply] = []

        self._transport: Optional[I2CTransport] = None
        self._worker: Optional[threading.Thread] = None
        self._monitor: Optional[BusReleaseMonitor] = None

    # =================================================================
    # Properties
    # =================================================================

    @property
    def name(self) -> Optional[str]:
        """Registered name, if any."""
        return self._name

    @property
    def bus(self) -> int:
        """I2C bus number."""
        return self._bus

    @property
    def state(self) -> ControllerState:
        """Current lifecycle state."""
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        """Check if the controller accepts requests."""
        return self.state == ControllerState.RUNNING

    @property
    def error(self) -> Optional[BaseException]:
        """Error that terminated or prevented the controller, if any."""
        return self._error

    # =================================================================
    # Lifecycle
    # =================================================================

    def start(self) -> bool:
        """
        Open the bus and start the worker thread.

        Returns:
            True if the controller is running. False if the bus could not be
            opened or the device failed to initialize; the cause is logged and
            stored in ``error``.

        Raises:
            ControllerAlreadyRegisteredError: If another controller already
                holds this controller's name in the registry
        """
        with self._lock:
            if self._started:
                logger.warning(f"{self._label} already started")
                return self._state == ControllerState.RUNNING
            self._started = True
            self._state = ControllerState.STARTING

        if self._registry is not None and self._name is not None:
            if self._name in self._registry:
                self._set_state(ControllerState.STOPPED)
                self._released.set()
                raise ControllerAlreadyRegisteredError(self._name)

        try:
            self._transport = self._transport_factory(self._bus)
        except PiGlowError as e:
            logger.error(f"{self._label}: {e.user_message}")
            return self._fail_start(e)
        except Exception as e:
            logger.error(f"{self._label}: unknown error opening I2C bus {self._bus}: {e}")
            return self._fail_start(e)

        self._worker = threading.Thread(
            target=self._run, name=f"piglow-{self._name or self._bus}", daemon=True
        )
        self._monitor = BusReleaseMonitor(
            self._worker,
            self._transport,
            on_released=self._on_bus_released,
            name=f"piglow-{self._name or self._bus}",
        )
        with _live_lock:
            _live_controllers.add(self)

        self._worker.start()
        self._monitor.start()
        self._ready.wait()

        if self.state != ControllerState.RUNNING or self._kill_requested.is_set():
            self.join(START_TIMEOUT)
            return False

        if self._registry is not None and self._name is not None:
            try:
                self._registry.register(self._name, self)
            except ControllerAlreadyRegisteredError as e:
                logger.error(f"{self._label}: {e.user_message}")
                self._error = e
                self.kill()
                self.join(START_TIMEOUT)
                return False

        logger.info(f"{self._label} started on /dev/i2c-{self._bus}")
        return True

    def stop(self, timeout: Optional[float] = DEFAULT_TIMEOUT) -> None:
        """
        Drain the queue, turn all LEDs off and release the bus.

        Returns once the bus is closed.

        Args:
            timeout: Seconds to wait (None waits forever)

        Raises:
            ControllerNotRunningError: If the controller is not running
            ControllerTimeoutError: If the stop did not complete in time
            ControllerCrashedError: If the controller terminated abnormally first
        """
        if self.state == ControllerState.STOPPING:
            if not self._released.wait(timeout):
                raise ControllerTimeoutError("stop", timeout, self._name)
            if self._error is not None or self._kill_requested.is_set():
                raise ControllerCrashedError(self._name, self._error)
            return

        reply = _Reply()
        if not self._enqueue("stop", reply):
            raise self._refusal("stop")
        self._await(reply, "stop", timeout)

    def kill(self) -> None:
        """
        Terminate the worker without turning the LEDs off.

        Pending requests are abandoned and pending ``wait``/``stop`` callers
        get ``ControllerCrashedError``. The bus is still closed.
        """
        with self._lock:
            if self._state == ControllerState.STOPPED:
                return
            self._kill_requested.set()
        self._queue.put(("kill", None))
        logger.info(f"{self._label} killed")

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until the bus has been released.

        Returns:
            True if the controller is fully stopped
        """
        if not self._started:
            return True
        return self._released.wait(timeout)

    # =================================================================
    # Requests
    # =================================================================

    def set_enable(self, values: EnableValues) -> None:
        """
        Set which LEDs are enabled.

        Args:
            values: 3 raw bytes, or 18 booleans in wire order

        Raises:
            EncodingError: If the values cannot be encoded
        """
        self._enqueue("set_enable", to_enable_bytes(values))

    def set_power(self, values: PowerValues) -> None:
        """
        Set LED brightness.

        Args:
            values: 18 raw bytes, or 18 integers (0-255) in wire order

        Raises:
            EncodingError: If the values cannot be encoded
        """
        self._enqueue("set_power", to_power_bytes(values))

    def set_enable_and_power(self, values: EnableAndPowerValues) -> None:
        """
        Set enable flags and brightness, latched together.

        Args:
            values: 18 ``(enabled, power)`` pairs or an ``(enable, power)`` tuple

        Raises:
            EncodingError: If the values cannot be encoded
        """
        self._enqueue("set_enable_and_power", to_enable_and_power(values))

    def map_enable(self, fn: Callable[[LED], bool]) -> None:
        """Set enable flags by calling ``fn`` for every LED."""
        self.set_enable(map_leds(fn))

    def map_power(self, fn: Callable[[LED], int]) -> None:
        """Set brightness by calling ``fn`` for every LED."""
        self.set_power(map_leds(fn))

    def map_enable_and_power(self, fn: Callable[[LED], tuple[bool, int]]) -> None:
        """Set enable flags and brightness by calling ``fn`` for every LED."""
        self.set_enable_and_power(map_leds(fn))

    def wait(self, timeout: Optional[float] = DEFAULT_TIMEOUT) -> None:
        """
        Block until every earlier request has been written.

        Args:
            timeout: Seconds to wait (None waits forever)

        Raises:
            ControllerNotRunningError: If the controller is not running
            ControllerTimeoutError: If the queue was not drained in time
            ControllerCrashedError: If the controller terminated first
        """
        reply = _Reply()
        if not self._enqueue("wait", reply):
            raise self._refusal("wait")
        self._await(reply, "wait", timeout)

    # =================================================================
    # Internals
    # =================================================================

    def _enqueue(self, action: str, payload: Any) -> bool:
        with self._lock:
            accepting = self._state in (ControllerState.STARTING, ControllerState.RUNNING)
            if accepting and not self._kill_requested.is_set():
                self._queue.put((action, payload))
                return True

        if action not in ("wait", "stop"):
            logger.warning(f"{self._label} is not running; dropped {action} request")
        return False

    def _refusal(self, operation: str) -> PiGlowError:
        """Error for a blocking request the queue would not accept."""
        if self._kill_requested.is_set() and not self._released.is_set():
            return ControllerCrashedError(self._name, self._error)
        return ControllerNotRunningError(self._name, operation)

    def _await(self, reply: _Reply, operation: str, timeout: Optional[float]) -> None:
        if not reply.wait(timeout):
            raise ControllerTimeoutError(operation, timeout, self._name)
        if reply.error is not None:
            raise reply.error

    def _set_state(self, state: ControllerState) -> None:
        with self._lock:
            self._state = state

    def _fail_start(self, error: BaseException) -> bool:
        self._error = error
        self._set_state(ControllerState.STOPPED)
        self._released.set()
        return False

    def _write(self, data: bytes) -> None:
        self._transport.write(self.address, data)

    def _run(self) -> None:
        """Worker thread: initialize the device, then process the queue."""
        try:
            self._write(PiGlowCommands.enable_output())
            if self.enable_on_start:
                self._write(PiGlowCommands.enable_leds(ALL_ENABLED))
                self._write(PiGlowCommands.update())
            self._set_state(ControllerState.RUNNING)
            self._ready.set()

            leftover = self._process_queue()
        except Exception as e:
            leftover = None
            self._error = e
            logger.error(f"{self._label} crashed: {e}")
        finally:
            self._ready.set()

        self._shutdown_queue(leftover)

    def _process_queue(self) -> Optional[tuple[str, Any]]:
        """Write queued requests until a stop or kill. Returns an unprocessed request, if any."""
        while True:
            action, payload = self._queue.get()

            if self._kill_requested.is_set():
                return action, payload

            if action == "set_enable":
                self._write(PiGlowCommands.enable_leds(payload))
                self._write(PiGlowCommands.update())
            elif action == "set_power":
                self._write(PiGlowCommands.set_pwm_values(payload))
                self._write(PiGlowCommands.update())
            elif action == "set_enable_and_power":
                enable, power = payload
                self._write(PiGlowCommands.enable_leds(enable))
                self._write(PiGlowCommands.set_pwm_values(power))
                self._write(PiGlowCommands.update())
            elif action == "wait":
                payload.set()
            elif action == "stop":
                # Answered on release, even if the disable writes below fail
                with self._lock:
                    self._state = ControllerState.STOPPING
                    self._stop_replies.append(payload)
                logger.info(f"{self._label} stopping")
                self._write(PiGlowCommands.enable_leds(ALL_DISABLED))
                self._write(PiGlowCommands.update())
                return None

    def _shutdown_queue(self, leftover: Optional[tuple[str, Any]] = None) -> None:
        """Close the queue to new requests and settle everything still in it."""
        with self._lock:
            self._state = ControllerState.STOPPING

        crashed = self._error is not None or self._kill_requested.is_set()

        pending = [leftover] if leftover is not None else []
        while True:
            try:
                pending.append(self._queue.get_nowait())
            except queue.Empty:
                break

        discarded = 0
        for action, payload in pending:
            if action == "wait":
                if crashed:
                    payload.set(ControllerCrashedError(self._name, self._error))
                else:
                    payload.set(ControllerNotRunningError(self._name, "wait"))
            elif action == "stop":
                if crashed:
                    payload.set(ControllerCrashedError(self._name, self._error))
                else:
                    with self._lock:
                        self._stop_replies.append(payload)
            elif action != "kill":
                discarded += 1

        if discarded:
            logger.warning(f"{self._label}: discarded {discarded} pending request(s)")

    def _on_bus_released(self) -> None:
        """Monitor callback: the worker has exited and the bus is closed."""
        with self._lock:
            self._state = ControllerState.STOPPED
            replies = self._stop_replies
            self._stop_replies = []

        if self._registry is not None and self._name is not None:
            self._registry.unregister(self._name, self)
        with _live_lock:
            _live_controllers.discard(self)

        self._released.set()
        logger.info(f"{self._label} stopped")

        error = ControllerCrashedError(self._name, self._error) if self._error is not None else None
        for reply in replies:
            reply.set(error)

    # =================================================================
    # Context manager
    # =================================================================

    def __enter__(self) -> "PiGlowController":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.is_running:
            self.stop()

    def __repr__(self) -> str:
        return f"PiGlowController(bus={self._bus}, name={self._name!r}, state={self.state.value})"
