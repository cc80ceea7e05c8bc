"""Bus release watcher for controller worker threads."""

import logging
import threading
from typing import Callable, Optional

from piglow.devices.transport import I2CTransport

logger = logging.getLogger(__name__)


class BusReleaseMonitor:
    """
    Closes a controller's bus once its worker thread has exited.

    The monitor runs on its own thread and does nothing but join the worker,
    so it sees every kind of exit: a clean stop, a crash from a failed write,
    or a kill. The bus is closed exactly once, and only after the worker is
    gone, so the handle is never used by two threads at the same time.

    A failing close is logged and otherwise ignored; ``on_released`` is
    still called so the owner can finish its own teardown.
    """

    def __init__(
        self,
        worker: threading.Thread,
        transport: I2CTransport,
        on_released: Optional[Callable[[], None]] = None,
        name: str = "piglow",
    ):
        """
        Initialize the monitor.

        Args:
            worker: The thread that owns the bus
            transport: Bus handle to close
            on_released: Called after the close attempt (on the monitor thread)
            name: Label used for the monitor thread and log messages
        """
        self._worker = worker
        self._transport = transport
        self._on_released = on_released
        self._name = name
        self._lock = threading.Lock()
        self._released = False
        self._thread = threading.Thread(
            target=self._watch, name=f"{name}-monitor", daemon=True
        )

    def start(self) -> None:
        """Start watching the worker thread."""
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the monitor to finish.

        Returns:
            True if the monitor has exited
        """
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def released(self) -> bool:
        """Check if the bus has been released."""
        with self._lock:
            return self._released

    def _watch(self) -> None:
        self._worker.join()
        logger.debug(f"{self._name}: worker exited, releasing I2C bus")
        self.release()

    def release(self) -> bool:
        """
        Close the bus if it has not been closed yet.

        Normally called by the monitor thread once the worker has exited.

        Returns:
            True if this call closed the bus, False if it was already released
        """
        with self._lock:
            if self._released:
                return False
            self._released = True

        try:
            self._transport.close()
        except Exception as e:
            logger.error(f"{self._name}: error closing I2C bus: {e}")

        if self._on_released:
            try:
                self._on_released()
            except Exception as e:
                logger.error(f"{self._name}: error in bus release callback: {e}")
        return True
