"""Explicit registry for addressing controllers by name."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from piglow.exceptions import ControllerAlreadyRegisteredError, ControllerNotFoundError

if TYPE_CHECKING:
    from .controller import PiGlowController

logger = logging.getLogger(__name__)


class ControllerRegistry:
    """
    Thread-safe mapping of names to live controllers.

    A registry is created by the caller and handed to each controller that
    should be reachable by name, so several boards (or several independent
    applications in one process) never share hidden global state.

    Controllers register themselves when they start and unregister once
    their bus has been released.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._controllers: dict[str, PiGlowController] = {}

    def register(self, name: str, controller: PiGlowController) -> None:
        """
        Register a controller under a name.

        Raises:
            ControllerAlreadyRegisteredError: If another controller holds the name
        """
        with self._lock:
            existing = self._controllers.get(name)
            if existing is not None and existing is not controller:
                raise ControllerAlreadyRegisteredError(name)
            self._controllers[name] = controller
        logger.debug(f"Registered PiGlow controller '{name}'")

    def unregister(self, name: str, controller: PiGlowController | None = None) -> bool:
        """
        Remove a name from the registry.

        Args:
            name: Registered name
            controller: If given, only unregister when the name maps to this controller

        Returns:
            True if an entry was removed
        """
        with self._lock:
            existing = self._controllers.get(name)
            if existing is None or (controller is not None and existing is not controller):
                return False
            del self._controllers[name]
        logger.debug(f"Unregistered PiGlow controller '{name}'")
        return True

    def get(self, name: str) -> PiGlowController:
        """
        Look up a controller by name.

        Raises:
            ControllerNotFoundError: If no controller is registered under the name
        """
        with self._lock:
            try:
                return self._controllers[name]
            except KeyError:
                raise ControllerNotFoundError(name) from None

    def names(self) -> list[str]:
        """Get all registered names."""
        with self._lock:
            return sorted(self._controllers)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._controllers

    def __len__(self) -> int:
        with self._lock:
            return len(self._controllers)
