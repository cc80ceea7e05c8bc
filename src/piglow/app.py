"""
Default-instance facade.

Most programs drive a single PiGlow board. ``PiGlowApplication`` loads the
saved configuration, owns a ``ControllerRegistry`` and starts one named
controller with the configured bus settings, so scripts can simply do::

    with PiGlowApplication() as app:
        app.controller.map_power(lambda led: gamma_correct(led.ring / 6))
        app.controller.wait()

Everything here is built on the public core API; nothing in the core
depends on it.
"""

import logging
from pathlib import Path
from typing import Optional

from piglow.core import ControllerRegistry, PiGlowController
from piglow.devices.transport import SMBusTransport, TransportFactory
from piglow.models import PiGlowConfig

logger = logging.getLogger(__name__)


class PiGlowApplication:
    """
    Owns the default controller and its registry.

    Architecture:
        PiGlowApplication (this class)
        ├── config: PiGlowConfig
        ├── registry: ControllerRegistry
        └── controller: PiGlowController (registered as config.name)
    """

    def __init__(
        self,
        config: Optional[PiGlowConfig] = None,
        config_path: Optional[Path] = None,
        registry: Optional[ControllerRegistry] = None,
        transport_factory: TransportFactory = SMBusTransport.open,
    ):
        """
        Initialize the application (does not touch the bus).

        Args:
            config: Configuration to use. Loaded from ``config_path`` (or the
                default location) when omitted.
            config_path: Config file to load when ``config`` is not given
            registry: Registry to register the controller in (new one if omitted)
            transport_factory: Opens a bus by number
        """
        self.config = config if config is not None else PiGlowConfig.load_or_default(config_path)
        self.registry = registry if registry is not None else ControllerRegistry()
        self._transport_factory = transport_factory
        self._controller: Optional[PiGlowController] = None

    @property
    def controller(self) -> Optional[PiGlowController]:
        """The default controller, once started."""
        return self._controller

    @property
    def is_running(self) -> bool:
        """Check if the default controller is running."""
        return self._controller is not None and self._controller.is_running

    def start(self) -> bool:
        """
        Start the default controller.

        Returns:
            True if the controller is running
        """
        if self.is_running:
            logger.warning("PiGlow application already started")
            return True

        self._controller = PiGlowController(
            bus=self.config.bus,
            name=self.config.name,
            registry=self.registry,
            address=self.config.address,
            enable_on_start=self.config.enable_on_start,
            transport_factory=self._transport_factory,
        )

        if not self._controller.start():
            logger.error(f"Could not start PiGlow on bus {self.config.bus}")
            return False
        return True

    def shutdown(self) -> None:
        """Turn the LEDs off and release the bus."""
        if self.is_running:
            logger.info("Shutting down PiGlow application")
            self._controller.stop(self.config.default_timeout)

    def __enter__(self) -> "PiGlowApplication":
        if self.config.auto_start:
            self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
