"""PiGlow core: the serialized controller, its bus monitor and the instance registry."""

from .controller import DEFAULT_TIMEOUT, ControllerState, PiGlowController
from .monitor import BusReleaseMonitor
from .registry import ControllerRegistry

__all__ = [
    "DEFAULT_TIMEOUT",
    "BusReleaseMonitor",
    "ControllerRegistry",
    "ControllerState",
    "PiGlowController",
]
