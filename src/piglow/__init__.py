"""PiGlow: ordered, thread-safe control of the Pimoroni PiGlow LED board."""

__version__ = "0.1.0"

# Core
from .core import ControllerRegistry, ControllerState, PiGlowController

# Encoding helpers
from .devices import map_leds
from .models import LED, LEDS, Colour
from .utils import gamma_correct

__all__ = [
    "LED",
    "LEDS",
    "Colour",
    "ControllerRegistry",
    "ControllerState",
    "PiGlowController",
    "gamma_correct",
    "map_leds",
]
