"""CLI commands for piglow."""

from .config import config
from .leds import leds, off, set_leds

__all__ = ["config", "leds", "off", "set_leds"]
