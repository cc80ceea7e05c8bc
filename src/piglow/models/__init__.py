"""Data models for the PiGlow board."""

from .config import DEFAULT_CONFIG_PATH, PiGlowConfig
from .enums import Colour
from .led import LED, LED_COUNT, LEDS, led_by_index, leds

__all__ = [
    "DEFAULT_CONFIG_PATH",
    # Enums
    "Colour",
    # Models
    "LED",
    "LEDS",
    "LED_COUNT",
    "PiGlowConfig",
    "led_by_index",
    "leds",
]
