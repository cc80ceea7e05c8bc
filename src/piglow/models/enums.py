"""Enumerations for the PiGlow board."""

from enum import Enum


class Colour(str, Enum):
    """LED colours, one per ring."""

    WHITE = "white"  # Ring 1 (centre)
    BLUE = "blue"
    GREEN = "green"
    AMBER = "amber"
    ORANGE = "orange"
    RED = "red"  # Ring 6 (outer edge)

    @classmethod
    def for_ring(cls, ring: int) -> "Colour":
        """Get the colour of the LEDs on a ring (1-6)."""
        if not 1 <= ring <= len(RING_COLOURS):
            raise ValueError(f"Invalid ring: {ring}. Must be 1-{len(RING_COLOURS)}.")
        return RING_COLOURS[ring - 1]


RING_COLOURS = (
    Colour.WHITE,
    Colour.BLUE,
    Colour.GREEN,
    Colour.AMBER,
    Colour.ORANGE,
    Colour.RED,
)
