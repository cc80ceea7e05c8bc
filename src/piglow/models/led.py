"""LED model and the fixed PiGlow topology."""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import Colour

# Constants defined at module level for use in validators
LED_COUNT = 18
ARM_COUNT = 3
RING_COUNT = 6


class LED(BaseModel):
    """A single LED on the PiGlow.

    ``index`` is the LED's register position on the bus, and sorting by it
    gives the wire order used by every packed payload. The model is frozen so
    LEDs are hashable and can be used in sets, e.g. ``led in chosen``.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=1, le=LED_COUNT, description="Bus register position (1-18)")
    arm: int = Field(ge=1, le=ARM_COUNT, description="Arm (1=top, 2=right, 3=left)")
    ring: int = Field(ge=1, le=RING_COUNT, description="Ring, from centre (1) to edge (6)")
    colour: Colour = Field(description="LED colour (fixed per ring)")

    @model_validator(mode="after")
    def validate_colour(self) -> "LED":
        """Ensure the colour matches the ring."""
        if self.colour != Colour.for_ring(self.ring):
            raise ValueError(
                f"Ring {self.ring} LEDs are {Colour.for_ring(self.ring).value}, not {self.colour.value}"
            )
        return self


def _led(index: int, arm: int, ring: int) -> LED:
    return LED(index=index, arm=arm, ring=ring, colour=Colour.for_ring(ring))


# Register index for each (arm, ring), listed arm by arm from the centre out.
_LEDS_BY_ARM = [
    # Top arm
    _led(0x0A, 1, 1),
    _led(0x05, 1, 2),
    _led(0x06, 1, 3),
    _led(0x09, 1, 4),
    _led(0x08, 1, 5),
    _led(0x07, 1, 6),
    # Right arm
    _led(0x0B, 2, 1),
    _led(0x0C, 2, 2),
    _led(0x0E, 2, 3),
    _led(0x10, 2, 4),
    _led(0x11, 2, 5),
    _led(0x12, 2, 6),
    # Left arm
    _led(0x0D, 3, 1),
    _led(0x0F, 3, 2),
    _led(0x04, 3, 3),
    _led(0x03, 3, 4),
    _led(0x02, 3, 5),
    _led(0x01, 3, 6),
]

LEDS: tuple[LED, ...] = tuple(sorted(_LEDS_BY_ARM, key=lambda led: led.index))

if [led.index for led in LEDS] != list(range(1, LED_COUNT + 1)):
    raise RuntimeError("PiGlow LED table must cover register indices 1-18 exactly once")


def leds() -> list[LED]:
    """Get all 18 LEDs in wire order (ascending register index)."""
    return list(LEDS)


def led_by_index(index: int) -> LED:
    """Get the LED at a register index (1-18)."""
    if not 1 <= index <= LED_COUNT:
        raise ValueError(f"Invalid LED index: {index}. Must be 1-{LED_COUNT}.")
    return LEDS[index - 1]
