"""Conversion between LED values and PiGlow payload bytes.

Three levels of input are accepted by the controller, and this module
turns each of them into the exact bytes the driver expects:

- raw: ``bytes`` of the right length, passed through unchanged
- list: one value per LED in wire order (18 booleans or 18 integers)
- mapped: a function applied to every LED (see ``map_leds``)

Enable payloads pack 6 LEDs per byte, most significant bit first, so
``[True, False, True, False, True, False]`` becomes ``0b101010``.
"""

from collections.abc import Callable, Sequence
from numbers import Integral
from typing import Any, TypeVar, Union

from piglow.exceptions import EncodingError
from piglow.models.led import LED, LED_COUNT, LEDS

ENABLE_CHUNK_SIZE = 6
ENABLE_BYTES = LED_COUNT // ENABLE_CHUNK_SIZE
MAX_POWER = 255

RAW_TYPES = (bytes, bytearray, memoryview)

EnableValues = Union[bytes, bytearray, Sequence[bool]]
PowerValues = Union[bytes, bytearray, Sequence[int]]
EnableAndPowerValues = Union[
    Sequence[tuple[bool, int]],
    tuple[EnableValues, PowerValues],
]

T = TypeVar("T")


def to_enable_bytes(values: EnableValues) -> bytes:
    """
    Convert enable flags to the 3-byte enable payload.

    Args:
        values: 3 raw bytes, or 18 booleans in wire order

    Returns:
        3-byte enable payload

    Raises:
        EncodingError: If the length or element types are wrong
    """
    if isinstance(values, RAW_TYPES):
        data = bytes(values)
        if len(data) != ENABLE_BYTES:
            raise EncodingError(
                "enable", f"expected {ENABLE_BYTES} bytes, got {len(data)}", data
            )
        return data

    flags = _as_list("enable", values)
    for flag in flags:
        if not isinstance(flag, Integral) or flag not in (0, 1):
            raise EncodingError("enable", f"{flag!r} is not a boolean", values)

    packed = bytearray()
    for start in range(0, LED_COUNT, ENABLE_CHUNK_SIZE):
        byte = 0
        for flag in flags[start:start + ENABLE_CHUNK_SIZE]:
            byte = (byte << 1) | (1 if flag else 0)
        packed.append(byte)
    return bytes(packed)


def to_power_bytes(values: PowerValues) -> bytes:
    """
    Convert power levels to the 18-byte PWM payload.

    Args:
        values: 18 raw bytes, or 18 integers (0-255) in wire order

    Returns:
        18-byte power payload

    Raises:
        EncodingError: If the length is wrong or a value is out of range
    """
    if isinstance(values, RAW_TYPES):
        data = bytes(values)
        if len(data) != LED_COUNT:
            raise EncodingError("power", f"expected {LED_COUNT} bytes, got {len(data)}", data)
        return data

    levels = _as_list("power", values)
    for level in levels:
        if isinstance(level, bool) or not isinstance(level, Integral) or not 0 <= level <= MAX_POWER:
            raise EncodingError("power", f"{level!r} is not an integer in 0..{MAX_POWER}", values)
    return bytes(int(level) for level in levels)


def to_enable_and_power(values: EnableAndPowerValues) -> tuple[bytes, bytes]:
    """
    Convert combined enable/power values to both payloads.

    Args:
        values: Either 18 ``(enabled, power)`` pairs, or a single
            ``(enable_values, power_values)`` tuple where each side may be
            raw bytes or a list

    Returns:
        Tuple of (enable payload, power payload)

    Raises:
        EncodingError: If either side cannot be encoded
    """
    if isinstance(values, RAW_TYPES) or not isinstance(values, Sequence):
        raise EncodingError(
            "enable and power", "expected 18 (enable, power) pairs or an (enable, power) tuple", values
        )

    if len(values) == 2:
        enable, power = values
        return to_enable_bytes(enable), to_power_bytes(power)

    pairs = _as_list("enable and power", values)
    for pair in pairs:
        if isinstance(pair, RAW_TYPES) or not isinstance(pair, Sequence) or len(pair) != 2:
            raise EncodingError("enable and power", f"{pair!r} is not an (enable, power) pair", values)

    enable = [pair[0] for pair in pairs]
    power = [pair[1] for pair in pairs]
    return to_enable_bytes(enable), to_power_bytes(power)


def map_leds(fn: Callable[[LED], T]) -> list[T]:
    """
    Apply a function to every LED in wire order.

    Exceptions raised by ``fn`` propagate unchanged.

    Example:
        >>> map_leds(lambda led: led.arm * 10 + led.ring)[:4]
        [36, 35, 34, 33]
    """
    return [fn(led) for led in LEDS]


def from_enable_bytes(data: bytes) -> list[bool]:
    """Unpack a 3-byte enable payload into 18 booleans in wire order."""
    if len(data) != ENABLE_BYTES:
        raise EncodingError("enable", f"expected {ENABLE_BYTES} bytes, got {len(data)}", data)

    flags = []
    for byte in data:
        for bit in reversed(range(ENABLE_CHUNK_SIZE)):
            flags.append(bool(byte >> bit & 1))
    return flags


def from_power_bytes(data: bytes) -> list[int]:
    """Unpack an 18-byte PWM payload into 18 integers in wire order."""
    if len(data) != LED_COUNT:
        raise EncodingError("power", f"expected {LED_COUNT} bytes, got {len(data)}", data)
    return list(data)


def _as_list(channel: str, values: Any) -> list:
    if isinstance(values, (str, dict)) or not isinstance(values, Sequence):
        raise EncodingError(channel, f"expected a list of {LED_COUNT} values", values)
    if len(values) != LED_COUNT:
        raise EncodingError(channel, f"expected {LED_COUNT} values, got {len(values)}", values)
    return list(values)
