"""Encoding-related exceptions.

Raised on the caller's thread, before anything reaches the bus:
- EncodingError: LED values cannot be packed into a bus payload
- GammaInputError: Brightness value outside the gamma curve's domain
"""

from typing import Any

from .base import PiGlowError


class EncodingError(PiGlowError, ValueError):
    """LED values could not be converted to the bytes the device expects."""

    def __init__(self, channel: str, error_msg: str, value: Any = None):
        """
        Initialize encoding error.

        Args:
            channel: Which payload was being built ("enable" or "power")
            error_msg: Why the value could not be encoded
            value: The offending value (optional, logged only)
        """
        super().__init__(
            user_message=f"Invalid {channel} values: {error_msg}",
            technical_message=f"Cannot encode {channel} payload from {value!r}: {error_msg}",
            recoverable=True,
            recovery_hint=_hint_for(channel),
        )
        self.channel = channel
        self.value = value


class GammaInputError(EncodingError):
    """Brightness value is outside the supported input ranges."""

    def __init__(self, value: Any):
        """
        Initialize gamma input error.

        Args:
            value: The rejected brightness value
        """
        super().__init__(
            channel="brightness",
            error_msg=f"{value!r} is not an integer in 0..255 or a float in 0.0..1.0",
            value=value,
        )


def _hint_for(channel: str) -> str:
    if channel == "enable":
        return "Pass 18 booleans, or a 3-byte buffer with 6 enable bits per byte"
    if channel == "power":
        return "Pass 18 integers in 0..255, or an 18-byte buffer"
    return "Use an integer from 0 to 255, or a float from 0.0 to 1.0"
