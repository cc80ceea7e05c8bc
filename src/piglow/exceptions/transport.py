"""Bus transport exceptions.

This module defines exceptions for I2C bus errors:
- TransportError: Base class for bus errors
- TransportOpenError: Bus device could not be opened
- BusNotFoundError: Bus device node does not exist
- TransportWriteError: A write to an open bus failed
"""

from .base import PiGlowError


class TransportError(PiGlowError):
    """I2C bus opening or operation failed."""

    def __init__(self, user_message: str, bus: int | None = None, **kwargs):
        """
        Initialize transport error.

        Args:
            user_message: User-friendly error message
            bus: The I2C bus number involved (if applicable)
        """
        super().__init__(user_message, **kwargs)
        self.bus = bus


class TransportOpenError(TransportError):
    """I2C bus device exists but could not be opened."""

    def __init__(self, bus: int, original_error: str | None = None):
        """
        Initialize bus open error.

        Args:
            bus: The I2C bus number
            original_error: The original error message from the I2C library
        """
        user_msg = f"Unable to open I2C bus {bus}"
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            bus=bus,
            recoverable=True,
            recovery_hint=(
                f"Check that your user can access /dev/i2c-{bus} "
                "(usually by joining the 'i2c' group)."
            ),
        )
        self.original_error = original_error


class BusNotFoundError(TransportOpenError):
    """Requested I2C bus device node does not exist."""

    def __init__(self, bus: int, original_error: str | None = None):
        """
        Initialize bus not found error.

        Args:
            bus: The I2C bus number that was not found
            original_error: The original error message from the I2C library
        """
        super().__init__(bus, original_error)
        self.user_message = f"I2C bus not found: /dev/i2c-{bus}"
        self.technical_message = self.user_message + (
            f"\nOriginal error: {original_error}" if original_error else ""
        )
        self.recovery_hint = (
            "Enable I2C (e.g. 'raspi-config' > Interface Options > I2C) "
            "or pass the correct bus number with --bus."
        )


class TransportWriteError(TransportError):
    """Writing to an open I2C bus failed."""

    def __init__(self, bus: int | None, address: int, data: bytes, original_error: str):
        """
        Initialize bus write error.

        Args:
            bus: The I2C bus number
            address: 7-bit device address the write was sent to
            data: The bytes that failed to send
            original_error: The original error message from the I2C library
        """
        super().__init__(
            user_message=f"Failed to write to I2C device 0x{address:02X}",
            technical_message=(
                f"I2C write to 0x{address:02X} on bus {bus} failed "
                f"({data.hex()}): {original_error}"
            ),
            bus=bus,
            recoverable=False,
            recovery_hint="Check the PiGlow is seated correctly and restart the controller.",
        )
        self.address = address
        self.data = data
        self.original_error = original_error
