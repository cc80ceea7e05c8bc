"""I2C bus transport.

The controller only needs three primitives from the bus: open, write and
close. ``I2CTransport`` describes the write/close side so tests and other
buses can stand in for the real device; ``SMBusTransport`` implements it on
top of Linux ``/dev/i2c-N`` via smbus2.
"""

import logging
from typing import Callable, Protocol

from smbus2 import SMBus

from piglow.exceptions import wrap_transport_error

logger = logging.getLogger(__name__)


class I2CTransport(Protocol):
    """Protocol for an open I2C bus handle."""

    def write(self, address: int, data: bytes) -> None:
        """
        Write one register command to a device.

        Args:
            address: 7-bit device address
            data: Command byte followed by its payload

        Raises:
            TransportWriteError: If the write fails
        """
        ...

    def close(self) -> None:
        """Release the bus handle."""
        ...


TransportFactory = Callable[[int], I2CTransport]


class SMBusTransport:
    """I2C transport backed by an smbus2 ``SMBus`` handle."""

    def __init__(self, bus: int, smbus: SMBus):
        """
        Wrap an already-open bus.

        Args:
            bus: Bus number (for error messages)
            smbus: Open smbus2 handle
        """
        self.bus = bus
        self._smbus = smbus

    @classmethod
    def open(cls, bus: int) -> "SMBusTransport":
        """
        Open ``/dev/i2c-<bus>``.

        Args:
            bus: I2C bus number (0-99)

        Raises:
            BusNotFoundError: If the device node does not exist
            TransportOpenError: If the bus cannot be opened for any other reason
        """
        if not 0 <= bus <= 99:
            raise ValueError(f"Invalid I2C bus number: {bus}. Must be 0-99.")

        try:
            smbus = SMBus(bus)
        except Exception as e:
            raise wrap_transport_error(e, bus=bus) from e

        logger.debug(f"Opened /dev/i2c-{bus}")
        return cls(bus, smbus)

    def write(self, address: int, data: bytes) -> None:
        """Write a command byte and its payload as one I2C block write."""
        try:
            self._smbus.write_i2c_block_data(address, data[0], list(data[1:]))
        except Exception as e:
            raise wrap_transport_error(e, bus=self.bus, address=address, data=data) from e

    def close(self) -> None:
        """Close the bus handle."""
        self._smbus.close()
        logger.debug(f"Closed /dev/i2c-{self.bus}")
