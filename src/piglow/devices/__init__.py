"""PiGlow device layer: payload codec, register commands and bus transport."""

from .codec import (
    ENABLE_BYTES,
    from_enable_bytes,
    from_power_bytes,
    map_leds,
    to_enable_and_power,
    to_enable_bytes,
    to_power_bytes,
)
from .protocol import BUS_ADDRESS, DEFAULT_BUS, PiGlowCommands
from .transport import I2CTransport, SMBusTransport, TransportFactory

__all__ = [
    "BUS_ADDRESS",
    "DEFAULT_BUS",
    "ENABLE_BYTES",
    "I2CTransport",
    "PiGlowCommands",
    "SMBusTransport",
    "TransportFactory",
    "from_enable_bytes",
    "from_power_bytes",
    "map_leds",
    "to_enable_and_power",
    "to_enable_bytes",
    "to_power_bytes",
]
