"""
Low-level command builder for the PiGlow's LED driver.

The PiGlow's Register Protocol
==============================

The PiGlow carries an SN3218 18-channel LED driver on the I2C bus at the
fixed 7-bit address ``0x54``. Every write is one command (register) byte
followed by its payload::

    [command] [payload...]

Commands
--------

=================  ======  ==============  ===========================================
Command            Byte    Payload         Effect
=================  ======  ==============  ===========================================
Enable output      0x00    ``1``           Powers on the driver's output stage
Set PWM values     0x01    18 bytes        Per-LED power, in wire order
Set LED enables    0x13    3 bytes         6 enable bits per byte, MSB first
Latch/update       0x16    ``0xFF``        Commits staged values to the LEDs
=================  ======  ==============  ===========================================

Message Flow
------------

::

    controller.set_power([...18 ints...])
          ↓
    codec.to_power_bytes(values)        # 18 bytes, wire order
          ↓
    PiGlowCommands.set_pwm_values(b)    # 0x01 + 18 bytes
    PiGlowCommands.update()             # 0x16 0xFF
          ↓
    transport.write(0x54, data)

PWM and enable writes are only staged by the driver; nothing changes on the
board until the latch command arrives. The controller relies on this to
send an enable write and a power write back-to-back and make them visible
with a single latch.

Key Design Principle
--------------------

This module is the LOWEST level of hardware interaction. It knows about
register bytes, not LEDs or brightness. The codec above it handles the
translation from LED values to payload bytes.
"""

from .codec import ENABLE_BYTES

BUS_ADDRESS = 0x54
DEFAULT_BUS = 1

CMD_ENABLE_OUTPUT = 0x00
CMD_SET_PWM_VALUES = 0x01
CMD_ENABLE_LEDS = 0x13
CMD_UPDATE = 0x16

ALL_ENABLED = bytes([0b111111] * ENABLE_BYTES)
ALL_DISABLED = bytes(ENABLE_BYTES)


class PiGlowCommands:
    """Builds the raw byte strings written to the LED driver."""

    @staticmethod
    def enable_output(enable: bool = True) -> bytes:
        """Build the output stage on/off command."""
        return bytes([CMD_ENABLE_OUTPUT, 1 if enable else 0])

    @staticmethod
    def set_pwm_values(power: bytes) -> bytes:
        """Build the per-LED power command from an 18-byte payload."""
        return bytes([CMD_SET_PWM_VALUES]) + bytes(power)

    @staticmethod
    def enable_leds(enable: bytes) -> bytes:
        """Build the LED enable command from a 3-byte payload."""
        return bytes([CMD_ENABLE_LEDS]) + bytes(enable)

    @staticmethod
    def update() -> bytes:
        """Build the latch command that commits staged values."""
        return bytes([CMD_UPDATE, 0xFF])
