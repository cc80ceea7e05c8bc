"""Tests for PiGlow register commands."""

import pytest

from piglow.devices.protocol import ALL_DISABLED, ALL_ENABLED, BUS_ADDRESS, PiGlowCommands


@pytest.mark.unit
class TestPiGlowCommands:
    """Test raw command bytes."""

    def test_address(self):
        """Test the fixed device address."""
        assert BUS_ADDRESS == 0x54

    def test_enable_output(self):
        """Test the output enable command."""
        assert PiGlowCommands.enable_output() == bytes([0x00, 0x01])
        assert PiGlowCommands.enable_output(False) == bytes([0x00, 0x00])

    def test_set_pwm_values(self):
        """Test the power command carries all 18 bytes."""
        data = PiGlowCommands.set_pwm_values(bytes(range(18)))
        assert data[0] == 0x01
        assert data[1:] == bytes(range(18))
        assert len(data) == 19

    def test_enable_leds(self):
        """Test the enable mask command."""
        assert PiGlowCommands.enable_leds(ALL_ENABLED) == bytes([0x13, 0x3F, 0x3F, 0x3F])
        assert PiGlowCommands.enable_leds(ALL_DISABLED) == bytes([0x13, 0x00, 0x00, 0x00])

    def test_update(self):
        """Test the latch command."""
        assert PiGlowCommands.update() == bytes([0x16, 0xFF])
