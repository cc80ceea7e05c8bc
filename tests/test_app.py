"""Tests for the default-instance application facade."""

from pathlib import Path

import pytest

from piglow.app import PiGlowApplication
from piglow.core import ControllerRegistry, ControllerState
from piglow.exceptions import BusNotFoundError
from piglow.models import PiGlowConfig


@pytest.mark.integration
class TestPiGlowApplication:
    """Test the application lifecycle."""

    def test_context_manager_starts_and_stops(self, transport, transport_factory):
        """Test auto start registers the controller and exit turns the LEDs off."""
        with PiGlowApplication(config=PiGlowConfig(), transport_factory=transport_factory) as app:
            assert app.is_running
            assert app.registry.get("piglow") is app.controller
            app.controller.set_power([1] * 18)

        assert app.controller.state == ControllerState.STOPPED
        assert "piglow" not in app.registry
        assert transport.data[-2:] == [bytes([0x13, 0, 0, 0]), bytes([0x16, 0xFF])]
        assert transport.close_count == 1

    def test_config_applied(self, transport, transport_factory):
        """Test bus, address and startup settings come from the config."""
        config = PiGlowConfig(bus=3, address=0x55, enable_on_start=False)
        app = PiGlowApplication(config=config, transport_factory=transport_factory)

        assert app.start()
        app.controller.wait()

        assert transport_factory.opened == [3]
        assert transport.writes == [(0x55, bytes([0x00, 0x01]))]
        app.shutdown()

    def test_no_auto_start(self, transport_factory):
        """Test auto_start off leaves the bus alone."""
        config = PiGlowConfig(auto_start=False)
        with PiGlowApplication(config=config, transport_factory=transport_factory) as app:
            assert app.controller is None
            assert not app.is_running

        assert transport_factory.opened == []

    def test_loads_config_file(self, tmp_path: Path, transport_factory):
        """Test the config is read from the given path."""
        path = tmp_path / "config.json"
        PiGlowConfig(bus=4, name="desk").save(path)

        app = PiGlowApplication(config_path=path, transport_factory=transport_factory)

        assert app.config.bus == 4
        assert app.config.name == "desk"

    def test_shared_registry(self, transport_factory):
        """Test a caller-provided registry is used."""
        registry = ControllerRegistry()
        with PiGlowApplication(
            config=PiGlowConfig(name="desk"), registry=registry, transport_factory=transport_factory
        ) as app:
            assert registry.get("desk") is app.controller

    def test_start_failure(self):
        """Test a missing bus is reported by start()."""

        def missing(bus):
            raise BusNotFoundError(bus)

        app = PiGlowApplication(config=PiGlowConfig(), transport_factory=missing)

        assert app.start() is False
        assert isinstance(app.controller.error, BusNotFoundError)
        app.shutdown()
