"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field

from piglow.utils.persistence import PydanticPersistence

DEFAULT_CONFIG_PATH = Path.home() / ".piglow" / "config.json"


class PiGlowConfig(BaseModel):
    """PiGlow settings used by the default-instance facade and the CLI."""

    # Bus settings
    bus: int = Field(default=1, ge=0, le=99, description="I2C bus number (/dev/i2c-N)")
    address: int = Field(
        default=0x54, ge=0x03, le=0x77, description="7-bit I2C address of the LED driver"
    )

    # Instance settings
    name: str | None = Field(
        default="piglow",
        description="Registered name of the default controller (None = unregistered)",
    )
    auto_start: bool = Field(
        default=True, description="Start the default controller when the application starts"
    )
    enable_on_start: bool = Field(
        default=True, description="Enable all 18 LEDs as soon as the controller starts"
    )

    # Timeouts
    default_timeout: float = Field(
        default=60.0, gt=0, description="Seconds to block in wait()/stop() before giving up"
    )

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "PiGlowConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses default location
                  (~/.piglow/config.json).

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH

        return PydanticPersistence.load_json_or_default(path, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        if path is None:
            path = DEFAULT_CONFIG_PATH

        PydanticPersistence.save_json(self, path)
