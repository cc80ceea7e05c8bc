"""
Config command group.

Commands:
    - config show            # Display configuration
    - config path            # Print the config file location
    - config set --bus N ... # Update fields and save
    - config reset [--yes]   # Restore defaults
"""

import logging
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import ValidationError

from piglow.cli.errors import exit_with_error
from piglow.exceptions import ConfigurationError, wrap_pydantic_error
from piglow.models import DEFAULT_CONFIG_PATH, PiGlowConfig

logger = logging.getLogger(__name__)


def config_path(ctx: click.Context) -> Path:
    """Get the config file path for this invocation."""
    return ctx.obj.get("config_path") or DEFAULT_CONFIG_PATH


@click.group(name="config")
def config():
    """Configure PiGlow settings."""
    pass


@config.command(name="show")
@click.pass_context
def show_config(ctx):
    """Display the current configuration."""
    path = config_path(ctx)
    try:
        current = PiGlowConfig.load_or_default(path)
    except ConfigurationError as e:
        exit_with_error(e, ctx.obj.get("log_path"))

    source = path if path.exists() else "defaults"
    click.echo(f"Configuration ({source}):\n")
    for field, value in current.model_dump().items():
        if field == "address":
            value = f"0x{value:02X}"
        click.echo(f"  {field}: {value}")


@config.command(name="path")
@click.pass_context
def show_path(ctx):
    """Print the location of the config file."""
    click.echo(str(config_path(ctx)))


@config.command(name="set")
@click.pass_context
@click.option("--bus", type=int, default=None, help="I2C bus number (0-99)")
@click.option(
    "--address",
    type=str,
    default=None,
    help="Device address, decimal or hex (e.g. 0x54)",
)
@click.option("--name", type=str, default=None, help="Registered name of the default controller")
@click.option("--auto-start/--no-auto-start", default=None, help="Start the controller automatically")
@click.option(
    "--enable-on-start/--no-enable-on-start",
    default=None,
    help="Enable all LEDs when the controller starts",
)
@click.option("--timeout", type=float, default=None, help="Default wait/stop timeout in seconds")
def set_config(
    ctx,
    bus: Optional[int],
    address: Optional[str],
    name: Optional[str],
    auto_start: Optional[bool],
    enable_on_start: Optional[bool],
    timeout: Optional[float],
):
    """Update configuration fields and save them."""
    path = config_path(ctx)
    log_path = ctx.obj.get("log_path")

    updates: dict[str, Any] = {}
    if bus is not None:
        updates["bus"] = bus
    if address is not None:
        try:
            updates["address"] = int(address, 0)
        except ValueError:
            raise click.BadParameter(f"{address!r} is not a number", param_hint="--address") from None
    if name is not None:
        updates["name"] = name
    if auto_start is not None:
        updates["auto_start"] = auto_start
    if enable_on_start is not None:
        updates["enable_on_start"] = enable_on_start
    if timeout is not None:
        updates["default_timeout"] = timeout

    if not updates:
        raise click.UsageError("Nothing to set. See 'piglow config set --help'.")

    try:
        current = PiGlowConfig.load_or_default(path)
        updated = PiGlowConfig.model_validate({**current.model_dump(), **updates})
        updated.save(path)
    except ValidationError as e:
        exit_with_error(wrap_pydantic_error(e, str(path)), log_path)
    except ConfigurationError as e:
        exit_with_error(e, log_path)

    logger.info(f"Updated config fields: {', '.join(updates)}")
    for field in updates:
        click.echo(f"[OK] {field} = {getattr(updated, field)}")


@config.command(name="reset")
@click.pass_context
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def reset_config(ctx, yes: bool):
    """Restore the default configuration."""
    path = config_path(ctx)
    if not yes:
        click.confirm(f"Reset {path} to defaults?", abort=True)

    PiGlowConfig().save(path)
    click.echo("[OK] Configuration reset to defaults")
