"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import click

from piglow import __version__
from piglow.devices.transport import SMBusTransport

from .commands import config, leds, off, set_leds

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = Path.home() / ".piglow" / "logs"


def resolve_log_path(debug: bool, log_file: Optional[Path]) -> Path:
    """Get the log file path for the given flags."""
    if log_file:
        return log_file
    if debug:
        return Path.cwd() / "piglow-debug.log"
    return DEFAULT_LOG_DIR / "piglow.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> Path:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging in the current directory
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)

    Returns:
        Path of the log file
    """
    # Determine log level based on flags
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Override with explicit log level if provided
    if log_file:
        level = getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Rotating file handler (keeps last 5 files, max 10MB each)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    # Console only shows what -v asked for
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.WARNING if verbose == 0 and not debug else level)
    stream_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(stream_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")
    return log_path


@click.group()
@click.pass_context
@click.version_option(version=__version__, prog_name="piglow")
@click.option(
    '--bus',
    '-b',
    type=click.IntRange(0, 99),
    default=None,
    help='I2C bus number (overrides the saved config)'
)
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./piglow-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
def cli(
    ctx,
    bus: Optional[int],
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str
):
    """
    PiGlow - control the 18 LEDs of a Pimoroni PiGlow board.

    \b
    Examples:
      # Light every LED at half brightness (gamma corrected)
      piglow set --fraction 0.5

      # Light the red ring and arm 2 at full power
      piglow set --colour red --arm 2

      # Turn everything off
      piglow off

      # Show the LED layout
      piglow leds

      # Use bus 0 and log at DEBUG level
      piglow --bus 0 --debug set --power 64
    """
    ctx.ensure_object(dict)
    ctx.obj["log_path"] = setup_logging(verbose, debug, log_file, log_level)
    ctx.obj["bus"] = bus
    ctx.obj.setdefault("config_path", None)
    ctx.obj.setdefault("transport_factory", SMBusTransport.open)


cli.add_command(set_leds)
cli.add_command(off)
cli.add_command(leds)
cli.add_command(config)

if __name__ == "__main__":
    cli()
