"""Shared error reporting for CLI commands."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from piglow.exceptions import format_error_for_display

logger = logging.getLogger(__name__)


def exit_with_error(error: BaseException, log_path: Optional[Path] = None) -> None:
    """
    Show a clean error message (no traceback) and exit with status 1.

    Args:
        error: The exception to report
        log_path: Log file to point the user at, if known
    """
    user_message, recovery_hint = format_error_for_display(error)

    click.echo("\n" + "=" * 70, err=True)
    click.echo(f"ERROR: {user_message}", err=True)
    click.echo("=" * 70, err=True)

    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)

    if log_path:
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)
    click.echo("For logging options, run: piglow --help", err=True)

    sys.exit(1)
