"""LED command implementations."""

import logging
from collections.abc import Callable
from typing import Optional

import click

from piglow.app import PiGlowApplication
from piglow.cli.errors import exit_with_error
from piglow.core import PiGlowController
from piglow.exceptions import PiGlowError
from piglow.models import LED, LEDS, Colour, PiGlowConfig
from piglow.utils import gamma_correct

logger = logging.getLogger(__name__)


def load_config(ctx: click.Context) -> PiGlowConfig:
    """Load the saved config and apply the --bus override."""
    config = PiGlowConfig.load_or_default(ctx.obj["config_path"])
    if ctx.obj.get("bus") is not None:
        config = config.model_copy(update={"bus": ctx.obj["bus"]})
    return config


def run_on_board(ctx: click.Context, action: Callable[[PiGlowController], None]) -> None:
    """
    Start a controller, run an action against it and report failures.

    The action is responsible for leaving the controller stopped or
    released; anything still running is stopped afterwards.
    """
    log_path = ctx.obj.get("log_path")

    try:
        config = load_config(ctx)
        app = PiGlowApplication(config=config, transport_factory=ctx.obj["transport_factory"])
        if not app.start():
            exit_with_error(app.controller.error, log_path)

        try:
            action(app.controller)
        finally:
            app.shutdown()

    except PiGlowError as e:
        logger.error(f"PiGlow command failed: {e.technical_message}")
        exit_with_error(e, log_path)


def select_leds(arms: tuple[int, ...], rings: tuple[int, ...], colours: tuple[str, ...]) -> Callable[[LED], bool]:
    """Build a predicate matching LEDs on any of the given arms, rings and colours."""
    wanted_colours = {Colour(colour.lower()) for colour in colours}

    def selected(led: LED) -> bool:
        return (
            (not arms or led.arm in arms)
            and (not rings or led.ring in rings)
            and (not wanted_colours or led.colour in wanted_colours)
        )

    return selected


@click.command(name="set")
@click.pass_context
@click.option(
    "--power",
    "-p",
    type=click.IntRange(0, 255),
    default=None,
    help="Raw brightness 0-255 (default: 255)",
)
@click.option(
    "--fraction",
    "-f",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Brightness as a fraction of full power",
)
@click.option(
    "--gamma/--no-gamma",
    default=True,
    help="Gamma correct --fraction (default: enabled)",
)
@click.option("--arm", "-a", "arms", type=click.IntRange(1, 3), multiple=True, help="Arm 1-3 (repeatable)")
@click.option("--ring", "-r", "rings", type=click.IntRange(1, 6), multiple=True, help="Ring 1-6 (repeatable)")
@click.option(
    "--colour",
    "-c",
    "colours",
    type=click.Choice([colour.value for colour in Colour], case_sensitive=False),
    multiple=True,
    help="LED colour (repeatable)",
)
def set_leds(
    ctx,
    power: Optional[int],
    fraction: Optional[float],
    gamma: bool,
    arms: tuple[int, ...],
    rings: tuple[int, ...],
    colours: tuple[str, ...],
):
    """
    Light the selected LEDs and turn the rest off.

    With no selection every LED is lit. Filters combine: --arm 1 --colour red
    lights only the red LED on arm 1. The LEDs stay lit after the command exits.
    """
    if power is not None and fraction is not None:
        raise click.UsageError("Use either --power or --fraction, not both")

    if fraction is not None:
        level = gamma_correct(fraction) if gamma else round(fraction * 255)
    elif power is not None:
        level = power
    else:
        level = 255

    selected = select_leds(arms, rings, colours)
    count = sum(1 for led in LEDS if selected(led))

    def apply(controller: PiGlowController) -> None:
        controller.map_enable_and_power(
            lambda led: (True, level) if selected(led) else (False, 0)
        )
        controller.wait()
        # Release the bus without the turn-off writes of stop()
        controller.kill()
        controller.join()

    run_on_board(ctx, apply)
    click.echo(f"Lit {count} LED(s) at power {level}")


@click.command(name="off")
@click.pass_context
def off(ctx):
    """Turn every LED off."""

    def apply(controller: PiGlowController) -> None:
        controller.set_power(bytes(len(LEDS)))
        controller.stop()

    run_on_board(ctx, apply)
    click.echo("All LEDs off")


@click.command(name="leds")
def leds():
    """Show the LED layout in wire order."""
    click.echo(f"{'Index':>5}  {'Arm':>3}  {'Ring':>4}  Colour")
    for led in LEDS:
        click.echo(f"{led.index:>5}  {led.arm:>3}  {led.ring:>4}  {led.colour.value}")
