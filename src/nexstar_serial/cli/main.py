"""
NexStar Serial CLI - Main Application

This is the main entry point for the nexstar-serial command-line interface.
Each command opens the port, performs one operation, and closes it again.
"""

import os
import time

import typer
from click import Context
from dotenv import load_dotenv
from rich.console import Console
from typer.core import TyperGroup

from nexstar_serial.cli.utils.output import (
    format_model,
    print_error,
    print_info,
    print_json,
    print_status_table,
    print_success,
    print_warning,
    print_wire_payload,
)
from nexstar_serial.cli.utils.state import connected_telescope, set_option
from nexstar_serial.codec import decode_coordinate_pair, encode_coordinate_pair
from nexstar_serial.exceptions import InvalidCoordinateError
from nexstar_serial.protocol import GOTO_AZM_ALT
from nexstar_serial.types import TelescopeModel


class SortedCommandsGroup(TyperGroup):
    """Custom Typer group that sorts commands alphabetically within each help panel."""

    def list_commands(self, ctx: Context) -> list[str]:
        """Return commands sorted alphabetically."""
        commands = super().list_commands(ctx)
        return sorted(commands)


# Create main app
app = typer.Typer(
    name="nexstar-serial",
    help="Celestron NexStar Serial Telescope Control CLI",
    add_completion=False,
    rich_markup_mode="rich",
    cls=SortedCommandsGroup,
)

# Console for rich output
console = Console()


@app.callback()
def main(
    port: str | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Serial port or pyserial URL for the telescope connection",
        envvar="NEXSTAR_PORT",
    ),
    read_timeout: float = typer.Option(3.5, "--read-timeout", help="Seconds to wait for a reply byte"),
    write_timeout: float = typer.Option(3.5, "--write-timeout", help="Seconds to wait for a command to be written"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
) -> None:
    """
    Celestron NexStar Serial Telescope Control CLI

    [bold green]Examples:[/bold green]

        nexstar-serial --port /dev/ttyUSB0 status
        nexstar-serial --port COM3 goto 180 45
        nexstar-serial encode 180 45

    [bold blue]Environment Variables:[/bold blue]

        NEXSTAR_PORT    - Default serial port (also read from .env)
    """
    load_dotenv()

    set_option("port", port or os.environ.get("NEXSTAR_PORT"))
    set_option("read_timeout", read_timeout)
    set_option("write_timeout", write_timeout)
    set_option("verbose", verbose)

    if verbose:
        console.print("[dim]Verbose mode enabled[/dim]")


@app.command(rich_help_panel="Utilities")
def version() -> None:
    """Show the CLI version."""
    from nexstar_serial.cli import __version__

    console.print(f"[bold]NexStar Serial CLI[/bold] version [cyan]{__version__}[/cyan]")


@app.command(rich_help_panel="Utilities")
def encode(
    azimuth: float = typer.Argument(..., help="Azimuth in degrees"),
    altitude: float = typer.Argument(..., help="Altitude in degrees"),
) -> None:
    """
    Show the goto command line for a position without touching the telescope.

    Example:
        nexstar-serial encode 180 45
    """
    try:
        pair = encode_coordinate_pair(azimuth, altitude)
    except InvalidCoordinateError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    # Where the mount actually points once truncated and wrapped
    on_wire = decode_coordinate_pair(pair).value_or(None)
    print_wire_payload(azimuth, altitude, GOTO_AZM_ALT.with_payload(pair).frame(), on_wire)


@app.command(rich_help_panel="Movement")
def goto(
    azimuth: float = typer.Argument(..., help="Azimuth in degrees (0=North, 90=East)"),
    altitude: float = typer.Argument(..., help="Altitude in degrees (0=horizon, 90=zenith)"),
    wait: bool = typer.Option(False, help="Wait for the slew to complete"),
    poll_interval: float = typer.Option(0.5, help="Seconds between motion checks while waiting"),
    max_wait: float = typer.Option(300.0, help="Give up waiting after this many seconds"),
) -> None:
    """
    Slew the telescope to an azimuth/altitude position.

    Example:
        nexstar-serial goto 180 45
        nexstar-serial goto 90 30 --wait
    """
    with connected_telescope() as telescope:
        telescope.goto_azm_alt(azimuth, altitude)
        print_success(f"Goto sent: Az {azimuth:.4f}°, Alt {altitude:.4f}°")

        if not wait:
            return

        deadline = time.monotonic() + max_wait
        with console.status("[bold blue]Slewing...", spinner="dots"):
            while telescope.is_moving():
                if time.monotonic() > deadline:
                    print_warning(f"Still slewing after {max_wait:.0f} seconds")
                    raise typer.Exit(code=1)
                time.sleep(poll_interval)
        print_success("Slew complete")


@app.command(rich_help_panel="Movement")
def cancel() -> None:
    """Stop the current slew."""
    with connected_telescope() as telescope:
        telescope.cancel_goto()
    print_success("Goto cancelled")


@app.command(rich_help_panel="Status")
def moving() -> None:
    """Report whether a goto is in progress."""
    with connected_telescope() as telescope:
        slewing = telescope.is_moving()
    if slewing:
        print_info("Telescope is slewing")
    else:
        print_info("Telescope is not moving")


@app.command(rich_help_panel="Status")
def model() -> None:
    """Report the mount model."""
    with connected_telescope() as telescope:
        mount = telescope.get_model()
    if isinstance(mount, TelescopeModel):
        print_success(f"Model: {format_model(mount)}")
    else:
        print_warning(f"Model: {format_model(mount)}")


@app.command(rich_help_panel="Status")
def aligned() -> None:
    """Report whether the hand controller is aligned."""
    with connected_telescope() as telescope:
        is_aligned = telescope.is_aligned()
    if is_aligned:
        print_success("Telescope is aligned")
    else:
        print_warning("Telescope is not aligned")


@app.command(rich_help_panel="Status")
def status(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show model, alignment and motion in one table."""
    with connected_telescope() as telescope:
        mount = telescope.get_model()
        is_aligned = telescope.is_aligned()
        slewing = telescope.is_moving()

    if json_output:
        print_json(
            {
                "model": format_model(mount),
                "model_code": int(mount.value) if isinstance(mount, TelescopeModel) else mount.code,
                "aligned": is_aligned,
                "moving": slewing,
            }
        )
    else:
        print_status_table(mount, is_aligned, slewing)


if __name__ == "__main__":
    app()
