"""
Rich console helpers for the nexstar-serial command line.

Every command prints through the shared ``console`` so tests can capture
output with CliRunner.
"""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from nexstar_serial.types import TelescopeModel, UnknownModel


console = Console()

# Plain-ASCII markers when output is piped or on a legacy Windows console
_fancy = console.is_terminal and not console.legacy_windows
_OK, _FAIL, _WARN, _NOTE = ("✓", "✗", "⚠", "ℹ") if _fancy else ("+", "x", "!", "i")


def print_success(message: str) -> None:
    """Report a command the hand controller accepted."""
    console.print(f"[green]{_OK}[/green] {message}")


def print_error(message: str) -> None:
    """Report a failed exchange or a bad argument in red."""
    console.print(f"[red]{_FAIL}[/red] {message}", style="red")


def print_warning(message: str) -> None:
    console.print(f"[yellow]{_WARN}[/yellow] {message}")


def print_info(message: str) -> None:
    console.print(f"[blue]{_NOTE}[/blue] {message}")


def print_json(data: dict[str, Any]) -> None:
    """Emit a status snapshot as JSON for scripts."""
    console.print_json(json.dumps(data))


def format_model(model: TelescopeModel | UnknownModel) -> str:
    """Model name with its wire code, e.g. 'NexStar 6/8 SE (12)'."""
    if isinstance(model, UnknownModel):
        return model.display_name
    return f"{model.display_name} ({model.value})"


def print_status_table(model: TelescopeModel | UnknownModel, aligned: bool, moving: bool) -> None:
    """
    Show the three hand-controller queries side by side.

    Args:
        model: Reply to ``m``
        aligned: Reply to ``J``
        moving: Reply to ``L``
    """
    table = Table(title="Hand Controller", show_header=True, header_style="bold magenta")
    table.add_column("Query", style="cyan")
    table.add_column("Reply", style="green")

    table.add_row("Model", format_model(model))
    table.add_row("Aligned", "[green]Yes[/green]" if aligned else "[yellow]No[/yellow]")
    table.add_row("Goto in progress", "[yellow]Yes[/yellow]" if moving else "No")

    console.print(table)


def print_wire_payload(
    azimuth: float,
    altitude: float,
    payload: str,
    on_wire: tuple[float, float] | None = None,
) -> None:
    """
    Show the goto line for an azimuth/altitude pair.

    ``on_wire`` is the pair decoded back from the hex, i.e. the position
    after truncation to rotor units and wrapping at 360°.
    """
    text = Text()
    text.append("Azimuth:  ", style="bold cyan")
    text.append(f"{azimuth:.6f}°\n", style="white")
    text.append("Altitude: ", style="bold cyan")
    text.append(f"{altitude:.6f}°\n", style="white")
    if on_wire is not None:
        text.append("Encodes:  ", style="bold cyan")
        text.append(f"{on_wire[0]:.6f}°, {on_wire[1]:.6f}°\n", style="white")
    text.append("Command:  ", style="bold cyan")
    text.append(payload, style="bold green")

    console.print(Panel.fit(text, title="[bold]Goto Encoding[/bold]", border_style="green"))
