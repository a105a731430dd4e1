"""
CLI State Management

Holds the connection settings chosen by the global CLI options and opens
a telescope for the duration of one command.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import typer

from nexstar_serial import NexStarError, NexStarTelescope, TelescopeConfig
from nexstar_serial.cli.utils.output import console, print_error
from nexstar_serial.telescope import TransportFactory
from nexstar_serial.transport import SerialTransport


_cli_state: dict[str, Any] = {}
_transport_factory: TransportFactory = SerialTransport


def set_option(key: str, value: Any) -> None:
    _cli_state[key] = value


def get_option(key: str, default: Any = None) -> Any:
    return _cli_state.get(key, default)


def clear_state() -> None:
    _cli_state.clear()


def set_transport_factory(factory: TransportFactory | None) -> None:
    """Swap the link implementation (None restores the serial port)."""
    global _transport_factory
    _transport_factory = factory or SerialTransport


def build_config() -> TelescopeConfig:
    """Build a TelescopeConfig from the global CLI options."""
    defaults = TelescopeConfig()
    return TelescopeConfig(
        port=get_option("port") or defaults.port,
        read_timeout=get_option("read_timeout", defaults.read_timeout),
        write_timeout=get_option("write_timeout", defaults.write_timeout),
        verbose=get_option("verbose", False),
    )


@contextmanager
def connected_telescope() -> Iterator[NexStarTelescope]:
    """
    Connect for the duration of one command, then disconnect.

    Library errors are printed and turned into exit code 1.

    Raises:
        typer.Exit: If connecting or the command itself fails
    """
    config = build_config()
    telescope = NexStarTelescope(config, transport_factory=_transport_factory)
    try:
        with console.status(f"[bold blue]Connecting to telescope on {config.port}...", spinner="dots"):
            opened = telescope.connect()
        if not opened:
            print_error(f"Port {config.port} did not open")
            raise typer.Exit(code=1)
        yield telescope
    except NexStarError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    finally:
        telescope.disconnect()
