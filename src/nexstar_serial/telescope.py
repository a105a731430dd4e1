"""
NexStar Telescope API

High-level interface for a Celestron NexStar mount over its serial
hand-controller protocol. Wraps the low-level NexStarProtocol and owns the
connection lifecycle.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from types import TracebackType

import deal

from nexstar_serial.codec import degrees_to_hex
from nexstar_serial.exceptions import CommandError, InvalidCoordinateError, NotConnectedError, TransportError
from nexstar_serial.protocol import NexStarProtocol
from nexstar_serial.transport import SerialTransport, Transport
from nexstar_serial.types import (
    ConnectionState,
    HorizontalCoordinates,
    TelescopeConfig,
    TelescopeModel,
    UnknownModel,
)


__all__ = ["NexStarTelescope", "TransportFactory"]


logger = logging.getLogger(__name__)

TransportFactory = Callable[[TelescopeConfig], Transport]


class NexStarTelescope:
    """
    High-level interface for controlling a Celestron NexStar mount.

    Every method except connect() and disconnect() requires an open
    connection and raises NotConnectedError before touching the link
    otherwise. Transport errors propagate unchanged; nothing is retried.

    Calls on one instance must be serialised by the caller.

    Example:
        >>> from nexstar_serial import NexStarTelescope, TelescopeConfig
        >>> telescope = NexStarTelescope(TelescopeConfig(port='/dev/ttyUSB0'))
        >>> telescope.connect()
        True
        >>> telescope.goto_azm_alt(180.0, 45.0)
        >>> telescope.is_moving()
        True
        >>> telescope.disconnect()
    """

    def __init__(
        self,
        config: TelescopeConfig | str | None = None,
        transport_factory: TransportFactory = SerialTransport,
    ) -> None:
        """
        Initialize telescope interface.

        Args:
            config: TelescopeConfig object or port string.
                   If string, uses default configuration with specified port.
                   If None, uses default '/dev/ttyUSB0'
            transport_factory: Builds the link from the config on connect()
        """
        if config is None:
            self.config = TelescopeConfig()
        elif isinstance(config, str):
            self.config = TelescopeConfig(port=config)
        else:
            self.config = config

        if self.config.verbose:
            logging.basicConfig(level=logging.DEBUG)

        self.transport_factory = transport_factory
        self.protocol = NexStarProtocol()
        self.state = ConnectionState.CLOSED

    def __enter__(self) -> NexStarTelescope:
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.disconnect()

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.OPEN and self.protocol.is_open()

    # ========== Connection Management ==========

    @deal.raises(TransportError)
    @deal.post(lambda result: isinstance(result, bool), message="Must return boolean")
    def connect(self, port: str | None = None) -> bool:
        """
        Open the link to the hand controller.

        Args:
            port: Overrides config.port when given

        Returns:
            True if the link is active

        Raises:
            TelescopeConnectionError: If the port cannot be opened
        """
        if port is not None:
            self.config = replace(self.config, port=port)
        self.disconnect()

        transport = self.transport_factory(self.config)
        opened = bool(transport.open() and transport.is_open())
        self.protocol.transport = transport
        self.state = ConnectionState.OPEN if opened else ConnectionState.CLOSED

        if opened:
            logger.info(f"Connected to telescope on {self.config.port}")
        else:
            logger.error(f"Link on {self.config.port} did not report open")
        return opened

    @deal.post(lambda result: result is None, message="Disconnect must complete")
    def disconnect(self) -> None:
        """Close the link. Safe to call when never connected."""
        transport, self.protocol.transport = self.protocol.transport, None
        self.state = ConnectionState.CLOSED
        if transport is not None:
            transport.close()
            logger.info("Disconnected from telescope")

    # ========== Movement ==========

    @deal.raises(NotConnectedError, InvalidCoordinateError, CommandError, TransportError)
    def goto_azm_alt(self, azimuth: float, altitude: float) -> None:
        """
        Slew to azimuth/altitude given in decimal degrees.

        Angles wrap at 360 degrees. Returning only means the command was
        written; the mount does not acknowledge it. Poll is_moving() to
        follow the slew.

        Raises:
            NotConnectedError: If not connected
            InvalidCoordinateError: If either angle is NaN or infinite
            TransportError: If the write fails
        """
        self._require_connected()
        self.protocol.goto_azm_alt(degrees_to_hex(azimuth), degrees_to_hex(altitude))
        logger.info(f"Goto azimuth {azimuth:.4f}°, altitude {altitude:.4f}°")

    def goto_horizontal(self, position: HorizontalCoordinates) -> None:
        self.goto_azm_alt(position.azimuth, position.altitude)

    @deal.raises(NotConnectedError, CommandError, TransportError)
    def cancel_goto(self) -> None:
        """Stop the current slew."""
        self._require_connected()
        self.protocol.cancel_goto()
        logger.info("Goto cancelled")

    @deal.raises(NotConnectedError, CommandError, TransportError)
    @deal.post(lambda result: isinstance(result, bool), message="Must return boolean")
    def is_moving(self) -> bool:
        """Return True while a goto is moving the mount."""
        self._require_connected()
        return self.protocol.is_goto_in_progress()

    # ========== Telescope Information ==========

    @deal.raises(NotConnectedError, CommandError, TransportError)
    @deal.post(lambda result: isinstance(result, (TelescopeModel, UnknownModel)), message="Model must be returned")
    def get_model(self) -> TelescopeModel | UnknownModel:
        """
        Get the mount model.

        Returns:
            The matching TelescopeModel, or UnknownModel carrying the raw
            code when the code is not recognised
        """
        self._require_connected()
        code = self.protocol.get_model()
        try:
            return TelescopeModel(code)
        except ValueError:
            logger.warning(f"Unrecognised telescope model code: {code}")
            return UnknownModel(code)

    @deal.raises(NotConnectedError, CommandError, TransportError)
    @deal.post(lambda result: isinstance(result, bool), message="Must return boolean")
    def is_aligned(self) -> bool:
        """Return True if the hand controller reports a completed alignment."""
        self._require_connected()
        return self.protocol.is_alignment_complete()

    def _require_connected(self) -> None:
        if not self.is_connected:
            raise NotConnectedError("Telescope not connected")
