"""
Transport Layer

Owns the physical link to the hand controller. Everything that touches a
port lives behind the narrow ``Transport`` interface so the command
protocol can run against ``MemoryTransport`` in tests instead of real
hardware.

Serial parameters (NexStar hand controller):
- Baud Rate: 9600
- Data Bits: 8
- Parity: None
- Stop Bits: 1
- Read/Write Timeout: 3.5 seconds
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Mapping
from typing import Protocol

import serial

from nexstar_serial.exceptions import NotConnectedError, TelescopeConnectionError, TelescopeTimeoutError
from nexstar_serial.types import TelescopeConfig


__all__ = ["MemoryTransport", "SerialTransport", "Transport"]


logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Byte-level link used by the command protocol."""

    def open(self) -> bool: ...

    def close(self) -> None: ...

    def is_open(self) -> bool: ...

    def write_line(self, text: str) -> None: ...

    def read_byte(self) -> int: ...

    def discard_input(self) -> None: ...


class SerialTransport:
    """
    Transport over a serial port via pyserial.

    The port is opened with ``serial.serial_for_url``, so besides device
    paths ('/dev/ttyUSB0', 'COM3') any pyserial URL works, e.g.
    'socket://192.168.4.1:4030' for a network serial bridge or 'loop://'
    for a loopback port.
    """

    def __init__(self, config: TelescopeConfig) -> None:
        self.config = config
        self.serial_conn: serial.SerialBase | None = None

    def open(self) -> bool:
        """
        Open the serial link with the configured parameters.

        Returns:
            True if the port reports open

        Raises:
            TelescopeConnectionError: If the port cannot be opened
        """
        cfg = self.config
        try:
            logger.debug(f"Opening serial connection to {cfg.port} at {cfg.baudrate} baud")
            self.serial_conn = serial.serial_for_url(
                cfg.port,
                baudrate=cfg.baudrate,
                bytesize=cfg.bytesize,
                parity=cfg.parity,
                stopbits=cfg.stopbits,
                timeout=cfg.read_timeout,
                write_timeout=cfg.write_timeout,
            )
        except (serial.SerialException, ValueError) as e:
            logger.error(f"Failed to open serial port {cfg.port}: {e}")
            raise TelescopeConnectionError(f"Failed to open port {cfg.port}: {e}") from e

        logger.info(f"Serial connection opened on {cfg.port}")
        return self.is_open()

    def close(self) -> None:
        """Close the port. Safe to call repeatedly or before open()."""
        conn, self.serial_conn = self.serial_conn, None
        if conn is None:
            return
        try:
            conn.close()
            logger.info(f"Serial connection closed on {self.config.port}")
        except serial.SerialException as e:
            logger.warning(f"Error closing serial port {self.config.port}: {e}")

    def is_open(self) -> bool:
        return self.serial_conn is not None and self.serial_conn.is_open

    def _require_conn(self) -> serial.SerialBase:
        conn = self.serial_conn
        if conn is None or not conn.is_open:
            raise NotConnectedError("Serial port is not open")
        return conn

    def write_line(self, text: str) -> None:
        """
        Write one command line followed by the line terminator.

        Raises:
            TelescopeTimeoutError: If the write timeout elapses
            TelescopeConnectionError: On any other I/O failure
        """
        conn = self._require_conn()
        data = (text + self.config.line_terminator).encode("ascii")
        try:
            conn.write(data)
            conn.flush()
        except serial.SerialTimeoutException as e:
            logger.error(f"Timeout writing {text!r} to {self.config.port}")
            raise TelescopeTimeoutError(f"Timeout writing command: {text}") from e
        except serial.SerialException as e:
            logger.error(f"Error writing {text!r} to {self.config.port}: {e}")
            raise TelescopeConnectionError(f"Failed to write command: {e}") from e

    def read_byte(self) -> int:
        """
        Read a single reply byte, waiting at most the read timeout.

        Raises:
            TelescopeTimeoutError: If no byte arrives in time
            TelescopeConnectionError: On any other I/O failure
        """
        conn = self._require_conn()
        try:
            data = conn.read(1)
        except serial.SerialException as e:
            logger.error(f"Error reading from {self.config.port}: {e}")
            raise TelescopeConnectionError(f"Failed to read reply: {e}") from e

        if not data:
            logger.error(f"Timeout waiting for reply on {self.config.port}")
            raise TelescopeTimeoutError(f"No reply within {self.config.read_timeout} seconds")
        return data[0]

    def discard_input(self) -> None:
        conn = self._require_conn()
        try:
            conn.reset_input_buffer()
        except serial.SerialException as e:
            raise TelescopeConnectionError(f"Failed to discard input: {e}") from e


class MemoryTransport:
    """
    Scripted in-memory stand-in for a hand controller.

    Every written line is recorded. ``responses`` maps a command opcode
    (the first character of the line) to the bytes the device sends back;
    those bytes land in the input buffer, where ``read_byte`` consumes
    them and ``discard_input`` drops whatever is left over.

    Example:
        >>> link = MemoryTransport({"L": b"0", "m": bytes([12])})
        >>> link.open()
        True
    """

    def __init__(
        self,
        responses: Mapping[str, bytes] | None = None,
        config: TelescopeConfig | None = None,
    ) -> None:
        self.config = config or TelescopeConfig(port="memory://")
        self.responses: dict[str, bytes] = dict(responses or {})
        self.written: list[str] = []
        self.output = bytearray()
        self.discard_count = 0
        self.open_count = 0
        self._input: deque[int] = deque()
        self._open = False

    def open(self) -> bool:
        self._open = True
        self.open_count += 1
        return True

    def close(self) -> None:
        self._open = False

    def is_open(self) -> bool:
        return self._open

    def feed(self, data: Iterable[int]) -> None:
        """Place bytes in the input buffer as if the device had sent them."""
        self._input.extend(data)

    @property
    def pending(self) -> bytes:
        return bytes(self._input)

    def write_line(self, text: str) -> None:
        if not self._open:
            raise NotConnectedError("Memory transport is not open")
        self.written.append(text)
        self.output.extend((text + self.config.line_terminator).encode("ascii"))
        reply = self.responses.get(text[:1])
        if reply:
            self.feed(reply)

    def read_byte(self) -> int:
        if not self._open:
            raise NotConnectedError("Memory transport is not open")
        if not self._input:
            raise TelescopeTimeoutError(f"No reply within {self.config.read_timeout} seconds")
        return self._input.popleft()

    def discard_input(self) -> None:
        if not self._open:
            raise NotConnectedError("Memory transport is not open")
        self._input.clear()
        self.discard_count += 1
