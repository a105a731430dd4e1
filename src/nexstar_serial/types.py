"""
Type definitions for NexStar serial telescope control.

This module contains enums, dataclasses, and type definitions used
throughout the library.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, StrEnum


__all__ = [
    "Command",
    "ConnectionState",
    "HorizontalCoordinates",
    "ProtocolState",
    "ReplyShape",
    "TelescopeConfig",
    "TelescopeModel",
    "UnknownModel",
]


class ConnectionState(StrEnum):
    """Connection lifecycle of a telescope instance."""

    CLOSED = "closed"
    OPEN = "open"


class ProtocolState(StrEnum):
    """Where a single command exchange currently is."""

    IDLE = "idle"
    SENT = "sent"
    AWAITING_REPLY = "awaiting-reply"


class ReplyShape(Enum):
    """
    Shape of the reply a command expects from the hand controller.

    NONE commands are fire-and-forget; the other shapes read exactly one
    byte after the command line has been written.
    """

    NONE = 0  # Nothing to read
    SINGLE_BYTE = 1  # One raw byte, returned as an int
    SINGLE_BYTE_BOOLEAN = 2  # One byte compared against Command.true_value


class TelescopeModel(IntEnum):
    """
    Mount model codes reported by the ``m`` command.

    Codes that are not listed here are reported as ``UnknownModel``.
    """

    GPS_SERIES = 1
    I_SERIES = 3
    I_SERIES_SE = 4
    CGE = 5
    ADVANCED_GT = 6
    SLT = 7
    CPC = 9
    GT = 10
    SE_45 = 11  # NexStar 4/5 SE
    SE_68 = 12  # NexStar 6/8 SE

    @property
    def display_name(self) -> str:
        return _MODEL_NAMES[self]


_MODEL_NAMES: dict[TelescopeModel, str] = {
    TelescopeModel.GPS_SERIES: "GPS Series",
    TelescopeModel.I_SERIES: "i-Series",
    TelescopeModel.I_SERIES_SE: "i-Series SE",
    TelescopeModel.CGE: "CGE",
    TelescopeModel.ADVANCED_GT: "Advanced GT",
    TelescopeModel.SLT: "SLT",
    TelescopeModel.CPC: "CPC",
    TelescopeModel.GT: "GT",
    TelescopeModel.SE_45: "NexStar 4/5 SE",
    TelescopeModel.SE_68: "NexStar 6/8 SE",
}


@dataclass(frozen=True)
class UnknownModel:
    """
    A model code the library does not recognise.

    Attributes:
        code: Raw byte value returned by the hand controller
    """

    code: int

    @property
    def display_name(self) -> str:
        return f"Unknown model ({self.code})"

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True)
class Command:
    """
    One command exchange, built and consumed within a single call.

    Attributes:
        opcode: Command character(s), case-sensitive on the wire
        payload: Text sent directly after the opcode
        reply: Reply shape the protocol should wait for
        true_value: Byte value meaning "true" for SINGLE_BYTE_BOOLEAN replies
    """

    opcode: str
    payload: str = ""
    reply: ReplyShape = ReplyShape.NONE
    true_value: int | None = None

    def frame(self) -> str:
        """Return the command line without its terminator."""
        return f"{self.opcode}{self.payload}"

    def with_payload(self, payload: str) -> Command:
        return Command(self.opcode, payload, self.reply, self.true_value)


@dataclass
class HorizontalCoordinates:
    """
    Horizontal coordinate system (Alt/Az).

    Both values are logically modulo 360 degrees; encoding wraps at the
    360 degree boundary, so no range is enforced here.

    Attributes:
        azimuth: Azimuth in degrees (0=North, 90=East, 180=South, 270=West)
        altitude: Altitude (elevation) in degrees (0=horizon, 90=zenith)
    """

    azimuth: float
    altitude: float

    def __str__(self) -> str:
        return f"Az {self.azimuth:.2f}°, Alt {self.altitude:.2f}°"


@dataclass
class TelescopeConfig:
    """
    Configuration for the telescope link.

    The defaults are the hand controller's fixed serial parameters. The
    timeouts can be shortened for simulated links in tests.

    Attributes:
        port: Serial port path or pyserial URL (e.g. '/dev/ttyUSB0', 'COM3',
            'socket://192.168.4.1:4030', 'loop://')
        baudrate: Communication speed (9600 for NexStar)
        bytesize: Data bits per character
        parity: Parity setting ('N', 'E', 'O', 'M' or 'S')
        stopbits: Stop bits (1, 1.5 or 2)
        read_timeout: Seconds to wait for a reply byte
        write_timeout: Seconds to wait for a command line to be written
        line_terminator: Appended to every command line
        verbose: Enable debug logging
    """

    port: str = "/dev/ttyUSB0"
    baudrate: int = 9600
    bytesize: int = 8
    parity: str = "N"
    stopbits: float = 1
    read_timeout: float = 3.5
    write_timeout: float = 3.5
    line_terminator: str = "\n"
    verbose: bool = False
