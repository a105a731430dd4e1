"""
Custom exception classes for NexStar serial telescope control.

One exception per way an exchange with the hand controller can fail:
no link, a broken or silent link, overlapping commands, or an angle
that cannot be encoded.

An unrecognised model code is not an error: ``get_model()`` returns an
``UnknownModel`` value instead of raising.
"""

from __future__ import annotations


__all__ = [
    "CommandError",
    "InvalidCoordinateError",
    "NexStarError",
    "NotConnectedError",
    "TelescopeConnectionError",
    "TelescopeTimeoutError",
    "TransportError",
]


class NexStarError(Exception):
    """Root of every error this library raises; catch it to handle them all."""

    pass


class NotConnectedError(NexStarError):
    """
    Raised when a telescope command is issued with no open link.

    Checked before anything is written, so a failed call never leaves
    stray bytes on the serial line.
    """

    pass


class TransportError(NexStarError):
    """
    Raised when the serial link itself fails.

    Propagated unchanged to the caller. The library does not retry or
    reconnect.
    """

    pass


class TelescopeConnectionError(TransportError):
    """
    Raised when the port cannot be opened or a write fails outright.

    Typical causes are a wrong device path or ``socket://`` address, a port
    held by another program, or a USB-serial adapter unplugged mid-exchange.
    """

    pass


class TelescopeTimeoutError(TransportError):
    """
    Raised when no reply byte arrives (or a write stalls) within the
    configured timeout, 3.5 s by default.

    Usually the hand controller is off, still initialising, or showing a
    menu that blocks serial commands.
    """

    pass


class CommandError(NexStarError):
    """
    Raised when a command is started while another is awaiting its reply.

    Replies carry no identifier, so overlapping exchanges would hand one
    command's byte to another.
    """

    pass


class InvalidCoordinateError(NexStarError):
    """
    Raised for an angle with no rotor encoding (NaN or infinity).

    Finite angles of any size wrap at 360° and are always accepted.
    """

    pass
