"""
Coordinate Encoding/Decoding

The NexStar protocol expresses an angle as a 32-bit unsigned "rotor
unit" count over one full revolution, sent as 8 uppercase hex digits:

    0x00000000 = 0°
    0x40000000 = 90°
    0x80000000 = 180°
    0xFFFFFFFF = just under 360° (360° wraps to 0)
"""

from __future__ import annotations

import math
from typing import Final

import deal
from returns.result import Failure, Result, Success

from nexstar_serial.exceptions import InvalidCoordinateError


__all__ = [
    "ROTOR_UNITS_PER_REVOLUTION",
    "decode_coordinate_pair",
    "decode_hex",
    "degrees_to_hex",
    "degrees_to_rotor",
    "encode_coordinate_pair",
    "encode_hex",
    "hex_to_degrees",
    "rotor_to_degrees",
]


ROTOR_UNITS_PER_REVOLUTION: Final[int] = 0x100000000
"""Rotor units in one full 360 degree revolution (2^32)."""

_ROTOR_MASK: Final[int] = 0xFFFFFFFF
_HEX_DIGITS: Final[str] = "0123456789ABCDEFabcdef"


@deal.raises(InvalidCoordinateError)
@deal.post(lambda result: 0 <= result <= 0xFFFFFFFF, message="Rotor position must fit in 32 bits")
def degrees_to_rotor(degrees: float) -> int:
    """
    Convert decimal degrees to rotor units.

    The fraction of a revolution is scaled by 2^32, truncated toward zero,
    and reduced to 32 bits with two's-complement wraparound. Exact
    multiples of 360° therefore encode as 0 and negative angles wrap
    (-90° encodes as 0xC0000000). Whole turns are removed before scaling,
    so any finite angle encodes.

    Args:
        degrees: Angle in decimal degrees

    Returns:
        Unsigned 32-bit rotor position

    Raises:
        InvalidCoordinateError: If degrees is NaN or infinite
    """
    if not math.isfinite(degrees):
        raise InvalidCoordinateError(f"Cannot encode non-finite angle: {degrees!r}")

    fraction = math.fmod(degrees, 360.0) / 360.0
    return int(fraction * ROTOR_UNITS_PER_REVOLUTION) & _ROTOR_MASK


def rotor_to_degrees(units: int) -> float:
    """Convert rotor units back to decimal degrees in [0, 360)."""
    return (units & _ROTOR_MASK) / ROTOR_UNITS_PER_REVOLUTION * 360.0


def encode_hex(units: int) -> str:
    """
    Format a rotor position as 8 uppercase, zero-padded hex digits.

    Example:
        >>> encode_hex(2147483648)
        '80000000'
    """
    return f"{units & _ROTOR_MASK:08X}"


def decode_hex(text: str) -> int:
    """
    Parse 8 hex digits into a rotor position.

    Raises:
        ValueError: If text is not exactly 8 hex digits
    """
    if len(text) != 8 or any(c not in _HEX_DIGITS for c in text):
        raise ValueError(f"Expected 8 hex digits, got {text!r}")
    return int(text, 16)


def degrees_to_hex(degrees: float) -> str:
    """Convert degrees straight to the 8-digit wire form."""
    return encode_hex(degrees_to_rotor(degrees))


def hex_to_degrees(text: str) -> float:
    """Convert the 8-digit wire form straight to degrees."""
    return rotor_to_degrees(decode_hex(text))


def encode_coordinate_pair(value1: float, value2: float) -> str:
    """
    Encode a pair of angles (Az/Alt) to NexStar format.

    Args:
        value1: First coordinate in degrees
        value2: Second coordinate in degrees

    Returns:
        Formatted string: "XXXXXXXX,YYYYYYYY" (16 hex digits + comma)
    """
    return f"{degrees_to_hex(value1)},{degrees_to_hex(value2)}"


def decode_coordinate_pair(text: str) -> Result[tuple[float, float], str]:
    """
    Decode a "XXXXXXXX,YYYYYYYY" pair into degrees.

    Returns:
        Success with tuple of (value1_degrees, value2_degrees) or Failure
        with an error message
    """
    if len(text) != 17 or text[8] != ",":
        return Failure(f"Invalid coordinate pair: expected 17 chars with comma at position 8, got {text!r}")

    try:
        return Success((hex_to_degrees(text[:8]), hex_to_degrees(text[9:])))
    except ValueError as e:
        return Failure(f"Failed to decode coordinate values: {e}")
