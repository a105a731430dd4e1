"""
NexStar Serial Telescope Control Library

A Python client for the Celestron NexStar hand-controller serial protocol:
connection management, 32-bit rotor coordinate encoding, and the goto,
cancel, motion, model and alignment commands.

Serial parameters: 9600 baud, 8 data bits, no parity, 1 stop bit,
3.5 second read and write timeouts.

Example:
    >>> from nexstar_serial import NexStarTelescope, TelescopeConfig
    >>> with NexStarTelescope(TelescopeConfig(port='/dev/ttyUSB0')) as telescope:
    ...     print(telescope.get_model())
    ...     telescope.goto_azm_alt(180.0, 45.0)
"""

# Coordinate encoding
from nexstar_serial.codec import (
    decode_coordinate_pair,
    degrees_to_hex,
    degrees_to_rotor,
    encode_coordinate_pair,
    encode_hex,
    hex_to_degrees,
    rotor_to_degrees,
)

# Exceptions
from nexstar_serial.exceptions import (
    CommandError,
    InvalidCoordinateError,
    NexStarError,
    NotConnectedError,
    TelescopeConnectionError,
    TelescopeTimeoutError,
    TransportError,
)
from nexstar_serial.protocol import NexStarProtocol

# Main telescope class
from nexstar_serial.telescope import NexStarTelescope
from nexstar_serial.transport import MemoryTransport, SerialTransport, Transport

# Type definitions
from nexstar_serial.types import (
    Command,
    ConnectionState,
    HorizontalCoordinates,
    ProtocolState,
    ReplyShape,
    TelescopeConfig,
    TelescopeModel,
    UnknownModel,
)


__version__ = "0.1.0"

__all__ = [
    "Command",
    "CommandError",
    "ConnectionState",
    "HorizontalCoordinates",
    "InvalidCoordinateError",
    "MemoryTransport",
    # Exceptions
    "NexStarError",
    "NexStarProtocol",
    # Main telescope class
    "NexStarTelescope",
    "NotConnectedError",
    "ProtocolState",
    "ReplyShape",
    "SerialTransport",
    # Type definitions
    "TelescopeConfig",
    "TelescopeConnectionError",
    "TelescopeModel",
    "TelescopeTimeoutError",
    "Transport",
    "TransportError",
    "UnknownModel",
    "decode_coordinate_pair",
    "degrees_to_hex",
    # Coordinate encoding
    "degrees_to_rotor",
    "encode_coordinate_pair",
    "encode_hex",
    "hex_to_degrees",
    "rotor_to_degrees",
]
