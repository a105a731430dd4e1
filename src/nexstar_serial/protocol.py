"""
NexStar Communication Protocol Implementation

This module implements the command/response exchange with a Celestron
NexStar hand controller: command framing, reply reading, and buffer
discipline.

Each exchange is strictly synchronous:

    IDLE -> SENT -> AWAITING_REPLY -> IDLE

The protocol carries no sequence numbers, so the input buffer is
discarded after every exchange to keep the next reply aligned with its
command.

Commands:
- b<AZ>,<ALT>   Goto azimuth/altitude (no reply)
- M             Cancel goto (no reply)
- L             Goto in progress? ASCII '1' means moving
- m             Model code (must be lowercase)
- J             Alignment complete? numeric 1 means aligned
"""

from __future__ import annotations

import logging
import threading
from typing import Final

import deal

from nexstar_serial.exceptions import CommandError, NotConnectedError
from nexstar_serial.transport import Transport
from nexstar_serial.types import Command, ProtocolState, ReplyShape


__all__ = [
    "CANCEL_GOTO",
    "GET_MODEL",
    "GOTO_AZM_ALT",
    "IS_ALIGNED",
    "IS_GOTO_IN_PROGRESS",
    "NexStarProtocol",
]


logger = logging.getLogger(__name__)


GOTO_AZM_ALT: Final = Command("b")
CANCEL_GOTO: Final = Command("M")
IS_GOTO_IN_PROGRESS: Final = Command("L", reply=ReplyShape.SINGLE_BYTE_BOOLEAN, true_value=ord("1"))
GET_MODEL: Final = Command("m", reply=ReplyShape.SINGLE_BYTE)
IS_ALIGNED: Final = Command("J", reply=ReplyShape.SINGLE_BYTE_BOOLEAN, true_value=1)


class NexStarProtocol:
    """
    Low-level implementation of the NexStar command exchange.

    This class handles:
    - The connected precondition (checked before any I/O)
    - Command transmission and single-byte reply reception
    - Input buffer discard after every exchange

    It is not re-entrant. Callers must let one command finish before
    starting the next; an overlapping call raises CommandError.
    """

    def __init__(self, transport: Transport | None = None) -> None:
        self.transport = transport
        self.state = ProtocolState.IDLE
        self._busy = threading.Lock()

    def is_open(self) -> bool:
        """Check if the underlying transport is open."""
        return self.transport is not None and self.transport.is_open()

    def execute(self, command: Command) -> int | bool | None:
        """
        Send a command and read the reply its shape calls for.

        Args:
            command: Command to send

        Returns:
            None for ReplyShape.NONE, the raw byte for SINGLE_BYTE, or
            whether the byte equals ``command.true_value`` for
            SINGLE_BYTE_BOOLEAN

        Raises:
            NotConnectedError: If the transport is not open
            CommandError: If another command is still in flight
            TransportError: If the write or read fails or times out
        """
        transport = self.transport
        if transport is None or not transport.is_open():
            raise NotConnectedError("Telescope not connected")
        if self.state is not ProtocolState.IDLE or not self._busy.acquire(blocking=False):
            raise CommandError(f"Cannot send {command.opcode!r}: previous command still {self.state}")

        line = command.frame()
        try:
            logger.debug(f"Sending command: {line!r}")
            transport.write_line(line)
            self.state = ProtocolState.SENT

            reply: int | None = None
            if command.reply is not ReplyShape.NONE:
                self.state = ProtocolState.AWAITING_REPLY
                reply = transport.read_byte()
                logger.debug(f"Received reply byte: {reply!r}")

            transport.discard_input()
        finally:
            self.state = ProtocolState.IDLE
            self._busy.release()

        if command.reply is ReplyShape.SINGLE_BYTE_BOOLEAN:
            return reply == command.true_value
        return reply

    # ========== Specific Protocol Commands ==========

    def goto_azm_alt(self, azimuth_hex: str, altitude_hex: str) -> None:
        """
        Slew to an encoded azimuth/altitude.
        Command: b<AZ>,<ALT>
        Response: none

        Success only means the line was written; the hand controller does
        not acknowledge the goto.
        """
        self.execute(GOTO_AZM_ALT.with_payload(f"{azimuth_hex},{altitude_hex}"))

    def cancel_goto(self) -> None:
        """
        Cancel current goto.
        Command: M
        Response: none
        """
        self.execute(CANCEL_GOTO)

    def is_goto_in_progress(self) -> bool:
        """
        Check if goto is in progress.
        Command: L
        Response: '1' while slewing, anything else otherwise
        """
        return bool(self.execute(IS_GOTO_IN_PROGRESS))

    @deal.post(lambda result: isinstance(result, int) and 0 <= result <= 0xFF, message="Model code must be one byte")
    def get_model(self) -> int:
        """
        Get telescope model code.
        Command: m
        Response: <model> (one byte)
        """
        return self.execute(GET_MODEL)  # type: ignore[return-value]

    def is_alignment_complete(self) -> bool:
        """
        Check alignment.
        Command: J
        Response: numeric 1 when aligned (not the ASCII digit)
        """
        return bool(self.execute(IS_ALIGNED))
