"""
Unit tests for NexStar Protocol Layer

Exercises the command exchange against the scripted MemoryTransport.
"""

import unittest
from unittest.mock import MagicMock

import deal

from nexstar_serial.exceptions import CommandError, NotConnectedError, TelescopeTimeoutError
from nexstar_serial.protocol import (
    CANCEL_GOTO,
    GET_MODEL,
    GOTO_AZM_ALT,
    IS_ALIGNED,
    IS_GOTO_IN_PROGRESS,
    NexStarProtocol,
)
from nexstar_serial.transport import MemoryTransport
from nexstar_serial.types import Command, ProtocolState, ReplyShape


def open_link(responses=None):
    link = MemoryTransport(responses)
    link.open()
    return link


class TestCommandTable(unittest.TestCase):
    """Test suite for the command definitions"""

    def test_opcodes(self):
        """Test wire opcodes, including the lowercase model query"""
        self.assertEqual(GOTO_AZM_ALT.opcode, "b")
        self.assertEqual(CANCEL_GOTO.opcode, "M")
        self.assertEqual(IS_GOTO_IN_PROGRESS.opcode, "L")
        self.assertEqual(GET_MODEL.opcode, "m")
        self.assertEqual(IS_ALIGNED.opcode, "J")

    def test_reply_shapes(self):
        """Test which commands read a reply"""
        self.assertIs(GOTO_AZM_ALT.reply, ReplyShape.NONE)
        self.assertIs(CANCEL_GOTO.reply, ReplyShape.NONE)
        self.assertIs(IS_GOTO_IN_PROGRESS.reply, ReplyShape.SINGLE_BYTE_BOOLEAN)
        self.assertIs(GET_MODEL.reply, ReplyShape.SINGLE_BYTE)
        self.assertIs(IS_ALIGNED.reply, ReplyShape.SINGLE_BYTE_BOOLEAN)

    def test_boolean_true_values(self):
        """Test motion uses ASCII '1' while alignment uses numeric 1"""
        self.assertEqual(IS_GOTO_IN_PROGRESS.true_value, 49)
        self.assertEqual(IS_ALIGNED.true_value, 1)


class TestNexStarProtocol(unittest.TestCase):
    """Test suite for NexStarProtocol class"""

    # ========== Precondition Tests ==========

    def test_no_transport(self):
        """Test executing without a transport"""
        protocol = NexStarProtocol()
        self.assertFalse(protocol.is_open())
        with self.assertRaises(NotConnectedError):
            protocol.execute(CANCEL_GOTO)

    def test_closed_transport_no_io(self):
        """Test a closed link fails before any I/O"""
        link = MemoryTransport({"L": b"1"})
        protocol = NexStarProtocol(link)

        for call in (
            protocol.cancel_goto,
            protocol.is_goto_in_progress,
            protocol.get_model,
            protocol.is_alignment_complete,
        ):
            with self.assertRaises(NotConnectedError):
                call()

        self.assertEqual(link.written, [])
        self.assertEqual(link.discard_count, 0)

    def test_overlapping_command_rejected(self):
        """Test a second command while one is in flight is rejected"""
        link = open_link()
        protocol = NexStarProtocol(link)
        protocol.state = ProtocolState.AWAITING_REPLY

        with self.assertRaises(CommandError):
            protocol.cancel_goto()

        self.assertEqual(link.written, [])

    def test_nested_command_rejected(self):
        """Test a command issued while awaiting a reply is rejected"""
        transport = MagicMock()
        transport.is_open.return_value = True
        protocol = NexStarProtocol(transport)
        errors = []

        def read_byte():
            try:
                protocol.cancel_goto()
            except CommandError as e:
                errors.append(e)
            return ord("0")

        transport.read_byte.side_effect = read_byte

        self.assertFalse(protocol.is_goto_in_progress())
        self.assertEqual(len(errors), 1)
        transport.write_line.assert_called_once_with("L")
        self.assertIs(protocol.state, ProtocolState.IDLE)

    # ========== Exchange Tests ==========

    def test_no_reply_command_discards(self):
        """Test no-reply commands still discard the input buffer"""
        link = open_link()
        link.feed(b"#")
        protocol = NexStarProtocol(link)

        self.assertIsNone(protocol.execute(CANCEL_GOTO))

        self.assertEqual(link.written, ["M"])
        self.assertEqual(link.discard_count, 1)
        self.assertEqual(link.pending, b"")

    def test_goto_payload(self):
        """Test goto frames opcode and both coordinates"""
        link = open_link()
        protocol = NexStarProtocol(link)

        protocol.goto_azm_alt("80000000", "20000000")

        self.assertEqual(link.written, ["b80000000,20000000"])
        self.assertEqual(bytes(link.output), b"b80000000,20000000\n")

    def test_single_byte_reply(self):
        """Test a raw reply byte is returned as an int"""
        protocol = NexStarProtocol(open_link({"m": bytes([12])}))
        self.assertEqual(protocol.get_model(), 12)

    def test_model_code_must_be_one_byte(self):
        """Test a model reply outside one byte violates the get_model contract"""
        transport = MagicMock()
        transport.is_open.return_value = True
        transport.read_byte.return_value = 300

        with self.assertRaises(deal.PostContractError):
            NexStarProtocol(transport).get_model()

    def test_trailing_bytes_discarded(self):
        """Test bytes after the reply do not leak into the next exchange"""
        link = open_link({"L": b"1#"})
        protocol = NexStarProtocol(link)

        self.assertTrue(protocol.is_goto_in_progress())
        self.assertEqual(link.pending, b"")

        link.responses["L"] = b"0#"
        self.assertFalse(protocol.is_goto_in_progress())

    def test_goto_in_progress_only_ascii_one(self):
        """Test only byte 49 counts as moving"""
        link = open_link()
        protocol = NexStarProtocol(link)

        for value in range(256):
            link.responses["L"] = bytes([value])
            self.assertEqual(protocol.is_goto_in_progress(), value == 49, value)

    def test_goto_in_progress_ascii_zero(self):
        """Test ASCII '0' means not moving"""
        protocol = NexStarProtocol(open_link({"L": b"0"}))
        self.assertFalse(protocol.is_goto_in_progress())

    def test_alignment_numeric_one(self):
        """Test alignment is true for numeric 1"""
        protocol = NexStarProtocol(open_link({"J": bytes([1])}))
        self.assertTrue(protocol.is_alignment_complete())

    def test_alignment_ascii_one_is_false(self):
        """Test alignment is false for ASCII '1'"""
        protocol = NexStarProtocol(open_link({"J": b"1"}))
        self.assertFalse(protocol.is_alignment_complete())

    def test_alignment_zero(self):
        """Test alignment is false for numeric 0"""
        protocol = NexStarProtocol(open_link({"J": bytes([0])}))
        self.assertFalse(protocol.is_alignment_complete())

    def test_custom_command(self):
        """Test execute works for an arbitrary command definition"""
        link = open_link({"K": b"x"})
        protocol = NexStarProtocol(link)

        result = protocol.execute(Command("K", "x", ReplyShape.SINGLE_BYTE))

        self.assertEqual(result, ord("x"))
        self.assertEqual(link.written, ["Kx"])

    # ========== Failure Tests ==========

    def test_reply_timeout(self):
        """Test a missing reply raises and the protocol returns to idle"""
        link = open_link()
        protocol = NexStarProtocol(link)

        with self.assertRaises(TelescopeTimeoutError):
            protocol.is_goto_in_progress()

        self.assertIs(protocol.state, ProtocolState.IDLE)
        self.assertEqual(link.written, ["L"])

    def test_write_failure_propagates(self):
        """Test a write timeout propagates unmodified"""
        transport = MagicMock()
        transport.is_open.return_value = True
        error = TelescopeTimeoutError("Timeout writing command: M")
        transport.write_line.side_effect = error
        protocol = NexStarProtocol(transport)

        with self.assertRaises(TelescopeTimeoutError) as context:
            protocol.cancel_goto()

        self.assertIs(context.exception, error)
        transport.read_byte.assert_not_called()
        self.assertIs(protocol.state, ProtocolState.IDLE)

    # ========== State Machine Tests ==========

    def test_state_transitions(self):
        """Test the protocol is awaiting a reply while reading"""
        transport = MagicMock()
        transport.is_open.return_value = True
        protocol = NexStarProtocol(transport)
        seen = []

        def write_line(text):
            seen.append(("write", protocol.state))

        def read_byte():
            seen.append(("read", protocol.state))
            return ord("1")

        def discard_input():
            seen.append(("discard", protocol.state))

        transport.write_line.side_effect = write_line
        transport.read_byte.side_effect = read_byte
        transport.discard_input.side_effect = discard_input

        self.assertTrue(protocol.is_goto_in_progress())

        self.assertEqual(
            seen,
            [
                ("write", ProtocolState.IDLE),
                ("read", ProtocolState.AWAITING_REPLY),
                ("discard", ProtocolState.AWAITING_REPLY),
            ],
        )
        self.assertIs(protocol.state, ProtocolState.IDLE)

    def test_no_reply_state_after_write(self):
        """Test a no-reply command discards in the sent state"""
        transport = MagicMock()
        transport.is_open.return_value = True
        protocol = NexStarProtocol(transport)
        seen = []
        transport.discard_input.side_effect = lambda: seen.append(protocol.state)

        protocol.cancel_goto()

        self.assertEqual(seen, [ProtocolState.SENT])
        transport.read_byte.assert_not_called()


if __name__ == "__main__":
    unittest.main()
