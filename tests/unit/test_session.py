import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "link"))

from tuicom_core.cursor import INSERT_GLYPH, NORMAL_GLYPH
from tuicom_core.errors import MalformedBaudInput
from tuicom_core.keys import Key, KeyEvent
from tuicom_core.session import BaudInput, Control, ModeKind, Normal, Session, parse_baud
from tuicom_core.transcript import Encoding
from tuicom_link import ByteChannel, ChannelIOError, DeviceNotFoundError, UnsupportedBaudRateError


class FakeChannel(ByteChannel):
    def __init__(self, incoming=b""):
        self.incoming = bytearray(incoming)
        self.writes = []
        self.rate = 9600
        self.write_error = None
        self.read_error = None
        self.baud_error = None
        self.calls = 0

    def available(self):
        self.calls += 1
        if self.read_error:
            raise self.read_error
        return len(self.incoming)

    def read_exact(self, count):
        self.calls += 1
        data = bytes(self.incoming[:count])
        del self.incoming[:count]
        return data

    def write_all(self, data):
        self.calls += 1
        if self.write_error:
            raise self.write_error
        self.writes.append(bytes(data))

    def baud(self):
        return self.rate

    def set_baud(self, rate):
        self.calls += 1
        if self.baud_error:
            raise self.baud_error
        self.rate = rate

    def name(self):
        return "fake0"


def keys(*codes):
    return [KeyEvent(c) for c in codes]


class SessionTests(unittest.TestCase):
    def setUp(self):
        self.channel = FakeChannel()
        self.session = Session(self.channel)

    def press(self, *codes):
        results = [self.session.update(k) for k in keys(*codes)]
        return results[-1] if results else None

    def test_quit_then_no_returns_to_normal(self):
        self.assertIs(self.press("q"), Control.CONTINUE)
        self.assertIs(self.session.mode.kind, ModeKind.QUIT_CONFIRM)
        self.assertIs(self.press("n"), Control.CONTINUE)
        self.assertEqual(self.session.mode, Normal())

    def test_quit_then_yes_exits(self):
        self.press(Key.ESC)
        self.assertIs(self.press("y"), Control.EXIT)

    def test_quit_confirm_ignores_other_keys(self):
        self.press("q", "x")
        self.assertIs(self.session.mode.kind, ModeKind.QUIT_CONFIRM)

    def test_insert_then_escape_restores_block_cursor(self):
        self.press("i")
        self.assertIs(self.session.mode.kind, ModeKind.INSERT)
        self.assertEqual(self.session.cursor.glyph, INSERT_GLYPH)
        self.press(Key.ESC)
        self.assertEqual(self.session.mode, Normal())
        self.assertEqual(self.session.cursor.glyph, NORMAL_GLYPH)

    def test_insert_sends_characters(self):
        self.press("i", "A", "b")
        self.assertEqual(self.channel.writes, [b"A", b"b"])
        self.assertEqual(self.session.outbound.text, "Ab")

    def test_insert_sends_utf8_bytes(self):
        self.press("i", "é")
        self.assertEqual(b"".join(self.channel.writes), "é".encode("utf-8"))
        self.assertEqual(bytes(self.session.outbound.raw), "é".encode("utf-8"))

    def test_normal_mode_keys_are_not_sent(self):
        self.press("x", "A")
        self.assertEqual(self.channel.writes, [])

    def test_tab_sent_raw_shown_as_spaces(self):
        self.press("i", Key.TAB)
        self.assertEqual(self.channel.writes, [b"\t"])
        self.assertEqual(self.session.outbound.text, "    ")

    def test_enter_with_crlf(self):
        self.press("l", "i", Key.ENTER)
        self.assertEqual(self.channel.writes, [b"\n\r"])
        self.assertEqual(bytes(self.session.outbound.raw), b"\n")
        self.assertEqual(self.session.outbound.text, "\n")

    def test_enter_without_crlf(self):
        self.press("i", Key.ENTER)
        self.assertEqual(self.channel.writes, [b"\n"])

    def test_hex_typing_sends_on_pair(self):
        self.press("H", "i", "4")
        self.assertEqual(self.channel.writes, [])
        self.assertEqual(self.session.outbound.pending_nibble, 4)
        self.press("1")
        self.assertEqual(self.channel.writes, [b"A"])
        self.assertTrue(self.session.outbound.text.endswith("41 "))

    def test_failed_write_rolls_back(self):
        self.press("i")
        self.channel.write_error = ChannelIOError("boom")
        with self.assertRaises(ChannelIOError):
            self.session.update(KeyEvent("A"))
        self.assertEqual(bytes(self.session.outbound.raw), b"")
        self.assertEqual(self.session.outbound.text, "")

    def test_failed_hex_write_rolls_back_whole_byte(self):
        self.press("H", "i", "4")
        self.channel.write_error = ChannelIOError("boom")
        with self.assertRaises(ChannelIOError):
            self.session.update(KeyEvent("1"))
        self.assertEqual(self.session.outbound.text, "")
        self.assertEqual(bytes(self.session.outbound.raw), b"")
        self.assertIsNone(self.session.outbound.pending_nibble)

    def test_device_lost_on_write_rolls_back_and_degrades(self):
        self.press("i")
        self.channel.write_error = DeviceNotFoundError("gone")
        self.assertIs(self.press("A"), Control.CONTINUE)
        self.assertFalse(self.session.connected)
        self.assertEqual(self.session.outbound.text, "")

        calls = self.channel.calls
        self.press("B", Key.ENTER)
        self.assertEqual(self.channel.calls, calls)
        self.assertEqual(self.session.outbound.text, "")

    def test_drain_appends_incoming(self):
        self.channel.incoming.extend(b"\n\t")
        self.session.update(None)
        self.assertEqual(self.session.inbound.text, "\n    ")
        self.assertEqual(self.channel.incoming, b"")

    def test_drain_device_lost_is_not_fatal(self):
        self.channel.read_error = DeviceNotFoundError("gone")
        self.assertIs(self.session.update(None), Control.CONTINUE)
        self.assertFalse(self.session.connected)
        calls = self.channel.calls
        self.session.update(None)
        self.assertEqual(self.channel.calls, calls)

    def test_drain_io_error_propagates(self):
        self.channel.read_error = ChannelIOError("broken")
        with self.assertRaises(ChannelIOError):
            self.session.update(None)

    def test_key_handled_before_drain(self):
        self.channel = FakeChannel()
        session = Session(self.channel)
        echoed = []
        original = self.channel.write_all

        def echo(data):
            original(data)
            self.channel.incoming.extend(data)
            echoed.append(data)

        self.channel.write_all = echo
        session.update(KeyEvent("i"))
        session.update(KeyEvent("Z"))
        self.assertEqual(session.inbound.text, "Z")

    def test_toggle_and_clear_are_independent(self):
        self.channel.incoming.extend(b"AB")
        self.press("i", "x", Key.ESC)
        self.press("h")
        self.assertIs(self.session.inbound.encoding, Encoding.HEX)
        self.assertIs(self.session.outbound.encoding, Encoding.ASCII)
        self.assertEqual(self.session.inbound.text, "41 42 ")
        self.press("C")
        self.assertEqual(self.session.outbound.text, "")
        self.assertEqual(self.session.inbound.text, "41 42 ")
        self.press("c")
        self.assertEqual(self.session.inbound.text, "")

    def test_baud_input_applies_rate(self):
        self.press("b", "1", "1", "5", "2", "0", "x", "0", "0", Key.ENTER)
        self.assertEqual(self.channel.rate, 115200)
        self.assertEqual(self.session.mode, Normal())

    def test_baud_input_backspace_and_escape(self):
        self.press("b", "9", "6", Key.BACKSPACE)
        self.assertEqual(self.session.mode, BaudInput(buffer="9"))
        self.press(Key.ESC)
        self.assertEqual(self.session.mode, Normal())
        self.assertEqual(self.channel.rate, 9600)

    def test_malformed_baud_stays_in_input(self):
        self.press("b", Key.ENTER)
        mode = self.session.mode
        self.assertIsInstance(mode, BaudInput)
        self.assertEqual(mode.buffer, "")
        self.assertIsNotNone(mode.error)

        self.press("9", "9", "9", "9", "9", "9", "9", "9", "9", "9", "9", Key.ENTER)
        self.assertEqual(self.session.mode.buffer, "99999999999")
        self.assertIn("out of range", self.session.mode.error)
        self.assertEqual(self.channel.rate, 9600)

        self.press(Key.BACKSPACE)
        self.assertIsNone(self.session.mode.error)

    def test_oversized_baud_entry_stays_in_input(self):
        self.press("b", *["9"] * 5000)
        self.assertIs(self.press(Key.ENTER), Control.CONTINUE)
        mode = self.session.mode
        self.assertIsInstance(mode, BaudInput)
        self.assertEqual(len(mode.buffer), 5000)
        self.assertIn("out of range", mode.error)
        self.assertLess(len(mode.error), 64)
        self.assertEqual(self.channel.rate, 9600)

    def test_baud_entry_while_disconnected_skips_channel(self):
        self.channel.read_error = DeviceNotFoundError("gone")
        self.session.update(None)
        self.assertFalse(self.session.connected)

        calls = self.channel.calls
        self.press("b", "5", "7", "6", "0", "0", Key.ENTER)
        self.assertEqual(self.session.mode, Normal())
        self.assertEqual(self.channel.calls, calls)
        self.assertEqual(self.channel.rate, 9600)

    def test_rejected_baud_stays_in_input(self):
        self.channel.baud_error = UnsupportedBaudRateError("Invalid baud rate: 7")
        self.press("b", "7", Key.ENTER)
        self.assertEqual(self.session.mode, BaudInput(buffer="7", error="Invalid baud rate: 7"))

    def test_baud_io_error_is_fatal(self):
        self.channel.baud_error = ChannelIOError("ioctl failed")
        with self.assertRaises(ChannelIOError):
            self.press("b", "7", Key.ENTER)

    def test_frame_snapshot_and_cursor_cleanup(self):
        self.channel.incoming.extend(b"hi")
        self.session.update(None)
        with self.session.frame() as snap:
            self.assertEqual(snap.inbound_text, "hi" + NORMAL_GLYPH)
            self.assertEqual(snap.outbound_text, NORMAL_GLYPH)
            self.assertEqual(snap.device_name, "fake0")
            self.assertEqual(snap.baud_rate, 9600)
            self.assertTrue(snap.connected)
        self.assertEqual(self.session.inbound.text, "hi")
        self.assertEqual(self.session.outbound.text, "")

    def test_frame_cleanup_when_renderer_fails(self):
        with self.assertRaises(ValueError):
            with self.session.frame():
                raise ValueError("draw failed")
        self.assertEqual(self.session.outbound.text, "")
        self.assertEqual(self.session.inbound.text, "")

    def test_frame_reports_baud_input(self):
        self.press("b", "4", "8")
        with self.session.frame() as snap:
            self.assertIs(snap.mode, ModeKind.BAUD_INPUT)
            self.assertEqual(snap.baud_buffer, "48")


class ParseBaudTests(unittest.TestCase):
    def test_valid(self):
        self.assertEqual(parse_baud("9600"), 9600)
        self.assertEqual(parse_baud("0" * 5000 + "9600"), 9600)

    def test_long_input_error_is_truncated(self):
        with self.assertRaises(MalformedBaudInput) as ctx:
            parse_baud("9" * 5000)
        self.assertTrue(str(ctx.exception).endswith("..."))

    def test_invalid(self):
        for text in ("", "0", "12a", "4294967296", "0" * 20, "9" * 5000):
            with self.subTest(text=text):
                with self.assertRaises(MalformedBaudInput):
                    parse_baud(text)


if __name__ == "__main__":
    unittest.main()
