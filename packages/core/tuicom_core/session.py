"""Modal session: turns key events into transcript edits and channel traffic."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, ClassVar, Iterator, cast

from tuicom_link import ByteChannel, ChannelError, DeviceNotFoundError, UnsupportedBaudRateError

from .cursor import CursorTimer
from .errors import MalformedBaudInput
from .keys import Key, KeyEvent
from .transcript import Encoding, Transcript

logger = logging.getLogger("tuicom.session")

MAX_BAUD = 0xFFFF_FFFF
_MAX_BAUD_DIGITS = len(str(MAX_BAUD))
_DIGITS = frozenset("0123456789")


class Control(str, Enum):
    CONTINUE = "Continue"
    EXIT = "Exit"


class ModeKind(str, Enum):
    NORMAL = "Normal"
    INSERT = "Insert"
    QUIT_CONFIRM = "QuitConfirm"
    BAUD_INPUT = "BaudInput"


class Mode:
    kind: ClassVar[ModeKind]


@dataclass(frozen=True)
class Normal(Mode):
    kind = ModeKind.NORMAL


@dataclass(frozen=True)
class Insert(Mode):
    kind = ModeKind.INSERT


@dataclass(frozen=True)
class QuitConfirm(Mode):
    kind = ModeKind.QUIT_CONFIRM


@dataclass
class BaudInput(Mode):
    kind = ModeKind.BAUD_INPUT
    buffer: str = ""
    error: str | None = None


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view handed to the renderer for a single frame."""

    outbound_text: str
    inbound_text: str
    mode: ModeKind
    baud_buffer: str
    baud_error: str | None
    outbound_encoding: Encoding
    inbound_encoding: Encoding
    connected: bool
    crlf: bool
    device_name: str | None
    baud_rate: int | None


def _preview(text: str) -> str:
    if len(text) <= _MAX_BAUD_DIGITS + 2:
        return text
    return f"{text[:_MAX_BAUD_DIGITS]}..."


def parse_baud(text: str) -> int:
    if not text:
        raise MalformedBaudInput("baud rate is empty")
    if not (text.isascii() and text.isdigit()):
        raise MalformedBaudInput(f"not a number: {_preview(text)!r}")
    digits = text.lstrip("0")
    # int() refuses very long digit strings, so bound the length first.
    if not digits or len(digits) > _MAX_BAUD_DIGITS or int(digits) > MAX_BAUD:
        raise MalformedBaudInput(f"baud rate out of range: {_preview(text)}")
    return int(digits)


class Session:
    def __init__(self, channel: ByteChannel, crlf: bool = False, cursor: CursorTimer | None = None) -> None:
        self.channel = channel
        self.outbound = Transcript()
        self.inbound = Transcript()
        self.mode: Mode = Normal()
        self.cursor = cursor or CursorTimer()
        self.crlf = crlf
        self._connected = True

    @property
    def connected(self) -> bool:
        return self._connected

    def update(self, event: KeyEvent | None) -> Control:
        """Run one tick: key, then inbound drain, then cursor blink."""
        control = Control.CONTINUE
        if event is not None:
            control = self.handle_key(event)
        self._drain()
        self.cursor.update(key_pressed=event is not None)
        return control

    def handle_key(self, key: KeyEvent) -> Control:
        handlers: dict[ModeKind, Callable[[KeyEvent], Control]] = {
            ModeKind.NORMAL: self._normal_key,
            ModeKind.INSERT: self._insert_key,
            ModeKind.QUIT_CONFIRM: self._quit_key,
            ModeKind.BAUD_INPUT: self._baud_key,
        }
        return handlers[self.mode.kind](key)

    # --- Mode handlers ---
    def _normal_key(self, key: KeyEvent) -> Control:
        code = key.code
        if code in (Key.ESC, "q"):
            self.mode = QuitConfirm()
        elif code == "i":
            self.enter_insert()
        elif code == "h":
            self.inbound.switch_encoding()
        elif code == "H":
            self.outbound.switch_encoding()
        elif code == "c":
            self.inbound.clear()
        elif code == "C":
            self.outbound.clear()
        elif code == "l":
            self.crlf = not self.crlf
            logger.info(f"crlf {'on' if self.crlf else 'off'}", extra={"event": "crlf_toggled"})
        elif code == "b":
            self.mode = BaudInput()
        return Control.CONTINUE

    def _insert_key(self, key: KeyEvent) -> Control:
        if key.code == Key.ESC:
            self.leave_insert()
        elif key.code == Key.TAB:
            self._transmit(0x09)
        elif key.code == Key.ENTER:
            self._transmit(0x0A)
        elif key.is_char:
            for byte in str(key.code).encode("utf-8"):
                self._transmit(byte)
        return Control.CONTINUE

    def _quit_key(self, key: KeyEvent) -> Control:
        if key.code == "y":
            logger.info("quit confirmed", extra={"event": "quit"})
            return Control.EXIT
        if key.code in (Key.ESC, "n", "q"):
            self.mode = Normal()
        return Control.CONTINUE

    def _baud_key(self, key: KeyEvent) -> Control:
        mode = cast(BaudInput, self.mode)
        if key.code == Key.ESC:
            self.mode = Normal()
        elif key.code == Key.BACKSPACE:
            mode.buffer = mode.buffer[:-1]
            mode.error = None
        elif key.code == Key.ENTER:
            self._apply_baud(mode)
        elif key.is_char and key.code in _DIGITS:
            mode.buffer += str(key.code)
            mode.error = None
        return Control.CONTINUE

    def enter_insert(self) -> None:
        self.mode = Insert()
        self.cursor.start()

    def leave_insert(self) -> None:
        self.mode = Normal()
        self.cursor.stop()

    # --- Channel traffic ---
    def _transmit(self, byte: int) -> None:
        if not self._connected:
            return
        emitted = self.outbound.append_outgoing(byte)
        if emitted is None:
            return
        payload = b"\n\r" if self.crlf and emitted == 0x0A else bytes([emitted])
        try:
            self.channel.write_all(payload)
        except DeviceNotFoundError as exc:
            self.outbound.pop_last()
            self._device_lost(exc)
        except Exception:
            self.outbound.pop_last()
            raise

    def _apply_baud(self, mode: BaudInput) -> None:
        try:
            rate = parse_baud(mode.buffer)
            if self._connected:
                self.channel.set_baud(rate)
        except (MalformedBaudInput, UnsupportedBaudRateError) as exc:
            mode.error = str(exc)
            logger.info(f"baud rate rejected: {exc}", extra={"event": "baud_rejected"})
            return
        except DeviceNotFoundError as exc:
            self._device_lost(exc)
        else:
            logger.info(f"baud rate set to {rate}", extra={"event": "baud_set", "baud": rate})
        self.mode = Normal()

    def _drain(self) -> None:
        if not self._connected:
            return
        try:
            count = self.channel.available()
            if count:
                self.inbound.append_incoming(self.channel.read_exact(count))
        except DeviceNotFoundError as exc:
            self._device_lost(exc)

    def _device_lost(self, exc: DeviceNotFoundError) -> None:
        if self._connected:
            logger.warning(f"device lost: {exc}", extra={"event": "device_lost"})
        self._connected = False

    # --- Rendering ---
    def baud_rate(self) -> int | None:
        try:
            return self.channel.baud()
        except ChannelError:
            return None

    @contextmanager
    def frame(self) -> Iterator[SessionSnapshot]:
        """Snapshot with the cursor glyph on both transcripts for one draw."""
        mode = self.mode
        glyph = self.cursor.glyph
        with self.outbound.cursor_view(glyph) as tx_text, self.inbound.cursor_view(glyph) as rx_text:
            yield SessionSnapshot(
                outbound_text=tx_text,
                inbound_text=rx_text,
                mode=mode.kind,
                baud_buffer=mode.buffer if isinstance(mode, BaudInput) else "",
                baud_error=mode.error if isinstance(mode, BaudInput) else None,
                outbound_encoding=self.outbound.encoding,
                inbound_encoding=self.inbound.encoding,
                connected=self._connected,
                crlf=self.crlf,
                device_name=self.channel.name(),
                baud_rate=self.baud_rate(),
            )
