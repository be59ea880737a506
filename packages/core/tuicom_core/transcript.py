"""Per-direction byte log with ASCII and hex renderings."""

from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Iterable, Iterator


class Encoding(str, Enum):
    ASCII = "ASCII"
    HEX = "HEX"

    def toggled(self) -> "Encoding":
        return Encoding.HEX if self is Encoding.ASCII else Encoding.ASCII


# Tabs never reach the screen; a fixed width keeps wrapping predictable.
TAB_EXPANSION = "    "

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def render_byte(byte: int, encoding: Encoding) -> str:
    if encoding is Encoding.HEX:
        return f"{byte:02X} "
    if byte == 0x09:
        return TAB_EXPANSION
    return chr(byte)


def render(data: Iterable[int], encoding: Encoding) -> str:
    return "".join(render_byte(b, encoding) for b in data)


class NibbleAccumulator:
    """Holds the high nibble of a hex byte until its low nibble is typed."""

    def __init__(self) -> None:
        self.pending: int | None = None

    def push(self, nibble: int) -> int | None:
        if not 0 <= nibble <= 0x0F:
            raise ValueError(f"nibble out of range: {nibble}")
        if self.pending is None:
            self.pending = nibble
            return None
        value = (self.pending << 4) | nibble
        self.pending = None
        return value

    def clear(self) -> None:
        self.pending = None


class Transcript:
    """Raw bytes plus their rendering in the current :class:`Encoding`.

    ``raw`` is the source of truth; ``text`` always equals
    ``render(raw, encoding)`` apart from one trailing typed hex digit while
    a nibble is pending.
    """

    def __init__(self, encoding: Encoding = Encoding.ASCII) -> None:
        self.raw = bytearray()
        self.text = ""
        self.encoding = encoding
        self._nibbles = NibbleAccumulator()

    @property
    def pending_nibble(self) -> int | None:
        return self._nibbles.pending

    def append_outgoing(self, byte: int) -> int | None:
        """Feed one typed byte; return the byte to transmit, if any."""
        if self.encoding is Encoding.ASCII:
            self.raw.append(byte)
            self.text += render_byte(byte, Encoding.ASCII)
            return byte

        digit = chr(byte)
        if digit not in _HEX_DIGITS:
            return None
        value = self._nibbles.push(int(digit, 16))
        self.text += digit.upper()
        if value is None:
            return None
        self.raw.append(value)
        self.text += " "
        return value

    def append_incoming(self, data: bytes) -> None:
        self.raw.extend(data)
        self.text += render(data, self.encoding)

    def switch_encoding(self) -> None:
        self.encoding = self.encoding.toggled()
        self._nibbles.clear()
        self.text = render(self.raw, self.encoding)

    def pop_last(self) -> int | None:
        """Undo the last logical unit; return the raw byte removed, if any."""
        if self._nibbles.pending is not None:
            self._nibbles.clear()
            self.text = self.text[:-1]
            return None
        if not self.raw:
            return None
        byte = self.raw.pop()
        self.text = self.text[: len(self.text) - len(render_byte(byte, self.encoding))]
        return byte

    def clear(self) -> None:
        self.raw.clear()
        self.text = ""
        self._nibbles.clear()

    @contextmanager
    def cursor_view(self, glyph: str) -> Iterator[str]:
        """Expose ``text`` with ``glyph`` appended for one render pass."""
        self.text += glyph
        try:
            yield self.text
        finally:
            self.text = self.text[: len(self.text) - len(glyph)]
