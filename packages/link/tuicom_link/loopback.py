"""In-memory channel for running without hardware."""

from __future__ import annotations

from collections import deque

from .channel import ByteChannel
from .errors import ChannelIOError, UnsupportedBaudRateError


class LoopbackChannel(ByteChannel):
    """Byte queue that hands every written byte back to the reader."""

    def __init__(self, baud: int = 115200, name: str = "loopback", echo: bool = True) -> None:
        self._pending: deque[int] = deque()
        self._baud = baud
        self._name = name
        self.echo = echo

    def feed(self, data: bytes) -> None:
        """Queue bytes as if the remote end had sent them."""
        self._pending.extend(data)

    def available(self) -> int:
        return len(self._pending)

    def read_exact(self, count: int) -> bytes:
        if count > len(self._pending):
            raise ChannelIOError(f"read timed out after {len(self._pending)} of {count} bytes")
        return bytes(self._pending.popleft() for _ in range(count))

    def write_all(self, data: bytes) -> None:
        if self.echo:
            self._pending.extend(data)

    def baud(self) -> int:
        return self._baud

    def set_baud(self, rate: int) -> None:
        if rate <= 0:
            raise UnsupportedBaudRateError(f"invalid baud rate: {rate}")
        self._baud = rate

    def name(self) -> str | None:
        return self._name
