"""Abstract byte channel consumed by the session."""

from __future__ import annotations

import abc


class ByteChannel(abc.ABC):
    """Bidirectional byte device.

    Implementations raise :class:`~tuicom_link.errors.DeviceNotFoundError`
    when the device has disappeared and
    :class:`~tuicom_link.errors.ChannelIOError` for every other failure.
    """

    @abc.abstractmethod
    def available(self) -> int:
        """Number of bytes that can be read without waiting."""

    @abc.abstractmethod
    def read_exact(self, count: int) -> bytes:
        """Read exactly ``count`` bytes, blocking up to the channel timeout."""

    @abc.abstractmethod
    def write_all(self, data: bytes) -> None:
        """Write every byte of ``data``."""

    @abc.abstractmethod
    def baud(self) -> int:
        ...

    @abc.abstractmethod
    def set_baud(self, rate: int) -> None:
        ...

    @abc.abstractmethod
    def name(self) -> str | None:
        ...

    def close(self) -> None:
        pass
