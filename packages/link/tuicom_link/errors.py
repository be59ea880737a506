"""Failure taxonomy shared by every byte channel implementation."""

from __future__ import annotations


class ChannelError(Exception):
    """Base class for channel failures."""


class DeviceNotFoundError(ChannelError):
    """The device behind the channel is gone (unplugged or never present)."""


class ChannelIOError(ChannelError):
    """Any other read, write or configuration failure."""


class UnsupportedBaudRateError(ChannelError):
    """The device refused a requested baud rate."""
