"""Byte channel package: the abstract contract plus serial and loopback devices."""

from .channel import ByteChannel
from .errors import ChannelError, ChannelIOError, DeviceNotFoundError, UnsupportedBaudRateError
from .loopback import LoopbackChannel
from .models import PortInfo, SerialConfig
from .serial_channel import SerialChannel

__all__ = [
    "ByteChannel",
    "ChannelError",
    "ChannelIOError",
    "DeviceNotFoundError",
    "LoopbackChannel",
    "PortInfo",
    "SerialChannel",
    "SerialConfig",
    "UnsupportedBaudRateError",
]
