"""Serial channel backed by pyserial."""

from __future__ import annotations

import errno
from typing import Any

import serial
from serial.tools import list_ports

from .channel import ByteChannel
from .errors import ChannelError, ChannelIOError, DeviceNotFoundError, UnsupportedBaudRateError
from .models import PortInfo, SerialConfig


# errno values the OS reports once a USB adapter is unplugged.
_DEVICE_GONE = frozenset({errno.ENOENT, errno.ENODEV, errno.ENXIO, errno.EIO})


def translate_error(exc: BaseException, action: str) -> ChannelError:
    """Map a pyserial/OS failure onto the channel error taxonomy."""
    code = getattr(exc, "errno", None)
    if code is None and isinstance(exc.__context__, OSError):
        code = exc.__context__.errno
    if code in _DEVICE_GONE or isinstance(exc, FileNotFoundError) or "disconnected" in str(exc):
        return DeviceNotFoundError(f"{action}: {exc}")
    return ChannelIOError(f"{action}: {exc}")


class SerialChannel(ByteChannel):
    """Thin wrapper over pyserial with 8N1 settings and bounded timeouts.

    ``port`` may be a device path or any pyserial URL (``loop://``,
    ``socket://host:port``, ``rfc2217://...``).
    """

    def __init__(self) -> None:
        self._serial: Any | None = None
        self.config: SerialConfig | None = None

    @property
    def is_open(self) -> bool:
        return bool(self._serial and self._serial.is_open)

    def open(self, port: str, baud: int = 115200, timeout_ms: int = 500) -> None:
        if self.is_open:
            return
        self.config = SerialConfig(port=port, baud=baud, timeout_ms=timeout_ms)
        timeout = max(timeout_ms, 1) / 1000
        try:
            self._serial = serial.serial_for_url(
                port,
                baudrate=baud,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=timeout,
                write_timeout=timeout,
            )
        except ValueError as exc:
            raise UnsupportedBaudRateError(f"could not open {port}: {exc}") from exc
        except (serial.SerialException, OSError) as exc:
            raise translate_error(exc, f"could not open {port}") from exc

    def close(self) -> None:
        if self._serial is not None:
            self._serial.close()
            self._serial = None

    def _port(self) -> Any:
        if not self.is_open:
            raise ChannelIOError("Serial port is not open")
        return self._serial

    def available(self) -> int:
        port = self._port()
        try:
            return int(port.in_waiting)
        except (serial.SerialException, OSError) as exc:
            raise translate_error(exc, "could not query pending bytes") from exc

    def read_exact(self, count: int) -> bytes:
        if count <= 0:
            return b""
        port = self._port()
        try:
            data = bytes(port.read(count))
        except (serial.SerialException, OSError) as exc:
            raise translate_error(exc, "read failed") from exc
        if len(data) != count:
            raise ChannelIOError(f"read timed out after {len(data)} of {count} bytes")
        return data

    def write_all(self, data: bytes) -> None:
        port = self._port()
        try:
            written = port.write(data)
        except (serial.SerialException, OSError) as exc:
            raise translate_error(exc, "write failed") from exc
        if written is not None and int(written) != len(data):
            raise ChannelIOError(f"short write: {written} of {len(data)} bytes")

    def baud(self) -> int:
        return int(self._port().baudrate)

    def set_baud(self, rate: int) -> None:
        port = self._port()
        previous = port.baudrate
        try:
            port.baudrate = rate
        except ValueError as exc:
            # pyserial records the rate before reconfiguring the port.
            port.baudrate = previous
            raise UnsupportedBaudRateError(str(exc)) from exc
        except (serial.SerialException, OSError) as exc:
            raise translate_error(exc, f"could not set baud rate {rate}") from exc
        if self.config is not None:
            self.config.baud = rate

    def name(self) -> str | None:
        return self.config.port if self.config else None

    @staticmethod
    def discover() -> list[PortInfo]:
        ports: list[PortInfo] = []
        for item in list_ports.comports():
            ports.append(
                PortInfo(
                    device=item.device,
                    description=item.description,
                    hwid=item.hwid,
                    vid=item.vid,
                    pid=item.pid,
                )
            )
        return ports
