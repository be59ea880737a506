"""Typed models for serial link discovery and settings."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PortInfo:
    device: str
    description: str
    hwid: str
    vid: int | None
    pid: int | None


@dataclass
class SerialConfig:
    port: str
    baud: int = 115200
    timeout_ms: int = 500
