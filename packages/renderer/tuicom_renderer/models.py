"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeConfig:
    name: str
    text: str
    border: str
    border_active: str
    bar_fg: str
    bar_bg: str
    alert: str


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    w: int
    h: int


@dataclass(frozen=True)
class ScreenLayout:
    outbound: Rect
    inbound: Rect
    bindings: Rect
    status: Rect
