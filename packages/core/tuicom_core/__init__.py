"""Core terminal session: transcripts, cursor, modal key handling, and app services."""

from .config import AppConfig, load_config, save_config
from .cursor import CursorTimer
from .diagnostics import DiagnosticsExporter, build_doctor_payload
from .errors import MalformedBaudInput
from .keys import Key, KeyEvent
from .performance import BudgetStatus, PerformanceController, PerformanceTargets
from .session import (
    BaudInput,
    Control,
    Insert,
    Mode,
    ModeKind,
    Normal,
    QuitConfirm,
    Session,
    SessionSnapshot,
    parse_baud,
)
from .transcript import Encoding, NibbleAccumulator, Transcript

__all__ = [
    "AppConfig",
    "BaudInput",
    "BudgetStatus",
    "Control",
    "CursorTimer",
    "DiagnosticsExporter",
    "Encoding",
    "Insert",
    "Key",
    "KeyEvent",
    "MalformedBaudInput",
    "Mode",
    "ModeKind",
    "NibbleAccumulator",
    "Normal",
    "PerformanceController",
    "PerformanceTargets",
    "QuitConfirm",
    "Session",
    "SessionSnapshot",
    "Transcript",
    "build_doctor_payload",
    "load_config",
    "parse_baud",
    "save_config",
]
