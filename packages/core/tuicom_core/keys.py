"""Terminal-independent key events consumed by the session."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Key(str, Enum):
    ESC = "Esc"
    ENTER = "Enter"
    TAB = "Tab"
    BACKSPACE = "Backspace"


@dataclass(frozen=True)
class KeyEvent:
    """A special :class:`Key` or a single printable character."""

    code: Key | str

    @classmethod
    def char(cls, ch: str) -> "KeyEvent":
        if len(ch) != 1:
            raise ValueError(f"expected a single character, got {ch!r}")
        return cls(ch)

    @property
    def is_char(self) -> bool:
        return not isinstance(self.code, Key)
