"""Blink timer for the insert-mode edit cursor."""

from __future__ import annotations

import time
from typing import Callable

BLINK_PERIOD_S = 0.5

NORMAL_GLYPH = "▉"
INSERT_GLYPH = "▎"
HIDDEN_GLYPH = " "


class CursorTimer:
    """Idle (block glyph) outside insert mode, blinking bar glyph inside it.

    While blinking, wall-clock time is accumulated between ticks and the
    bar flips once the total passes ``period_s``; the remainder carries over
    so the rhythm does not drift. A keypress shows the bar and restarts the
    count.
    """

    def __init__(self, period_s: float = BLINK_PERIOD_S, clock: Callable[[], float] = time.monotonic) -> None:
        self.period_s = period_s
        self._clock = clock
        self.blinking = False
        self.visible = True
        self.elapsed = 0.0
        self._last = 0.0

    def start(self) -> None:
        self.blinking = True
        self.visible = True
        self.elapsed = 0.0
        self._last = self._clock()

    def stop(self) -> None:
        self.blinking = False
        self.visible = True
        self.elapsed = 0.0

    def update(self, key_pressed: bool) -> None:
        if not self.blinking:
            return
        now = self._clock()
        delta = now - self._last
        self._last = now
        if key_pressed:
            self.visible = True
            self.elapsed = 0.0
            return
        self.elapsed += delta
        if self.elapsed > self.period_s:
            self.visible = not self.visible
            self.elapsed -= self.period_s

    @property
    def glyph(self) -> str:
        if not self.blinking:
            return NORMAL_GLYPH
        return INSERT_GLYPH if self.visible else HIDDEN_GLYPH
