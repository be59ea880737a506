"""Curses screen: setup/teardown, key translation and frame drawing."""

from __future__ import annotations

import curses
from contextlib import contextmanager
from typing import Any, Iterator

from tuicom_core.cursor import INSERT_GLYPH
from tuicom_core.keys import Key, KeyEvent
from tuicom_core.session import ModeKind, SessionSnapshot

from .layout import bindings_text, centered_rect, pane_title, split_screen, status_text, visible_lines, wrap_lines
from .models import Rect, ThemeConfig
from .themes import get_theme

_PLAIN_BOX = "┌┐└┘─│"
_THICK_BOX = "┏┓┗┛━┃"

_COLOR_NAMES = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
    "default": -1,
}

_PAIR_TEXT, _PAIR_BORDER, _PAIR_ACTIVE, _PAIR_BAR, _PAIR_ALERT = range(1, 6)

_ESCDELAY_MS = 25


@contextmanager
def terminal_screen() -> Iterator[Any]:
    """Raw-mode curses screen, restored on every exit path."""
    stdscr = curses.initscr()
    try:
        curses.noecho()
        curses.raw()
        stdscr.keypad(True)
        curses.set_escdelay(_ESCDELAY_MS)
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        yield stdscr
    finally:
        stdscr.keypad(False)
        curses.noraw()
        curses.echo()
        curses.endwin()


def translate_key(ch: int | str) -> KeyEvent | None:
    """Map a ``get_wch`` result onto a :class:`KeyEvent`; ``None`` if unused."""
    if isinstance(ch, str):
        if ch == "\x1b":
            return KeyEvent(Key.ESC)
        if ch in ("\n", "\r"):
            return KeyEvent(Key.ENTER)
        if ch == "\t":
            return KeyEvent(Key.TAB)
        if ch in ("\x7f", "\b"):
            return KeyEvent(Key.BACKSPACE)
        if ch.isprintable():
            return KeyEvent.char(ch)
        return None
    if ch == curses.KEY_ENTER:
        return KeyEvent(Key.ENTER)
    if ch == curses.KEY_BACKSPACE:
        return KeyEvent(Key.BACKSPACE)
    return None


def read_key(stdscr: Any, timeout_ms: int) -> KeyEvent | None:
    """Wait up to ``timeout_ms`` for one key."""
    stdscr.timeout(timeout_ms)
    try:
        ch = stdscr.get_wch()
    except curses.error:
        return None
    return translate_key(ch)


class TerminalRenderer:
    """Draws a :class:`SessionSnapshot`; never touches the session itself."""

    def __init__(self, stdscr: Any, theme_name: str | None = None) -> None:
        self.stdscr = stdscr
        self.theme: ThemeConfig = get_theme(theme_name)
        self._colors = False
        self._init_colors()

    def _init_colors(self) -> None:
        if not curses.has_colors():
            return
        curses.start_color()
        curses.use_default_colors()
        t = self.theme
        curses.init_pair(_PAIR_TEXT, _COLOR_NAMES[t.text], -1)
        curses.init_pair(_PAIR_BORDER, _COLOR_NAMES[t.border], -1)
        curses.init_pair(_PAIR_ACTIVE, _COLOR_NAMES[t.border_active], -1)
        curses.init_pair(_PAIR_BAR, _COLOR_NAMES[t.bar_fg], _COLOR_NAMES[t.bar_bg])
        curses.init_pair(_PAIR_ALERT, _COLOR_NAMES[t.alert], -1)
        self._colors = True

    def _attr(self, pair: int, extra: int = curses.A_NORMAL) -> int:
        return (curses.color_pair(pair) | extra) if self._colors else extra

    def draw(self, snapshot: SessionSnapshot) -> None:
        self.stdscr.erase()
        height, width = self.stdscr.getmaxyx()
        layout = split_screen(width, height)

        insert = snapshot.mode is ModeKind.INSERT
        self._draw_pane(
            layout.outbound,
            pane_title("TX", snapshot.outbound_encoding, snapshot.crlf),
            snapshot.outbound_text,
            active=insert,
        )
        self._draw_pane(layout.inbound, pane_title("RX", snapshot.inbound_encoding), snapshot.inbound_text)
        self._draw_bar(layout.bindings, bindings_text(), self._attr(_PAIR_BAR))

        status_attr = self._attr(_PAIR_BAR, curses.A_BOLD)
        if not snapshot.connected:
            status_attr = self._attr(_PAIR_ALERT, curses.A_BOLD | curses.A_REVERSE)
        self._draw_bar(layout.status, status_text(snapshot), status_attr)

        screen = Rect(0, 0, width, height)
        if snapshot.mode is ModeKind.QUIT_CONFIRM:
            self._draw_popup(centered_rect(30, 20, screen), "Quit", ["Are you sure you want to quit (y/n)?"])
        elif snapshot.mode is ModeKind.BAUD_INPUT:
            lines = [f"New baud rate: {snapshot.baud_buffer}{INSERT_GLYPH}"]
            if snapshot.baud_error:
                lines.append(snapshot.baud_error)
            self._draw_popup(centered_rect(40, 20, screen), "Baud", lines, alert_from=1)

        self.stdscr.noutrefresh()
        curses.doupdate()

    def safe_addstr(self, row: int, col: int, text: str, attr: int = curses.A_NORMAL) -> None:
        height, width = self.stdscr.getmaxyx()
        if row < 0 or row >= height or col >= width:
            return
        try:
            self.stdscr.addstr(row, col, text[: max(width - col, 0)], attr)
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen.
            pass

    def _draw_box(self, rect: Rect, title: str, attr: int, thick: bool = False) -> None:
        if rect.w < 2 or rect.h < 2:
            return
        tl, tr, bl, br, horiz, vert = _THICK_BOX if thick else _PLAIN_BOX
        inner = rect.w - 2
        self.safe_addstr(rect.y, rect.x, tl + horiz * inner + tr, attr)
        for row in range(rect.y + 1, rect.y + rect.h - 1):
            self.safe_addstr(row, rect.x, vert, attr)
            self.safe_addstr(row, rect.x + rect.w - 1, vert, attr)
        self.safe_addstr(rect.y + rect.h - 1, rect.x, bl + horiz * inner + br, attr)
        if title and inner > 2:
            self.safe_addstr(rect.y, rect.x + 1, title[:inner], attr | curses.A_BOLD)

    def _draw_pane(self, rect: Rect, title: str, text: str, active: bool = False) -> None:
        border = self._attr(_PAIR_ACTIVE if active else _PAIR_BORDER)
        self._draw_box(rect, title, border, thick=active)
        inner_w, inner_h = rect.w - 2, rect.h - 2
        if inner_w <= 0 or inner_h <= 0:
            return
        for offset, line in enumerate(visible_lines(text, inner_w, inner_h)):
            self.safe_addstr(rect.y + 1 + offset, rect.x + 1, line, self._attr(_PAIR_TEXT))

    def _draw_bar(self, rect: Rect, text: str, attr: int) -> None:
        self.safe_addstr(rect.y, rect.x, text.ljust(rect.w), attr)

    def _draw_popup(self, rect: Rect, title: str, lines: list[str], alert_from: int | None = None) -> None:
        for row in range(rect.y, rect.y + rect.h):
            self.safe_addstr(row, rect.x, " " * rect.w)
        self._draw_box(rect, title, self._attr(_PAIR_BORDER))
        inner_w = rect.w - 2
        row = rect.y + 1
        for idx, line in enumerate(lines):
            attr = self._attr(_PAIR_ALERT) if alert_from is not None and idx >= alert_from else self._attr(_PAIR_TEXT)
            for chunk in wrap_lines(line, inner_w):
                if row >= rect.y + rect.h - 1:
                    return
                self.safe_addstr(row, rect.x + 1, chunk, attr)
                row += 1
