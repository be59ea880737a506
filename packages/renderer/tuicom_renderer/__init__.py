"""Renderer package for the curses terminal front-end."""

from .layout import BINDINGS, pane_title, scroll_offset, split_screen, status_text, visible_lines, wrap_lines
from .models import Rect, ScreenLayout, ThemeConfig
from .terminal import TerminalRenderer, read_key, terminal_screen, translate_key
from .themes import DEFAULT_THEME_NAME, get_theme, list_themes

__all__ = [
    "BINDINGS",
    "DEFAULT_THEME_NAME",
    "Rect",
    "ScreenLayout",
    "TerminalRenderer",
    "ThemeConfig",
    "get_theme",
    "list_themes",
    "pane_title",
    "read_key",
    "scroll_offset",
    "split_screen",
    "status_text",
    "terminal_screen",
    "translate_key",
    "visible_lines",
    "wrap_lines",
]
