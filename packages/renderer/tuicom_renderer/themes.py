"""Built-in terminal colour themes."""

from __future__ import annotations

from .models import ThemeConfig

DEFAULT_THEME_NAME = "Classic"

THEMES: dict[str, ThemeConfig] = {
    "Classic": ThemeConfig(
        name="Classic",
        text="default",
        border="default",
        border_active="cyan",
        bar_fg="white",
        bar_bg="blue",
        alert="red",
    ),
    "Amber": ThemeConfig(
        name="Amber",
        text="yellow",
        border="yellow",
        border_active="white",
        bar_fg="black",
        bar_bg="yellow",
        alert="red",
    ),
    "Mono": ThemeConfig(
        name="Mono",
        text="default",
        border="default",
        border_active="default",
        bar_fg="default",
        bar_bg="default",
        alert="default",
    ),
}


def list_themes() -> list[str]:
    return sorted(THEMES.keys())


def get_theme(name: str | None) -> ThemeConfig:
    if not name:
        return THEMES[DEFAULT_THEME_NAME]
    return THEMES.get(name, THEMES[DEFAULT_THEME_NAME])
