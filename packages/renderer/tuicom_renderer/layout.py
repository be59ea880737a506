"""Pure layout helpers: screen split, wrapping and autoscroll."""

from __future__ import annotations

from tuicom_core.session import ModeKind, SessionSnapshot
from tuicom_core.transcript import Encoding

from .models import Rect, ScreenLayout

# Shown on the bindings bar; documentation only.
BINDINGS: tuple[tuple[str, str], ...] = (
    ("i", "insert"),
    ("ESC", "normal"),
    ("h/H", "rx/tx hex"),
    ("c/C", "clear rx/tx"),
    ("l", "crlf"),
    ("b", "baud"),
    ("q", "quit"),
)

MODE_LABELS: dict[ModeKind, str] = {
    ModeKind.NORMAL: "NORMAL",
    ModeKind.INSERT: "INSERT",
    ModeKind.QUIT_CONFIRM: "QUIT?",
    ModeKind.BAUD_INPUT: "BAUD",
}

CONTROL_PLACEHOLDER = "·"


def split_screen(width: int, height: int) -> ScreenLayout:
    """Two transcript panes stacked above a bindings bar and a status bar."""
    panes = max(height - 2, 0)
    top = panes // 2
    return ScreenLayout(
        outbound=Rect(0, 0, width, top),
        inbound=Rect(0, top, width, panes - top),
        bindings=Rect(0, panes, width, 1),
        status=Rect(0, panes + 1, width, 1),
    )


def centered_rect(percent_x: int, percent_y: int, area: Rect) -> Rect:
    w = max(area.w * percent_x // 100, 1)
    h = max(area.h * percent_y // 100, 1)
    return Rect(area.x + (area.w - w) // 2, area.y + (area.h - h) // 2, w, h)


def sanitize(text: str) -> str:
    """Replace characters a terminal would interpret with a placeholder."""
    return "".join(ch if ch == "\n" or ch.isprintable() else CONTROL_PLACEHOLDER for ch in text)


def wrap_lines(text: str, width: int) -> list[str]:
    if width <= 0:
        return []
    lines: list[str] = []
    for line in text.split("\n"):
        if not line:
            lines.append("")
            continue
        for start in range(0, len(line), width):
            lines.append(line[start : start + width])
    return lines


def scroll_offset(line_count: int, height: int) -> int:
    return max(line_count - max(height, 0), 0)


def visible_lines(text: str, width: int, height: int) -> list[str]:
    """Tail of the wrapped text that fits, so the newest bytes stay in view."""
    lines = wrap_lines(sanitize(text), width)
    return lines[scroll_offset(len(lines), height) :]


def pane_title(label: str, encoding: Encoding, crlf: bool = False) -> str:
    title = f"{label} [{encoding.value}]"
    if crlf:
        title += " CRLF"
    return title


def bindings_text() -> str:
    return " | ".join(f"{key}: {action}" for key, action in BINDINGS)


def status_text(snapshot: SessionSnapshot) -> str:
    parts = [
        MODE_LABELS[snapshot.mode],
        snapshot.device_name or "Serial",
        str(snapshot.baud_rate) if snapshot.baud_rate is not None else "<baud>",
    ]
    if not snapshot.connected:
        parts.append("DISCONNECTED")
    return " | ".join(parts)
