"""Terminal app runtime: the tick loop tying channel, session and screen together."""

from __future__ import annotations

import time
from typing import Any, Callable

from tuicom_core import (
    AppConfig,
    Control,
    CursorTimer,
    KeyEvent,
    PerformanceController,
    PerformanceTargets,
    Session,
)
from tuicom_core.logging_setup import get_logger
from tuicom_link import ByteChannel, LoopbackChannel, SerialChannel
from tuicom_renderer import TerminalRenderer, read_key, terminal_screen


def open_channel(cfg: AppConfig, port: str | None, baud: int, loopback: bool = False) -> ByteChannel:
    if loopback:
        return LoopbackChannel(baud=baud)
    if not port:
        raise ValueError("no serial port given")
    channel = SerialChannel()
    channel.open(port=port, baud=baud, timeout_ms=cfg.link.timeout_ms)
    get_logger().info(
        f"opened {port} @ {baud} bps",
        extra={"event": "port_opened", "port": port, "baud": baud},
    )
    return channel


def run_loop(
    session: Session,
    renderer: Any,
    read_event: Callable[[int], KeyEvent | None],
    tick_ms: int,
    performance: PerformanceController | None = None,
    sample_every_s: float = 5.0,
) -> None:
    """Poll, update, draw; return once the session asks to exit."""
    logger = get_logger()
    next_sample = time.monotonic() + sample_every_s

    while True:
        event = read_event(tick_ms)
        if session.update(event) is Control.EXIT:
            return
        with session.frame() as snapshot:
            renderer.draw(snapshot)

        if performance is None:
            continue
        performance.tick()
        now = time.monotonic()
        if now >= next_sample:
            next_sample = now + sample_every_s
            budget = performance.sample()
            if budget.warning:
                logger.warning(
                    f"tick budget {budget.warning}: {budget.tick_rate:.1f} ticks/s, "
                    f"cpu {budget.cpu_percent:.1f}%, rss {budget.rss_mb:.1f} MB",
                    extra={"event": "tick_budget"},
                )


def run_terminal(cfg: AppConfig, channel: ByteChannel) -> int:
    session = Session(
        channel,
        crlf=cfg.session.crlf,
        cursor=CursorTimer(period_s=cfg.ui.blink_ms / 1000),
    )
    performance = PerformanceController(
        PerformanceTargets(
            cpu_percent_max=cfg.performance.cpu_percent_max,
            rss_mb_max=cfg.performance.rss_mb_max,
            tick_rate_min=cfg.performance.tick_rate_min,
        )
    )
    logger = get_logger()
    logger.info("session start", extra={"event": "session_start"})

    with terminal_screen() as stdscr:
        renderer = TerminalRenderer(stdscr, cfg.ui.theme)
        run_loop(
            session,
            renderer,
            lambda timeout_ms: read_key(stdscr, timeout_ms),
            cfg.ui.tick_ms,
            performance=performance,
            sample_every_s=cfg.performance.sample_every_s,
        )

    logger.info("session end", extra={"event": "session_end", "connected": session.connected})
    return 0
