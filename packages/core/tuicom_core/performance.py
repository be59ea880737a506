"""Tick-loop budgeting: process load versus the achieved frame rate."""

from __future__ import annotations

import time
from dataclasses import dataclass

import psutil


@dataclass(frozen=True)
class PerformanceTargets:
    cpu_percent_max: float = 15.0
    rss_mb_max: float = 200.0
    tick_rate_min: float = 30.0


@dataclass(frozen=True)
class BudgetStatus:
    cpu_percent: float
    rss_mb: float
    tick_rate: float
    overloaded: bool
    warning: str | None


class PerformanceController:
    def __init__(self, targets: PerformanceTargets | None = None) -> None:
        self.targets = targets or PerformanceTargets()
        self._process = psutil.Process()
        # Prime non-blocking CPU measurement.
        self._process.cpu_percent(interval=None)
        self._ticks = 0
        self._window_start = time.perf_counter()

    def tick(self) -> None:
        self._ticks += 1

    def tick_rate(self) -> float:
        elapsed = max(time.perf_counter() - self._window_start, 1e-9)
        return self._ticks / elapsed

    def sample(self, tick_rate: float | None = None) -> BudgetStatus:
        """Measure the process and reset the tick window."""
        rate = self.tick_rate() if tick_rate is None else float(tick_rate)
        self._ticks = 0
        self._window_start = time.perf_counter()

        cpu = float(self._process.cpu_percent(interval=None))
        rss_mb = float(self._process.memory_info().rss) / (1024 * 1024)
        overloaded = cpu > self.targets.cpu_percent_max or rss_mb > self.targets.rss_mb_max

        warning = None
        if overloaded:
            warning = "resource_overload"
        elif rate < self.targets.tick_rate_min:
            warning = "below_tick_target"

        return BudgetStatus(
            cpu_percent=cpu,
            rss_mb=rss_mb,
            tick_rate=rate,
            overloaded=overloaded,
            warning=warning,
        )
