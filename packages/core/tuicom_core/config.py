"""Persistent settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 1


@dataclass
class LinkConfig:
    port: str | None = None
    baud: int = 115200
    timeout_ms: int = 500


@dataclass
class SessionConfig:
    crlf: bool = False


@dataclass
class UiConfig:
    tick_ms: int = 16
    blink_ms: int = 500
    theme: str = "Classic"


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7
    max_bundle_mb: int = 20


@dataclass
class PerformanceConfig:
    cpu_percent_max: float = 15.0
    rss_mb_max: float = 200.0
    tick_rate_min: float = 30.0
    sample_every_s: float = 5.0


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    link: LinkConfig = field(default_factory=LinkConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "Tuicom"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Tuicom"
    return Path.home() / ".config" / "tuicom"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_link(cfg: AppConfig) -> None:
    try:
        cfg.link.baud = int(cfg.link.baud)
    except (TypeError, ValueError):
        cfg.link.baud = LinkConfig.baud
    if cfg.link.baud <= 0:
        cfg.link.baud = LinkConfig.baud
    cfg.link.timeout_ms = max(10, min(5000, int(cfg.link.timeout_ms)))
    if cfg.link.port is not None:
        cfg.link.port = str(cfg.link.port).strip() or None


def _normalize_ui(cfg: AppConfig) -> None:
    cfg.ui.tick_ms = max(5, min(100, int(cfg.ui.tick_ms)))
    cfg.ui.blink_ms = max(100, min(2000, int(cfg.ui.blink_ms)))


def _normalize_performance(cfg: AppConfig) -> None:
    cfg.performance.cpu_percent_max = float(max(1.0, cfg.performance.cpu_percent_max))
    cfg.performance.rss_mb_max = float(max(32.0, cfg.performance.rss_mb_max))
    cfg.performance.tick_rate_min = float(max(1.0, cfg.performance.tick_rate_min))
    cfg.performance.sample_every_s = float(max(1.0, cfg.performance.sample_every_s))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return AppConfig()

    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        link=_merge(LinkConfig, data.get("link", {})),
        session=_merge(SessionConfig, data.get("session", {})),
        ui=_merge(UiConfig, data.get("ui", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
        performance=_merge(PerformanceConfig, data.get("performance", {})),
    )

    _normalize_link(cfg)
    _normalize_ui(cfg)
    _normalize_performance(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
