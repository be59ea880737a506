"""Diagnostics export helpers for local support bundles."""

from __future__ import annotations

import json
import platform
import re
import tempfile
import zipfile
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from tuicom_link import SerialChannel

from .config import AppConfig, config_path
from .logging_setup import log_dir


_SECRET_RE = re.compile(r"(token|secret|password|apikey|api_key|auth)", re.IGNORECASE)

CHANNEL_EVENTS = frozenset(
    {"port_opened", "open_failed", "device_lost", "baud_set", "baud_rejected", "fatal_channel_error"}
)


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, Path):
        return str(value)
    return value


def redact(value: Any) -> Any:
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if _SECRET_RE.search(k):
                out[k] = "***REDACTED***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def recent_channel_events(log_file: Path, limit: int = 200) -> list[dict[str, Any]]:
    """Tail of link-related records from a JSON-lines log; unparsable lines are skipped."""
    if not log_file.exists():
        return []
    events: list[dict[str, Any]] = []
    with log_file.open("r", encoding="utf-8", errors="replace") as fh:
        for line in fh:
            try:
                record = json.loads(line)
            except ValueError:
                continue
            if isinstance(record, dict) and record.get("event") in CHANNEL_EVENTS:
                events.append(record)
    return events[-limit:]


def build_doctor_payload(cfg: AppConfig) -> dict[str, Any]:
    ports = SerialChannel.discover()
    configured = cfg.link.port
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config": redact(asdict(cfg)),
        "ports": [
            {
                "device": p.device,
                "description": p.description,
                "vid": p.vid,
                "pid": p.pid,
                "configured": p.device == configured,
            }
            for p in ports
        ],
        "configured_port_present": configured is None or any(p.device == configured for p in ports),
    }


class DiagnosticsExporter:
    def __init__(self, app_name: str = "tuicom") -> None:
        self.app_name = app_name

    def bundle(
        self,
        cfg: AppConfig,
        doctor_payload: dict[str, Any],
        output_dir: Path | None = None,
    ) -> Path:
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"tuicom-diagnostics-{stamp}.zip"

        # Newest first so the size cap drops the oldest files.
        logs = sorted(log_dir().glob("*.log*"), key=lambda p: p.stat().st_mtime, reverse=True)
        budget = cfg.diagnostics.max_bundle_mb * 1024 * 1024

        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            manifest = {
                "app": self.app_name,
                "created_utc": datetime.now(timezone.utc).isoformat(),
                "host": platform.platform(),
                "python": platform.python_version(),
                "config_path": str(config_path()),
                "log_dir": str(log_dir()),
            }
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(redact(doctor_payload), indent=2, sort_keys=True, default=_jsonable))
            zf.writestr("config.redacted.json", json.dumps(redact(asdict(cfg)), indent=2, sort_keys=True))
            zf.writestr(
                "channel_events.json",
                json.dumps(redact(recent_channel_events(log_dir() / "tuicom.log")), indent=2, sort_keys=True),
            )

            for item in logs:
                size = item.stat().st_size
                if size > budget:
                    continue
                budget -= size
                zf.write(item, arcname=f"logs/{item.name}")

        return zip_path
