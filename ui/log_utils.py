"""Shared logging utilities."""

import json
import shutil
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_FILE = LOG_ROOT / "proxy.log"

SENSITIVE_MARKERS = ("key", "secret", "authorization", "cookie", "token")


def write_request_log(
    kind: str,
    record: dict[str, Any],
    *,
    log_root: Path | None = None,
) -> Path:
    """Write a single request log entry under logs/<kind>/."""
    log_root = log_root or LOG_ROOT
    payload = {"timestamp": _utc_now(), **record}
    if isinstance(payload.get("headers"), dict):
        payload["headers"] = _redact_headers(payload["headers"])
    return _write_json(log_root / kind, payload)


def write_cli_log(
    level: str,
    message: str,
    *,
    log_file: Path | None = None,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_file or CLI_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    line = format_log_line(timestamp, level, message, **extra)
    with log_file.open("a") as f:
        f.write(line + "\n")


def format_log_line(timestamp: str, level: str, message: str, **extra: Any) -> str:
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    return line


def clear_logs(log_root: Path | None = None) -> None:
    """Remove per-request logs from a previous run; the CLI log is kept."""
    log_root = log_root or LOG_ROOT
    if not log_root.exists():
        return
    for child in log_root.iterdir():
        if child.is_dir():
            shutil.rmtree(child, ignore_errors=True)


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str, ensure_ascii=False))
    return file_path


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if any(marker in key.lower() for marker in SENSITIVE_MARKERS):
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
