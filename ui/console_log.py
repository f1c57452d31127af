"""Line-oriented request logger for headless runs (containers, CI)."""

from datetime import UTC, datetime
from pathlib import Path

from rich.console import Console

from ui.log_utils import format_log_line, write_cli_log, write_request_log

STYLES = {"LOCAL": "blue", "API": "cyan", "PROXY": "magenta", "ERROR": "red"}


class ConsoleLog:
    """Print one line per event, mirror it to the CLI log file and keep request records."""

    def __init__(
        self,
        console: Console | None = None,
        *,
        log_file: Path | None = None,
        log_root: Path | None = None,
        verbose: bool = False,
    ) -> None:
        self._console = console or Console()
        self._log_file = log_file
        self._log_root = log_root
        self._verbose = verbose

    def log_local(self, method: str, path: str, reason: str) -> None:
        if self._verbose:
            self._emit("LOCAL", path, method=method, reason=reason)

    def log_proxy(
        self,
        method: str,
        path: str,
        target_url: str,
        status: int,
        headers: dict[str, str] | None = None,
    ) -> None:
        write_request_log(
            "backend",
            {
                "method": method,
                "path": path,
                "target": target_url,
                "status": status,
                "headers": headers or {},
            },
            log_root=self._log_root,
        )
        self._emit("PROXY", path, method=method, target=target_url, status=status)

    def log_api(self, endpoint: str, query: str, count: int) -> None:
        write_request_log(
            "api",
            {"endpoint": endpoint, "query": query, "results": count},
            log_root=self._log_root,
        )
        self._emit("API", query[:200], endpoint=endpoint, results=count)

    def log_error(self, route: str, status: int, message: str) -> None:
        self._emit("ERROR", message[:200], route=route, status=status)

    def _emit(self, level: str, message: str, **extra) -> None:
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
        line = format_log_line(timestamp, level, message, **extra)
        self._console.print(line, style=STYLES.get(level), markup=False, highlight=False)
        write_cli_log(level, message, log_file=self._log_file, **extra)
