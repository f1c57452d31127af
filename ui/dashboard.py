"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log, write_request_log

console = Console()


class RequestInfo:
    """Info about a single request."""

    def __init__(self, method: str, path: str, detail: str, timestamp: datetime):
        self.method = method
        self.path = path[:60] + "..." if len(path) > 60 else path
        self.detail = detail
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing API calls and proxied traffic."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._api_calls: list[RequestInfo] = []
        self._proxied: list[RequestInfo] = []
        self._max_rows = 8
        self._request_count = {"local": 0, "api": 0, "backend": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_local(self, method: str, path: str, reason: str) -> None:
        """Count a request dispatched to a local handler."""
        with self._lock:
            self._request_count["local"] += 1
            self._refresh()
        if self.config.server.debug:
            write_cli_log("LOCAL", path, method=method, reason=reason)

    def log_proxy(
        self,
        method: str,
        path: str,
        target_url: str,
        status: int,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Log a request forwarded to the backend."""
        with self._lock:
            self._request_count["backend"] += 1
            info = RequestInfo(method, path, str(status), datetime.now())
            self._proxied.insert(0, info)
            self._proxied = self._proxied[: self._max_rows]
            self._refresh()

        write_request_log(
            "backend",
            {
                "method": method,
                "path": path,
                "target": target_url,
                "status": status,
                "headers": headers or {},
            },
        )
        write_cli_log("PROXY", path, method=method, target=target_url, status=status)

    def log_api(self, endpoint: str, query: str, count: int) -> None:
        """Log a geocoding API call."""
        with self._lock:
            self._request_count["api"] += 1
            info = RequestInfo("POST", endpoint, f"{query[:40]} -> {count}", datetime.now())
            self._api_calls.insert(0, info)
            self._api_calls = self._api_calls[: self._max_rows]
            self._refresh()

        write_request_log("api", {"endpoint": endpoint, "query": query, "results": count})
        write_cli_log("API", query[:200], endpoint=endpoint, results=count)

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
        write_cli_log("ERROR", message[:200], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["body"].split_row(
            Layout(name="api", ratio=1),
            Layout(name="backend", ratio=1),
        )

        layout["header"].update(self._build_header())
        layout["api"].update(
            self._build_table_panel(self._api_calls, "[blue]Address API[/blue]", "blue", "Result")
        )
        layout["backend"].update(
            self._build_table_panel(self._proxied, "[magenta]Backend[/magenta]", "magenta", "Status")
        )
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Geoservice Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Local: {self._request_count['local']}", style="blue")
        stats.append("  |  ")
        stats.append(f"API: {self._request_count['api']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Proxied: {self._request_count['backend']}", style="magenta")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.server.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_table_panel(
        self,
        rows: list[RequestInfo],
        title: str,
        border_style: str,
        detail_label: str,
    ) -> Panel:
        if not rows:
            return Panel(Text("Waiting for requests...", style="dim"), title=title, border_style=border_style)

        table = Table(show_header=True, header_style="bold", expand=True, box=None)
        table.add_column("Time", style="dim", width=8)
        table.add_column("Method", width=7)
        table.add_column("Path", ratio=2)
        table.add_column(detail_label, ratio=1)
        for info in rows:
            table.add_row(
                info.timestamp.strftime("%H:%M:%S"),
                info.method,
                info.path,
                info.detail,
            )
        return Panel(table, title=title, border_style=border_style)

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            backend = self.config.backend
            content = Text(
                f"Forwarding non-API traffic to {backend.scheme}://{backend.host}:{backend.port}",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
