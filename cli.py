"""CLI entry point for geoservice-proxy."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from auth import API_KEY_ENV, CREDENTIALS_FILE, load_credentials, print_auth_status
from core.config import config_file, load_config
from ui.console_log import ConsoleLog
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    config = load_config()
    headless = False

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg in ("--check", "--auth"):
            ok = print_auth_status(config)
            sys.exit(0 if ok else 1)

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {config_file()}")
            console.print(f"[bold]Credentials:[/bold] {CREDENTIALS_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

        headless = arg == "--headless"

    # Geocoder API key is required for all server modes
    credentials = load_credentials()
    if not credentials:
        console.print("[red][ERROR][/red] Geocoder API key not configured!")
        console.print(f"[dim]Set {API_KEY_ENV} or write {CREDENTIALS_FILE}[/dim]")
        sys.exit(1)

    clear_logs()
    if headless:
        logger = ConsoleLog(console, verbose=config.server.debug)
        dashboard = None
    else:
        dashboard = Dashboard(config)
        logger = dashboard

    import uvicorn

    app = create_app(config, logger, credentials)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level="info" if headless else "warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    if dashboard:
        dashboard.start()
    start_time = datetime.now()
    write_cli_log(
        "STARTUP",
        "Proxy started",
        port=config.server.port,
        backend=f"{config.backend.host}:{config.backend.port}",
    )
    try:
        # uvicorn exits the process when the port cannot be bound
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Geoservice Proxy[/bold cyan]

Serves the address API and swagger docs, forwards everything else to the backend.

[bold]Usage:[/bold]
    geoservice-proxy              Start with live dashboard
    geoservice-proxy --headless   Start with line logging (containers)
    geoservice-proxy --check      Check geocoder credentials
    geoservice-proxy --config     Show config locations
    geoservice-proxy --help       Show this help

[bold]Configuration:[/bold]
    Settings live in ~/.config/geoservice-proxy/config.json (GEOPROXY_CONFIG
    overrides the path). GEOPROXY_BACKEND_HOST / GEOPROXY_BACKEND_PORT select
    the backend. DADATA_API_KEY / DADATA_SECRET_KEY hold the provider keys.
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
