"""Geocoding provider credentials - environment first, then our credentials file."""

import json
import os
from dataclasses import dataclass

import httpx
from rich.console import Console

from core.config import CONFIG_DIR, Config

console = Console()
CREDENTIALS_FILE = CONFIG_DIR / "credentials.json"

API_KEY_ENV = "DADATA_API_KEY"
SECRET_KEY_ENV = "DADATA_SECRET_KEY"


@dataclass(frozen=True)
class Credentials:
    api_key: str
    secret_key: str = ""


def load_credentials() -> Credentials | None:
    """Load provider credentials - first the environment, then our file."""
    api_key = os.environ.get(API_KEY_ENV, "")
    if api_key:
        return Credentials(api_key=api_key, secret_key=os.environ.get(SECRET_KEY_ENV, ""))

    if CREDENTIALS_FILE.exists():
        try:
            data = json.loads(CREDENTIALS_FILE.read_text())
            if data.get("api_key"):
                return Credentials(api_key=data["api_key"], secret_key=data.get("secret_key", ""))
        except (json.JSONDecodeError, AttributeError, TypeError) as e:
            console.print(f"[red]Failed to load credentials:[/red] {e}")

    return None


def save_credentials(credentials: Credentials):
    """Save credentials to our file, readable by the owner only."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    CREDENTIALS_FILE.write_text(
        json.dumps({"api_key": credentials.api_key, "secret_key": credentials.secret_key}, indent=2)
    )
    CREDENTIALS_FILE.chmod(0o600)


def verify_credentials(credentials: Credentials, base_url: str) -> bool:
    """Make one suggestion call to check the provider accepts the key."""
    try:
        response = httpx.post(
            f"{base_url}/suggest/address",
            json={"query": "Москва", "count": 1},
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "Authorization": f"Token {credentials.api_key}",
            },
            timeout=10.0,
        )
        if response.status_code == 200:
            return True
        console.print(f"[red]Credential check failed:[/red] {response.status_code} - {response.text}")
    except httpx.RequestError as e:
        console.print(f"[red]Credential check failed:[/red] {e}")
    return False


def print_auth_status(config: Config) -> bool:
    """Print where credentials come from and whether the provider accepts them."""
    credentials = load_credentials()
    if not credentials:
        console.print("[yellow]No geocoder credentials[/yellow]")
        console.print(f"\n[dim]Set {API_KEY_ENV} (and optionally {SECRET_KEY_ENV}) or place them at:[/dim]")
        console.print(f"  {CREDENTIALS_FILE}")
        return False

    source = "environment" if os.environ.get(API_KEY_ENV) else str(CREDENTIALS_FILE)
    console.print(f"[bold]Credentials:[/bold] {source}")
    if verify_credentials(credentials, config.geocoder.base_url):
        console.print("[green]Provider accepted the API key[/green]")
        return True
    return False
