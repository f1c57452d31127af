"""Configuration models and loading."""

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

CONFIG_DIR = Path.home() / ".config" / "geoservice-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False


class BackendSettings(BaseModel):
    """Static-content server that receives all non-local traffic."""

    host: str = "hugo_task"
    port: str = "1313"
    scheme: str = "http"
    base_path: str = ""
    # None disables the deadline entirely
    timeout: float | None = 30.0


class GeocoderSettings(BaseModel):
    base_url: str = "https://suggestions.dadata.ru/suggestions/api/4_1/rs"
    timeout: float = 10.0
    count: int = 10


class RoutingSettings(BaseModel):
    local_prefixes: list[str] = Field(default_factory=lambda: ["/api", "/swagger"])
    match_mode: Literal["prefix", "segment"] = "prefix"
    marker_header: str = "Reverse-Proxy"


class LimitsSettings(BaseModel):
    keep_alive_timeout: int = 5
    max_body_size: int = 1024 * 1024  # 1MB


class Config(BaseModel):
    server: ServerSettings = Field(default_factory=ServerSettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)
    geocoder: GeocoderSettings = Field(default_factory=GeocoderSettings)
    routing: RoutingSettings = Field(default_factory=RoutingSettings)
    limits: LimitsSettings = Field(default_factory=LimitsSettings)


# env var -> (section, field)
ENV_OVERRIDES = {
    "GEOPROXY_HOST": ("server", "host"),
    "GEOPROXY_PORT": ("server", "port"),
    "GEOPROXY_BACKEND_HOST": ("backend", "host"),
    "GEOPROXY_BACKEND_PORT": ("backend", "port"),
    "GEOPROXY_BACKEND_SCHEME": ("backend", "scheme"),
    "GEOPROXY_BACKEND_TIMEOUT": ("backend", "timeout"),
    "GEOPROXY_MATCH_MODE": ("routing", "match_mode"),
}


def config_file() -> Path:
    """Return the config file path, honouring GEOPROXY_CONFIG."""
    override = os.environ.get("GEOPROXY_CONFIG")
    return Path(override) if override else CONFIG_FILE


def load_config() -> Config:
    """Load configuration from JSON file, creating default if needed.

    Environment variables listed in ENV_OVERRIDES take precedence over the
    file contents.
    """
    path = config_file()
    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        default = Config()
        path.write_text(default.model_dump_json(indent=2))
        return apply_env_overrides(default)

    try:
        data = json.loads(path.read_text())
        config = Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = path.with_suffix(".json.bak")
        path.rename(backup)
        config = Config()
        path.write_text(config.model_dump_json(indent=2))
    return apply_env_overrides(config)


def apply_env_overrides(config: Config, environ: dict[str, str] | None = None) -> Config:
    """Return a copy of config with environment overrides applied."""
    environ = os.environ if environ is None else environ
    data = config.model_dump()
    for name, (section, field) in ENV_OVERRIDES.items():
        value = environ.get(name)
        if value is None or value == "":
            continue
        if section == "backend" and field == "timeout" and value.lower() == "none":
            data[section][field] = None
        else:
            data[section][field] = value
    return Config.model_validate(data)
