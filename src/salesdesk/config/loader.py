from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG_PATH = Path("salesdesk.config.yaml")
EXAMPLE_CONFIG_PATH = Path("config/salesdesk.example.yaml")

BASE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "storage": {
        "sqlite_path": "salesdesk.db",
    },
    "listing": {
        "default_limit": 10,
        "max_limit": 1000,
        "read_timeout_seconds": 10,
    },
    "server": {
        "host": "127.0.0.1",
        "port": 5000,
        "url_prefix": "/api",
    },
    "logging": {
        "level": "INFO",
    },
}


def _section(config: Dict[str, Any] | None, name: str) -> Dict[str, Any]:
    """Return a config section merged over the built-in defaults."""
    user_section = (config or {}).get(name) or {}
    if not isinstance(user_section, dict):
        raise ValueError(f"Config section '{name}' must be a dictionary")
    return {**BASE_DEFAULTS[name], **user_section}


def _positive_number(section: str, key: str, value: Any, *, integer: bool) -> Any:
    valid_types = (int,) if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, valid_types) or value <= 0:
        kind = "positive integer" if integer else "positive number"
        raise ValueError(f"Config '{section}.{key}' must be a {kind}, got {value!r}")
    return value


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        path: Optional path to the config file. Defaults to salesdesk.config.yaml

    Returns:
        Dictionary with the raw configuration (an empty file yields {})

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the document is not a mapping
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")
    return config


def get_sqlite_path(config: Dict[str, Any] | None = None) -> str:
    sqlite_path = _section(config, "storage")["sqlite_path"]
    if not sqlite_path or not isinstance(sqlite_path, str):
        raise ValueError("Config 'storage.sqlite_path' must be a non-empty string")
    return sqlite_path


def get_listing_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Listing settings with defaults applied.

    Defaults:
    - default_limit: 10
    - max_limit: 1000
    - read_timeout_seconds: 10

    Raises:
        ValueError: If a value is not positive or default_limit exceeds max_limit
    """
    listing = _section(config, "listing")
    default_limit = _positive_number("listing", "default_limit", listing["default_limit"], integer=True)
    max_limit = _positive_number("listing", "max_limit", listing["max_limit"], integer=True)
    timeout = _positive_number("listing", "read_timeout_seconds", listing["read_timeout_seconds"], integer=False)
    if default_limit > max_limit:
        raise ValueError("Config 'listing.default_limit' must not exceed 'listing.max_limit'")
    return {
        "default_limit": default_limit,
        "max_limit": max_limit,
        "read_timeout_seconds": float(timeout),
    }


def get_server_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    server = _section(config, "server")
    port = _positive_number("server", "port", server["port"], integer=True)
    prefix = str(server["url_prefix"] or "").rstrip("/")
    if prefix and not prefix.startswith("/"):
        raise ValueError("Config 'server.url_prefix' must start with '/'")
    return {
        "host": str(server["host"]),
        "port": port,
        "url_prefix": prefix,
    }


def get_log_level(config: Dict[str, Any] | None = None) -> str:
    return str(_section(config, "logging")["level"]).upper()
