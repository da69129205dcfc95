"""Configuration management — TOML config at ~/.config/fieldsuggest/fieldsuggest.toml."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import ValidationError

from fieldsuggest.core.exceptions import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

_DEFAULT_CONFIG: dict[str, Any] = {
    "suggest": {
        "debounce_delay": 0.5,
        "min_query_length": 1,
        "max_candidates": 20,
        "request_timeout": 10.0,
        "user_agent_contact": "",
    },
    "endpoints": {},
}

# Keys of [suggest] that act as defaults for every endpoint
_ENDPOINT_DEFAULT_KEYS = ("debounce_delay", "min_query_length", "max_candidates")


def get_config_dir() -> Path:
    """Return the config directory, creating it if needed."""
    config_dir = Path(os.environ.get("FIELDSUGGEST_CONFIG_DIR", "~/.config/fieldsuggest")).expanduser()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Return the path to the config TOML file."""
    return get_config_dir() / "fieldsuggest.toml"


def get_history_path() -> Path:
    """Return the path to the interactive prompt history file."""
    return get_config_dir() / "history"


def load_config() -> dict[str, Any]:
    """Load configuration from TOML file, returning defaults if not found."""
    config_path = get_config_path()
    if not config_path.exists():
        return _deep_copy_dict(_DEFAULT_CONFIG)
    try:
        with open(config_path, "rb") as f:
            user_config = tomllib.load(f)
        return _merge_config(_deep_copy_dict(_DEFAULT_CONFIG), user_config)
    except Exception as e:
        raise ConfigError(f"Failed to load config: {e}") from e


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to TOML file."""
    config_path = get_config_path()
    try:
        with open(config_path, "wb") as f:
            tomli_w.dump(config, f)
    except Exception as e:
        raise ConfigError(f"Failed to save config: {e}") from e


def update_config(**updates: Any) -> dict[str, Any]:
    """Load config, apply nested updates, save, and return the result.

    Usage: update_config(suggest={"max_candidates": 10})
    """
    config = load_config()
    for section, values in updates.items():
        if section not in config:
            config[section] = {}
        if isinstance(values, dict):
            config[section].update(values)
        else:
            config[section] = values
    save_config(config)
    return config


def list_endpoints(config: dict[str, Any] | None = None) -> dict[str, dict[str, Any]]:
    """Return the raw ``[endpoints]`` tables keyed by name."""
    if config is None:
        config = load_config()
    return dict(config.get("endpoints", {}))


def get_endpoint_options(name_or_template: str, config: dict[str, Any] | None = None):
    """Build EndpointOptions for a configured endpoint name or a raw template.

    Values missing from the endpoint table fall back to the [suggest] section.
    """
    from fieldsuggest.models.options import EndpointOptions

    if config is None:
        config = load_config()
    defaults = {k: v for k, v in config.get("suggest", {}).items() if k in _ENDPOINT_DEFAULT_KEYS}

    endpoints = config.get("endpoints", {})
    if name_or_template in endpoints:
        raw = {**defaults, **endpoints[name_or_template]}
    elif "${" in name_or_template:
        raw = {**defaults, "api": name_or_template}
    else:
        raise ConfigError(f"Unknown endpoint: {name_or_template}")

    try:
        return EndpointOptions(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid endpoint '{name_or_template}': {e}") from e


def add_endpoint(name: str, options: Any) -> dict[str, Any]:
    """Store an endpoint definition under ``[endpoints.<name>]``."""
    config = load_config()
    config.setdefault("endpoints", {})[name] = options.to_config()
    save_config(config)
    return config


def remove_endpoint(name: str) -> dict[str, Any]:
    """Delete a named endpoint definition."""
    config = load_config()
    endpoints = config.get("endpoints", {})
    if name not in endpoints:
        raise ConfigError(f"Unknown endpoint: {name}")
    del endpoints[name]
    save_config(config)
    return config


def configure_logging(verbose: bool = False) -> None:
    """Set up root logging for the command line tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)


def _merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_config(base[key], value)
        else:
            base[key] = value
    return base


def _deep_copy_dict(d: dict[str, Any]) -> dict[str, Any]:
    """Simple deep copy for nested dicts of simple types."""
    result: dict[str, Any] = {}
    for k, v in d.items():
        if isinstance(v, dict):
            result[k] = _deep_copy_dict(v)
        else:
            result[k] = v
    return result
