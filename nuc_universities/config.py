"""Layered configuration: YAML < .env < CLI args."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml
from dotenv import load_dotenv
import os

from nuc_universities.data.models import Source, UniversityType

# The NUC listing pages and the category each one lists.
DEFAULT_SOURCES: list[dict[str, str]] = [
    {
        "url": "https://www.nuc.edu.ng/nigerian-univerisities/federal-univeristies/",
        "type": "Federal",
    },
    {
        "url": "https://www.nuc.edu.ng/nigerian-univerisities/state-univerisity/",
        "type": "State",
    },
    {
        "url": "https://www.nuc.edu.ng/nigerian-univerisities/private-univeristies/",
        "type": "Private",
    },
]


def load_config(
    config_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Load configuration with layered precedence.

    Priority (highest to lowest):
    1. CLI argument overrides
    2. Environment variables (.env)
    3. YAML config file

    Args:
        config_path: Path to YAML config file. Defaults to config/default.yaml
        cli_overrides: Dict of CLI argument overrides (e.g. {"port": 8000})

    Returns:
        Merged configuration dict.
    """
    # 1. Load YAML defaults
    if config_path is None:
        config_path = Path("config/default.yaml")

    config: dict[str, Any] = {}
    if config_path.exists():
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}

    # 2. Load .env and apply environment variable overrides
    load_dotenv()
    env_mappings: dict[str, tuple[str, ...]] = {
        "HOST": ("host",),
        "PORT": ("port",),
        "LOG_LEVEL": ("logging", "level"),
        "FETCH_TIMEOUT": ("timeouts", "read"),
        "REFRESH_INTERVAL": ("refresh_interval",),
    }
    for env_var, config_path_tuple in env_mappings.items():
        value = os.environ.get(env_var)
        if value:
            _set_nested(config, config_path_tuple, value)

    # 3. Apply CLI overrides (only non-None values)
    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    return config


def load_sources(config: dict[str, Any]) -> list[Source]:
    """Build the source table from ``config["sources"]``.

    Falls back to :data:`DEFAULT_SOURCES` when the key is absent.

    Raises:
        ValueError: If an entry has a non-http(s) URL or an unknown type.
    """
    entries = config.get("sources") or DEFAULT_SOURCES
    sources: list[Source] = []
    for entry in entries:
        url = str(entry.get("url", "")).strip()
        if urlparse(url).scheme not in ("http", "https"):
            raise ValueError(f"Invalid source URL: {url!r}")
        raw_type = str(entry.get("type", "")).strip()
        try:
            university_type = UniversityType(raw_type.capitalize())
        except ValueError:
            valid = ", ".join(t.value for t in UniversityType)
            raise ValueError(
                f"Unknown university type {raw_type!r} for {url} (expected one of: {valid})"
            ) from None
        sources.append(Source(url=url, university_type=university_type))
    return sources


def _set_nested(d: dict, keys: tuple[str, ...], value: Any) -> None:
    """Set a value in a nested dict using a tuple of keys."""
    for key in keys[:-1]:
        d = d.setdefault(key, {})
    d[keys[-1]] = value
