"""Application configuration.

Values are resolved in this order (later wins): dataclass defaults, the
``[tracks]`` table of an optional TOML file, environment variables, CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from simple_tracks.models import DEFAULT_TZ, HISTORY_DAYS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("simple_tracks.toml")

ENV_OVERRIDES: dict[str, str] = {
    "SIMPLE_TRACKS_TZ": "tz_name",
    "SIMPLE_TRACKS_CSV": "track_csv",
    "SIMPLE_TRACKS_SETTINGS": "settings_json",
}


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Configuration shared by the CLI and the Streamlit app."""

    tz_name: str = DEFAULT_TZ
    track_csv: Path = Path("Path.csv")
    settings_json: Path = Path("motion_settings.json")
    history_days: int = HISTORY_DAYS
    locate: bool = True
    tiles: str = "OpenStreetMap"


def as_bool(value: Any) -> bool:
    """Interpret switches written by hand ("off", "false", "0") or as JSON/TOML booleans."""

    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _coerce(name: str, value: Any) -> Any:
    if name in ("track_csv", "settings_json"):
        return Path(value)
    if name == "history_days":
        return int(value)
    if name == "locate":
        return as_bool(value)
    return str(value)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from TOML (if present) and environment.

    Args:
        path: Config file; defaults to ./simple_tracks.toml when it exists.

    Raises:
        ValueError: If the file is not valid TOML.
    """

    config = AppConfig()
    known = {f.name for f in fields(AppConfig)}

    p = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if p.exists():
        try:
            data = tomllib.loads(p.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"Invalid config file {p}: {exc}") from exc
        table = data.get("tracks", {})
        unknown = sorted(set(table) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys in %s: %s", p, unknown)
        config = replace(config, **{k: _coerce(k, v) for k, v in table.items() if k in known})
    elif path is not None:
        logger.warning("Config file %s not found, using defaults", p)

    env = {attr: _coerce(attr, os.environ[var]) for var, attr in ENV_OVERRIDES.items() if os.environ.get(var)}
    if env:
        config = replace(config, **env)
    return config
