"""Runtime settings resolved from defaults, an optional YAML file and the environment."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError


load_dotenv(override=False)

CONFIG_ENV = "CELLSWAP_CONFIG"
DEFAULT_PASSWORD = "admin"
DEFAULT_LOG_BASE = Path.home() / "CellSwap" / "logs"

# setting name -> environment variable
_ENV_KEYS = {
    "auth_password": "AUTH_PASSWORD",
    "static_dir": "CELLSWAP_STATIC_DIR",
    "log_dir": "CELLSWAP_LOG_DIR",
    "log_level": "CELLSWAP_LOG_LEVEL",
}

_SETTINGS: "Settings | None" = None


class Settings(BaseModel):
    """Resolved settings for the service and CLI."""

    model_config = ConfigDict(extra="ignore")

    auth_password: str = DEFAULT_PASSWORD
    static_dir: Path = Field(default_factory=lambda: Path.cwd() / "public")
    log_dir: Path = DEFAULT_LOG_BASE
    log_level: str = "INFO"


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Settings file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid settings file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file must contain a mapping: {path}")
    return data


def load_settings(path: str | Path | None = None) -> Settings:
    """Build settings; environment variables win over the YAML file.

    Args:
        path: Optional YAML file. Falls back to ``$CELLSWAP_CONFIG`` when omitted.

    Raises:
        ConfigError: If the file is unreadable or a value fails validation.
    """

    raw: Dict[str, Any] = {}
    cfg_path = path or os.getenv(CONFIG_ENV)
    if cfg_path:
        raw.update(_load_yaml(Path(cfg_path).expanduser()))

    for key, env_name in _ENV_KEYS.items():
        value = os.getenv(env_name)
        # an empty AUTH_PASSWORD falls back to the default
        if value:
            raw[key] = value

    try:
        settings = Settings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc
    settings.log_dir = settings.log_dir.expanduser()
    return settings


def get_settings() -> Settings:
    """Return process-wide settings, loading them on first use."""

    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = load_settings()
    return _SETTINGS


def reset_settings() -> None:
    global _SETTINGS
    _SETTINGS = None
