"""Configuration management for payledger.

Settings live in a single settings.yaml:
- employees_file: registry file loaded at start-up
- error_log: where unknown IDs and missing pay files are appended
- output_dir: where <month>_output.txt summaries go
- currency: symbol used when rendering amounts
- tax: allowance / rate / months_in_year for the flat tax model

Config directory resolution:
1. PAYLEDGER_CONFIG_PATH environment variable (if set)
2. XDG_CONFIG_HOME/payledger/ or ~/.config/payledger/

A missing settings file means defaults; relative paths in settings are
resolved against the current working directory, like the legacy tool.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .errors import ConfigNotFoundError, PayledgerError
from .schemas import Settings

APP_NAME = "payledger"
SETTINGS_FILENAME = "settings.yaml"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s: %(message)s"


class SettingsError(PayledgerError):
    """Raised when settings.yaml exists but doesn't validate."""
    pass


def configure_logging(default_level: str = "WARNING") -> None:
    """Configure root logging from the LOG_LEVEL environment variable."""
    level_name = os.environ.get("LOG_LEVEL", default_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. PAYLEDGER_CONFIG_PATH environment variable
    2. ~/.config/payledger/ (XDG_CONFIG_HOME)
    """
    env_path = os.environ.get("PAYLEDGER_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Path to settings.yaml (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings(path: Optional[Path] = None, require_exists: bool = False) -> Settings:
    """Load and validate settings.yaml.

    Args:
        path: Explicit settings file (defaults to get_settings_path())
        require_exists: Raise instead of returning defaults when missing

    Raises:
        ConfigNotFoundError: If require_exists=True and the file is missing
        SettingsError: If the file has unknown keys or invalid values
    """
    settings_file = Path(path) if path else get_settings_path()

    if not settings_file.exists():
        if require_exists:
            raise ConfigNotFoundError(
                f"No settings found at {settings_file}\n\n"
                f"Create one with: payledger settings init"
            )
        return Settings()

    with open(settings_file, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    try:
        return Settings.model_validate(raw)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {settings_file}:\n{e}") from e


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Write settings.yaml and return its path."""
    settings_file = Path(path) if path else get_settings_path()
    settings_file.parent.mkdir(parents=True, exist_ok=True)

    data = settings.model_dump(mode="json")
    with open(settings_file, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting by dot-notation key (e.g. "tax.rate")."""
    value: Any = load_settings().model_dump()
    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default
    return value


def set_setting(key: str, value: Any) -> Path:
    """Set a setting by dot-notation key, validating the result.

    Raises:
        SettingsError: If the key is unknown or the value invalid
    """
    data = load_settings().model_dump(mode="json")

    parts = key.split(".")
    current = data
    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            raise SettingsError(f"Unknown setting: {key}")
        current = current[part]
    if parts[-1] not in current:
        raise SettingsError(f"Unknown setting: {key}")
    current[parts[-1]] = value

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid value for {key}:\n{e}") from e
    return save_settings(settings)
