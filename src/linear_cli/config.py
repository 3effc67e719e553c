"""Configuration helpers for linctl."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

LOGGER = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.linear.app/graphql"
API_KEY_ENV_VARS = ("LINCTL_API_KEY", "LINEAR_API_KEY")


class ConfigError(RuntimeError):
    """Raised when the settings file cannot be used."""


def get_home_directory() -> Path:
    """Directory that holds the auth and settings files."""
    home = os.environ.get("LINCTL_HOME")
    if home:
        return Path(home)
    return Path.home()


def get_auth_path() -> Path:
    """Credentials file, readable by its owner only."""
    return get_home_directory() / ".linctl-auth.json"


def get_settings_path() -> Path:
    return get_home_directory() / ".linctl.yaml"


def get_api_url() -> str:
    url = os.environ.get("LINCTL_API_URL")
    if url and url.strip():
        return url.strip()
    return DEFAULT_API_URL


def get_env_api_key() -> tuple[str, str] | None:
    """Return ``(variable name, key)`` for the first API key set in the environment."""
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value and value.strip():
            return name, value.strip()
    return None


@dataclass
class Settings:
    """Values read from the optional YAML settings file."""

    plaintext: bool = False
    json: bool = False
    api_url: str | None = None
    default_team: str | None = None
    source: Path | None = None


def load_settings(path: Path | None = None) -> Settings:
    """Read settings from ``path``, or from the default location when it exists.

    An explicitly requested file must exist; the default one is optional.
    """
    explicit = path is not None
    settings_path = path if path is not None else get_settings_path()
    if not settings_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {settings_path}")
        return Settings()

    try:
        raw = yaml.safe_load(settings_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {settings_path}: {exc}") from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{settings_path} must contain a mapping of settings.")

    LOGGER.debug("Loaded settings from %s", settings_path)
    return Settings(
        plaintext=_as_bool(raw.get("plaintext"), "plaintext"),
        json=_as_bool(raw.get("json"), "json"),
        api_url=_optional_str(raw.get("api_url")),
        default_team=_optional_str(raw.get("default_team")),
        source=settings_path,
    )


def _as_bool(value: Any, key: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise ConfigError(f"Setting '{key}' must be true or false.")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return str(value)
