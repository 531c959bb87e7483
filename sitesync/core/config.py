"""Console connection settings: YAML file + environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

_ENV_OVERRIDES = {
    "SITESYNC_HOST": "host",
    "SITESYNC_PORT": "port",
    "SITESYNC_USER": "user",
    "SITESYNC_PASSWORD": "password",
}


class ConfigError(Exception):
    """Raised when the settings file is missing or malformed."""


class Settings(BaseModel):
    """Connection settings for the vulnerability-management console."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    host: str
    port: int = 3780
    user: str = ""
    password: str = Field(default="", alias="pass")
    verify_tls: bool = True
    timeout: float = 60.0

    @property
    def base_url(self) -> str:
        return f"https://{self.host}:{self.port}"


def load_settings(path: str | Path) -> Settings:
    """Read settings from a YAML file, then apply ``SITESYNC_*`` env overrides.

    Both the nested layout (``nexpose: {host, user, pass}``) and a flat
    mapping are accepted.
    """
    p = Path(path).expanduser()
    if not p.is_file():
        raise ConfigError(f"settings file not found: {p}")

    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {p}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("settings root must be a mapping")

    data = _strip_symbol_keys(data)
    section: Any = data.get("nexpose", data)
    if not isinstance(section, dict):
        raise ConfigError("'nexpose' section must be a mapping")

    values = _strip_symbol_keys(section)
    for env_key, field_name in _ENV_OVERRIDES.items():
        env_value = os.environ.get(env_key)
        if env_value:
            if field_name == "password":
                values.pop("pass", None)
            values[field_name] = env_value

    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"invalid settings in {p}: {exc}") from exc


def _strip_symbol_keys(mapping: dict) -> dict[str, Any]:
    """Normalise ``:host:``-style keys written by Ruby's YAML dumper to ``host``."""
    return {str(k).lstrip(":"): v for k, v in mapping.items()}
