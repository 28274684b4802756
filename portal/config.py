"""Portal configuration loaded from config.yaml + environment variables.

Precedence: PORTAL_* environment variables (any case, or from .env), then
config.yaml, then the defaults below.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml(path: Path = _CONFIG_PATH) -> dict:
    if path.exists():
        with open(path) as f:
            return yaml.safe_load(f) or {}
    return {}


class DirectoryConfig(BaseSettings):
    url: str = ""
    transport: Literal["get", "post"] = "get"
    timeout_seconds: float = 10.0
    mock_mode: bool = True

    model_config = SettingsConfigDict(env_prefix="PORTAL_DIRECTORY_", env_file=".env", extra="ignore")


class SessionConfig(BaseSettings):
    path: str = "data/session.json"
    key: str = "user"

    model_config = SettingsConfigDict(env_prefix="PORTAL_SESSION_", env_file=".env", extra="ignore")


class VisitorConfig(BaseSettings):
    otp_validity_hours: int = 24

    model_config = SettingsConfigDict(env_prefix="PORTAL_VISITOR_", env_file=".env", extra="ignore")


class Settings(BaseSettings):
    community_name: str = "Green Avenue"
    log_level: str = "INFO"
    directory: DirectoryConfig = Field(default_factory=DirectoryConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    visitor: VisitorConfig = Field(default_factory=VisitorConfig)

    model_config = SettingsConfigDict(
        env_prefix="PORTAL_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


def _merge(cls: type[BaseSettings], yaml_values: dict) -> BaseSettings:
    """Build ``cls`` from its YAML values, with environment and .env values on top."""
    from_env = cls()
    values = dict(yaml_values)
    values.update(from_env.model_dump(include=from_env.model_fields_set))
    return cls(**values)


def get_settings(config_path: Path | None = None) -> Settings:
    """Build Settings by merging YAML defaults with env overrides."""
    y = _load_yaml(config_path or _CONFIG_PATH)
    top = {k: y[k] for k in ("community_name", "log_level") if k in y}
    settings = _merge(Settings, top)
    settings.directory = _merge(DirectoryConfig, y.get("directory") or {})
    settings.session = _merge(SessionConfig, y.get("session") or {})
    settings.visitor = _merge(VisitorConfig, y.get("visitor") or {})
    return settings
