"""Settings loading for the cache location resolver.

Settings come from an optional YAML file (``cache:`` section) and are then
overridden by environment variables, which may be supplied through a ``.env``
file.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from .cache import DEFAULT_MAX_ATTEMPTS
from .schema import CacheLocationConfig

ENV_IDENTIFIER = "PARSE_CACHE_IDENTIFIER"
ENV_STORAGE_ROOT = "PARSE_CACHE_ROOT"
ENV_MAX_ATTEMPTS = "PARSE_CACHE_MAX_ATTEMPTS"


class CacheSettings(BaseModel):
    identifier: Optional[str] = None
    storage_root: str = "."
    max_attempts: int = Field(DEFAULT_MAX_ATTEMPTS, ge=1)


def load_settings(config_file: Optional[Union[str, Path]] = None) -> CacheSettings:
    """Load settings from ``config_file`` and the environment.

    Example YAML:

        cache:
          identifier: my-app
          storage_root: ~/.local/share/my-app
          max_attempts: 50
    """
    load_dotenv(find_dotenv(usecwd=True))
    values: Dict[str, Any] = {}
    if config_file is not None:
        with open(config_file, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid settings YAML {config_file}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {config_file} must contain a mapping")
        section = data.get("cache") or {}
        if not isinstance(section, dict):
            raise ValueError(f"'cache' section in {config_file} must be a mapping")
        values.update(section)
    env_map = {
        ENV_IDENTIFIER: "identifier",
        ENV_STORAGE_ROOT: "storage_root",
        ENV_MAX_ATTEMPTS: "max_attempts",
    }
    for env_name, key in env_map.items():
        value = os.getenv(env_name)
        if value:
            values[key] = value
    return CacheSettings(**values)


def build_default_config(settings: CacheSettings) -> CacheLocationConfig:
    """Build the config an application passes around from start-up on."""
    if settings.identifier is not None:
        return CacheLocationConfig(identifier=settings.identifier)
    return CacheLocationConfig.fallback()


__all__ = ["CacheSettings", "load_settings", "build_default_config"]
