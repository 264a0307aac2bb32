"""
Configuration package for annodocs

Provides process settings via environment variables using pydantic-settings
and per-project transform configuration loaded from YAML/JSON files.
"""

from .settings import appsettings, AppSettings
from .transpiler import TranspilerConfig, ConfigError, config_load, config_write

__all__ = [
    "appsettings",
    "AppSettings",
    "TranspilerConfig",
    "ConfigError",
    "config_load",
    "config_write",
]
