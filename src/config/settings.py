"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use ANNODOCS_ prefix (e.g., ANNODOCS_STRICT_MODE=true).

Settings can also be loaded from a .env file in the project root.

These are process-level settings. Per-project transform options (component
mappings, output extension, ...) live in TranspilerConfig, see
config/transpiler.py.
"""

from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use ANNODOCS_ prefix.

    Examples:
        ANNODOCS_STRICT_MODE=true
        ANNODOCS_BACKUP_SUFFIX=.orig
        ANNODOCS_IGNORE_DIRS='["node_modules", "site"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="ANNODOCS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Transform configuration
    content_placeholder: str = Field(
        default="{{content}}",
        description="Placeholder substituted with block content in custom component templates",
    )

    strict_mode: bool = Field(
        default=False,
        description="Strict mode: treat warnings as errors when deciding file success",
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug output during transformation",
    )

    # Config file discovery
    config_filenames: List[str] = Field(
        default=[
            "annodocs.config.yaml",
            "annodocs.config.json",
            "transpiler.config.json",
            ".annodocs.json",
        ],
        description="Config file names searched for, in order, from the working directory upwards",
    )

    # File handling
    source_extensions: List[str] = Field(
        default=[".md", ".markdown"],
        description="Extensions of annotated Markdown sources",
    )

    ignore_dirs: List[str] = Field(
        default=["node_modules", "dist", "build", ".git"],
        description="Directory names never descended into",
    )

    backup_suffix: str = Field(
        default=".backup",
        description="Suffix appended to backup copies of overwritten files",
    )

    def configFile_find(self, start: Path) -> Optional[Path]:
        """
        Find the nearest config file from a directory upwards.

        Args:
            start: Directory to start searching in

        Returns:
            Path of the first config file found, None if there is none

        Example:
            >>> settings = AppSettings()
            >>> settings.configFile_find(Path("docs/guides"))
            PosixPath('annodocs.config.yaml')
        """
        current = start.resolve()
        for directory in [current, *current.parents]:
            for name in self.config_filenames:
                candidate = directory / name
                if candidate.is_file():
                    return candidate
        return None

    def placeholder_in(self, template: str) -> bool:
        """Check that a custom component template carries the content placeholder"""
        return self.content_placeholder in template


# Singleton instance - import this in your code
appsettings = AppSettings()
