"""
Project transform configuration

TranspilerConfig holds the per-project options of a transform run: custom
component templates, the component package imports come from, output
extension, feature switches and the heading-title pattern table used by the
reverse matcher.

Config files are YAML or JSON (JSON is read through the YAML loader) and are
merged over the defaults:

    component_package: fumadocs-ui/components
    component_mappings:
      custom-tip: '<div className="custom-tip">{{content}}</div>'
    output_extension: .mdx
"""

import re
import json
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .settings import appsettings
from ..models.components import BUILTIN_TYPES


class ConfigError(Exception):
    """Raised when a config file cannot be read or fails validation"""
    pass


# Code titles matching any of these are taken as heading-derived when
# converting <CodeBlock title="..."> back to annotations
DEFAULT_HEADING_TITLE_PATTERNS: List[str] = [
    r"(?i)^(Getting Started|Installation|Usage|Example|Setup|Configuration|API|Tutorial|Guide)",
    r"(?i)^(Step \d+|Chapter \d+|Section \d+)",
    r"^[A-Z][a-z]+ [A-Z][a-z]+",
    r"(?i)^[A-Z][a-z]+ (Example|Usage|Guide|Tutorial|Setup|Installation)$",
]


class TranspilerConfig(BaseModel):
    """
    Options of a transform run.

    Attributes:
        component_package: Module prefix of the component imports
        component_mappings: Custom annotation type -> template with one
                            content placeholder. Built-in type names are
                            rejected, their handlers always win
        custom_imports: Custom annotation type -> import declaration added
                        whenever that type is emitted
        output_extension: Extension of forward-transformed files
        validate_syntax: Run per-type content validation
        extract_title: Promote a leading "# " heading to frontmatter title
        enhance_code_titles: Add heading-derived titles to plain code fences
        title_from_filename: Derive a title from the file name when the
                             document has no leading heading
        backup_original: Keep a backup copy of overwritten targets
        heading_title_patterns: Regular expressions classifying code titles
                                as heading-derived
    """

    component_package: str = Field(default="fumadocs-ui/components")
    component_mappings: Dict[str, str] = Field(default_factory=dict)
    custom_imports: Dict[str, str] = Field(default_factory=dict)
    output_extension: str = Field(default=".mdx")
    validate_syntax: bool = Field(default=True)
    extract_title: bool = Field(default=True)
    enhance_code_titles: bool = Field(default=True)
    title_from_filename: bool = Field(default=False)
    backup_original: bool = Field(default=False)
    heading_title_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_HEADING_TITLE_PATTERNS)
    )

    @field_validator("component_mappings")
    @classmethod
    def mappings_check(cls, value: Dict[str, str]) -> Dict[str, str]:
        for key, template in value.items():
            if key in BUILTIN_TYPES:
                raise ValueError(f'"{key}" is a built-in annotation type and cannot be mapped')
            if not appsettings.placeholder_in(template):
                raise ValueError(
                    f'Component mapping for "{key}" must include '
                    f"{appsettings.content_placeholder} placeholder"
                )
        return value

    @field_validator("custom_imports")
    @classmethod
    def imports_check(cls, value: Dict[str, str]) -> Dict[str, str]:
        for key, statement in value.items():
            if not statement.startswith("import "):
                raise ValueError(f'Invalid import statement for "{key}": "{statement}"')
        return value

    @field_validator("output_extension")
    @classmethod
    def extension_check(cls, value: str) -> str:
        if not value.startswith("."):
            raise ValueError('output_extension must start with a dot (e.g., ".mdx")')
        return value

    @field_validator("heading_title_patterns")
    @classmethod
    def patterns_check(cls, value: List[str]) -> List[str]:
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"Invalid heading title pattern {pattern!r}: {e}")
        return value

    def headingPatterns_compile(self) -> List[re.Pattern]:
        """Compile the heading-title pattern table"""
        return [re.compile(pattern) for pattern in self.heading_title_patterns]


def config_load(path: Optional[Path] = None) -> TranspilerConfig:
    """
    Load a config file and merge it over the defaults.

    Every key present in the file replaces its default.

    Args:
        path: YAML or JSON config file, None for pure defaults

    Returns:
        Validated TranspilerConfig

    Raises:
        ConfigError: If the file is missing, unparsable or invalid
    """
    if path is None:
        return TranspilerConfig()

    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to load {path}: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    try:
        return TranspilerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}:\n{e}")


def config_write(config: TranspilerConfig, path: Path) -> Path:
    """
    Export a configuration to a file.

    The format follows the extension: .json writes JSON, anything else YAML.

    Returns:
        The written path
    """
    path = Path(path)
    data = config.model_dump()
    if path.suffix == ".json":
        text = json.dumps(data, indent=2) + "\n"
    else:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    path.write_text(text, encoding='utf-8')
    return path
