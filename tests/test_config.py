"""
Configuration tests - validation, loading, merging and export
"""

import json
import tempfile
from pathlib import Path

import pytest

from annodocs.config import (
    AppSettings,
    ConfigError,
    TranspilerConfig,
    config_load,
    config_write,
)
from annodocs.lib.components import ComponentRegistry
from annodocs.models.components import BUILTIN_TYPES


class TestValidation:
    """Test field validators"""

    def test_defaults(self):
        config = TranspilerConfig()
        assert config.component_package == "fumadocs-ui/components"
        assert config.output_extension == ".mdx"
        assert config.component_mappings == {}
        assert len(config.headingPatterns_compile()) == 4

    def test_template_needs_placeholder(self):
        with pytest.raises(ValueError):
            TranspilerConfig(component_mappings={"tip": "<Tip />"})

    @pytest.mark.parametrize("name", ["callout-info", "tabs", "code-block"])
    def test_builtin_types_not_mappable(self, name):
        """Built-in handlers always win, so mapping their names is rejected"""
        with pytest.raises(ValueError, match="built-in"):
            TranspilerConfig(component_mappings={name: "<X>{{content}}</X>"})

    def test_builtin_types_match_registry(self):
        assert ComponentRegistry().types_list() == list(BUILTIN_TYPES)

    def test_import_statement(self):
        with pytest.raises(ValueError):
            TranspilerConfig(custom_imports={"tip": "from './tip' import Tip"})

    def test_extension_needs_dot(self):
        with pytest.raises(ValueError):
            TranspilerConfig(output_extension="mdx")

    def test_patterns_compile(self):
        with pytest.raises(ValueError):
            TranspilerConfig(heading_title_patterns=["(unclosed"])


class TestLoading:
    """Test reading config files"""

    def test_no_path_gives_defaults(self):
        assert config_load(None) == TranspilerConfig()

    def test_yaml_overrides_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "annodocs.config.yaml"
            path.write_text(
                "output_extension: .md\n"
                "component_mappings:\n"
                "  custom-tip: '<div>{{content}}</div>'\n"
            )
            config = config_load(path)

        assert config.output_extension == ".md"
        assert config.component_mappings["custom-tip"] == "<div>{{content}}</div>"
        assert list(config.component_mappings) == ["custom-tip"]
        assert config.component_package == "fumadocs-ui/components"

    def test_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "transpiler.config.json"
            path.write_text(json.dumps({"extract_title": False}))
            assert config_load(path).extract_title is False

    def test_missing_file(self):
        with pytest.raises(ConfigError):
            config_load(Path("/nonexistent/annodocs.config.yaml"))

    def test_invalid_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "annodocs.config.yaml"
            path.write_text("output_extension: mdx\n")
            with pytest.raises(ConfigError):
                config_load(path)

    def test_builtin_mapping_rejected(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "annodocs.config.yaml"
            path.write_text("component_mappings:\n  callout-info: '<Note>{{content}}</Note>'\n")
            with pytest.raises(ConfigError, match="callout-info"):
                config_load(path)

    def test_not_a_mapping(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "annodocs.config.yaml"
            path.write_text("- just\n- a list\n")
            with pytest.raises(ConfigError):
                config_load(path)


class TestExport:
    """Test writing configs back out"""

    @pytest.mark.parametrize("name", ["annodocs.config.yaml", "annodocs.config.json"])
    def test_write_then_load(self, name):
        config = TranspilerConfig(component_package="@acme/ui", title_from_filename=True)
        with tempfile.TemporaryDirectory() as tmp:
            path = config_write(config, Path(tmp) / name)
            assert config_load(path) == config


class TestSettings:
    """Test process settings"""

    def test_config_file_found_upwards(self):
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            nested = root / "docs" / "guides"
            nested.mkdir(parents=True)
            (root / ".annodocs.json").write_text("{}")

            found = AppSettings().configFile_find(nested)
            assert found == (root / ".annodocs.json").resolve()

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("ANNODOCS_STRICT_MODE", "true")
        assert AppSettings().strict_mode is True

    def test_placeholder(self):
        settings = AppSettings()
        assert settings.placeholder_in("<X>{{content}}</X>")
        assert not settings.placeholder_in("<X />")
