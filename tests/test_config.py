"""
Configuration tests

Tests application settings and loading a user configuration module.
"""

import os
import tempfile
import textwrap
from pathlib import Path

import pytest

from content_factory.config.settings import AppSettings
from content_factory.lib.errors import ConfigLoadError
from content_factory.lib.loader import config_load
from content_factory.models.config import FactoryConfig, ToolConfig, config_define, tool_define


@pytest.fixture
def root():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


class TestAppSettings:
    """Test environment-driven settings"""

    def test_defaults(self):
        """Defaults describe the directive syntax"""
        settings = AppSettings()
        assert settings.filter_tag == "content-factory-filter"
        assert settings.include_tag == "content-factory-include-file"
        assert settings.root_prefix == "@/"
        assert settings.glob_ignore == ["**/node_modules/**"]
        assert settings.glob_max_depth == 10

    def test_missing_file_marker(self):
        """Marker text embeds the literal path"""
        assert AppSettings().missingFile_make("./nope.md") == "[MISSING FILE: ./nope.md]"

    def test_environment_override(self, monkeypatch):
        """CONTENT_FACTORY_ variables override defaults"""
        monkeypatch.setenv("CONTENT_FACTORY_USE_LOGS", "true")
        monkeypatch.setenv("CONTENT_FACTORY_GLOB_MAX_DEPTH", "3")
        settings = AppSettings()
        assert settings.use_logs is True
        assert settings.glob_max_depth == 3


class TestConfigHelpers:
    """Test typed configuration anchors"""

    def test_define_returns_same_object(self):
        config = FactoryConfig(tools={"claude": ToolConfig()})
        assert config_define(config) is config

    def test_tool_define_returns_same_object(self):
        tool = ToolConfig()
        assert tool_define(tool) is tool

    def test_path_helpers_exported(self):
        """Segment helpers are importable from the package root"""
        from content_factory import pathSegment_replace, pathStartSegments_remove

        assert pathStartSegments_remove("src/rules/a.md") == os.path.join("rules", "a.md")
        assert pathSegment_replace("docs/claude/x.md", "claude", "roo") == os.path.join("docs", "roo", "x.md")


class TestConfigLoad:
    """Test importing a configuration module"""

    def test_loads_config(self, root):
        """Module-level 'config' is returned"""
        path = root / "content-factory.config.py"
        path.write_text(textwrap.dedent("""
            from content_factory import FactoryConfig, ToolConfig, Strategy, TransformResult

            def build(context):
                return TransformResult()

            config = FactoryConfig(
                tools={
                    "claude": ToolConfig(strategies=[Strategy("rules", ["**/*.md"], build)]),
                    "roo": ToolConfig(),
                },
                pipelines={"noop": lambda context: None},
            )
        """))

        config = config_load(path)

        assert list(config.tools) == ["claude", "roo"]
        assert config.tools["claude"].strategies[0].name == "rules"
        assert "noop" in config.pipelines

    def test_missing_file(self, root):
        """Nonexistent config file fails"""
        with pytest.raises(ConfigLoadError, match="not found"):
            config_load(root / "absent.py")

    def test_import_error(self, root):
        """Errors raised while importing are wrapped"""
        path = root / "broken.py"
        path.write_text("raise ValueError('bad config')\n")
        with pytest.raises(ConfigLoadError, match="bad config"):
            config_load(path)

    def test_missing_config_object(self, root):
        """A module without a FactoryConfig named config fails"""
        path = root / "empty.py"
        path.write_text("config = {'tools': {}}\n")
        with pytest.raises(ConfigLoadError, match="FactoryConfig"):
            config_load(path)
