"""Unit tests for configuration system."""

from pathlib import Path

import pytest
import yaml

from tessera.config import (
    LoggingConfig,
    TemplatesConfig,
    create_default_config,
    find_config_file,
    load_config,
    load_config_from_dict,
    substitute_env_vars,
)


class TestSubstituteEnvVars:
    """Tests for environment variable substitution."""

    def test_substitute_string(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env var in string."""
        monkeypatch.setenv("TEST_VAR", "test_value")

        result = substitute_env_vars("prefix_${TEST_VAR}_suffix")

        assert result == "prefix_test_value_suffix"

    def test_substitute_in_dict(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env vars in nested dictionaries."""
        monkeypatch.setenv("SITE_THEME", "hyde")

        data = {"templates": {"theme": "${SITE_THEME}", "directory": "templates"}}
        result = substitute_env_vars(data)

        assert result["templates"]["theme"] == "hyde"
        assert result["templates"]["directory"] == "templates"

    def test_substitute_in_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting env vars in list."""
        monkeypatch.setenv("EXT", "svg")

        result = substitute_env_vars(["html", "${EXT}"])

        assert result == ["html", "svg"]

    def test_missing_env_var_raises(self) -> None:
        """Test that missing env var raises ValueError."""
        with pytest.raises(ValueError, match="Environment variable not set"):
            substitute_env_vars("${NONEXISTENT_TESSERA_VAR}")

    def test_passthrough_non_string(self) -> None:
        """Test that non-string values pass through unchanged."""
        assert substitute_env_vars(123) == 123
        assert substitute_env_vars(True) is True
        assert substitute_env_vars(None) is None


class TestFindConfigFile:
    """Tests for config file discovery."""

    def test_find_tessera_dir_config(self, tmp_path: Path) -> None:
        """Test finding .tessera/config.yaml."""
        config_dir = tmp_path / ".tessera"
        config_dir.mkdir()
        config_file = config_dir / "config.yaml"
        config_file.write_text("templates:\n  theme: hyde")

        assert find_config_file(tmp_path) == config_file

    def test_find_root_config(self, tmp_path: Path) -> None:
        """Test finding tessera.yaml at root."""
        config_file = tmp_path / "tessera.yaml"
        config_file.write_text("templates:\n  theme: hyde")

        assert find_config_file(tmp_path) == config_file

    def test_prefer_tessera_dir_over_root(self, tmp_path: Path) -> None:
        """Test .tessera/config.yaml is preferred over tessera.yaml."""
        config_dir = tmp_path / ".tessera"
        config_dir.mkdir()
        preferred = config_dir / "config.yaml"
        preferred.write_text("# preferred")
        (tmp_path / "tessera.yaml").write_text("# fallback")

        assert find_config_file(tmp_path) == preferred

    def test_no_config_returns_none(self, tmp_path: Path) -> None:
        """Test returns None when no config found."""
        assert find_config_file(tmp_path) is None


class TestLoadConfigFromDict:
    """Tests for loading config from dictionary."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = load_config_from_dict({})

        assert config.templates.directory == "templates"
        assert config.templates.theme is None
        assert config.templates.themes_directory == "themes"
        assert config.templates.base_path == "."
        assert config.templates.autoescape == ["html", "htm", "xml"]
        assert config.logging.mode == "human"
        assert config.logging.level == "info"

    def test_custom_templates(self) -> None:
        """Test custom template configuration."""
        config = load_config_from_dict({
            "templates": {
                "directory": "layouts",
                "theme": "hyde",
                "themes_directory": "vendor/themes",
                "autoescape": ["html"],
            }
        })

        assert config.templates.directory == "layouts"
        assert config.templates.theme == "hyde"
        assert config.templates.themes_directory == "vendor/themes"
        assert config.templates.autoescape == ["html"]

    def test_null_base_path_disables_localization(self) -> None:
        """Test that an explicit null base_path becomes empty."""
        config = load_config_from_dict({"templates": {"base_path": None}})

        assert config.templates.base_path == ""

    def test_logging_level_is_case_insensitive(self) -> None:
        """Test that levels are normalized to lowercase."""
        config = load_config_from_dict({"logging": {"mode": "json", "level": "DEBUG"}})

        assert config.logging.mode == "json"
        assert config.logging.level == "debug"


class TestValidation:
    """Tests for config validation."""

    @pytest.mark.parametrize("theme", ["", "hyde/templates"])
    def test_invalid_theme(self, theme: str) -> None:
        """Test that theme names must be a single path segment."""
        with pytest.raises(ValueError, match="Invalid theme name"):
            TemplatesConfig(theme=theme)

    def test_invalid_log_mode(self) -> None:
        """Test that unknown modes are rejected."""
        with pytest.raises(ValueError, match="Invalid log mode"):
            LoggingConfig(mode="xml")

    def test_invalid_log_level(self) -> None:
        """Test that unknown levels are rejected."""
        with pytest.raises(ValueError, match="Invalid log level"):
            LoggingConfig(level="trace")


class TestLoadConfig:
    """Tests for load_config."""

    def test_explicit_missing_path_raises(self, tmp_path: Path) -> None:
        """Test that an explicit missing file raises."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_loads_discovered_file(self, sample_site_dir: Path) -> None:
        """Test loading the sample site's tessera.yaml."""
        config = load_config(start_path=sample_site_dir)

        assert config.templates.theme == "hyde"
        assert config.logging.level == "warning"
        assert config.config_path == (sample_site_dir / "tessera.yaml").resolve()

    def test_defaults_without_file(self, tmp_path: Path) -> None:
        """Test defaults when nothing is found."""
        config = load_config(start_path=tmp_path)

        assert config.config_path is None
        assert config.templates.theme is None

    def test_default_config_is_loadable(self) -> None:
        """Test that the generated default YAML parses to defaults."""
        data = yaml.safe_load(create_default_config())

        config = load_config_from_dict(data)

        assert config.templates.theme is None
        assert config.templates.base_path == "."
