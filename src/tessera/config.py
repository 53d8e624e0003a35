"""Tessera configuration system.

Configuration is YAML-based. Supports environment variable substitution
(${VAR}) in config files.

Configuration file discovery (in priority order):
1. Explicit path
2. ./.tessera/config.yaml
3. ./tessera.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from tessera.utils.logging import LEVEL_NAMES, LogMode

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class TemplatesConfig:
    """Template source configuration.

    Attributes:
        directory: Site templates directory, relative to the site root
        theme: Active theme name (None disables theme lookup)
        themes_directory: Directory holding one sub-directory per theme
        base_path: Root of the ``locales`` directory; empty disables
            localization
        autoescape: File extensions rendered with HTML autoescaping
    """

    directory: str = "templates"
    theme: str | None = None
    themes_directory: str = "themes"
    base_path: str = "."
    autoescape: list[str] = field(default_factory=lambda: ["html", "htm", "xml"])

    def __post_init__(self) -> None:
        """Validate template configuration."""
        if self.theme is not None and (not self.theme or "/" in self.theme):
            raise ValueError(f"Invalid theme name: {self.theme!r}")


@dataclass
class LoggingConfig:
    """Logging configuration.

    Attributes:
        mode: Output mode (human, verbose, json)
        level: Minimum level (debug, info, warning, error)
    """

    mode: str = "human"
    level: str = "info"

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        valid_modes = {m.value for m in LogMode}
        if self.mode not in valid_modes:
            raise ValueError(f"Invalid log mode: {self.mode}. Valid: {sorted(valid_modes)}")

        if self.level not in LEVEL_NAMES:
            raise ValueError(f"Invalid log level: {self.level}. Valid: {sorted(LEVEL_NAMES)}")


@dataclass
class TesseraConfig:
    """Top-level Tessera configuration.

    Attributes:
        templates: Template sources
        logging: Log output settings
    """

    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute ${VAR} references with environment variable values.

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.tessera/config.yaml
    2. ./tessera.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".tessera" / "config.yaml",
        start_path / "tessera.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> TesseraConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        TesseraConfig instance
    """
    data = substitute_env_vars(data)

    config = TesseraConfig()

    if "templates" in data:
        templates_data = data["templates"] or {}
        defaults = config.templates
        config.templates = TemplatesConfig(
            directory=templates_data.get("directory", defaults.directory),
            theme=templates_data.get("theme", defaults.theme),
            themes_directory=templates_data.get("themes_directory", defaults.themes_directory),
            # An explicit null disables localization like ""
            base_path=templates_data.get("base_path", defaults.base_path) or "",
            autoescape=list(templates_data.get("autoescape", defaults.autoescape)),
        )

    if "logging" in data:
        logging_data = data["logging"] or {}
        config.logging = LoggingConfig(
            mode=logging_data.get("mode", config.logging.mode),
            level=str(logging_data.get("level", config.logging.level)).lower(),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
    start_path: Path | None = None,
) -> TesseraConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified
        start_path: Directory to search from (defaults to cwd)

    Returns:
        TesseraConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path: Path | None = config_path
    elif auto_discover:
        found_path = find_config_file(start_path)
    else:
        found_path = None

    if found_path is not None:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = TesseraConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# Tessera Configuration

# Template sources
templates:
  directory: "templates"        # site templates, relative to the site root
  # theme: "hyde"               # active theme under themes_directory
  themes_directory: "themes"
  base_path: "."                # holds locales/<lang>/*.ftl; "" disables localization
  autoescape: ["html", "htm", "xml"]

# Log output
logging:
  mode: "human"                 # human, verbose, json
  level: "info"                 # debug, info, warning, error
'''
