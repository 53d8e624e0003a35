"""Assembling the site registry from template directories.

Build order: built-ins, then site templates, then the rewritten theme
templates merged underneath (site keys win on collisions), then
inheritance chains.
"""

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from tessera.errors import RegistryError
from tessera.templates.builtins import load_builtin_templates
from tessera.templates.registry import DEFAULT_AUTOESCAPE, TemplateRegistry
from tessera.templates.themes import rewrite_theme_paths

logger = logging.getLogger(__name__)


def load_template_directory(
    directory: Path,
    registry: TemplateRegistry | None = None,
) -> TemplateRegistry:
    """Add every template below ``directory`` keyed by its relative path.

    Args:
        directory: Templates root
        registry: Registry to add to (a new one is created if omitted)

    Returns:
        The registry holding the templates

    Raises:
        RegistryError: If a file cannot be read as UTF-8 text or fails to parse
    """
    if registry is None:
        registry = TemplateRegistry()

    if not directory.is_dir():
        logger.debug("Template directory not found: %s", directory)
        return registry

    loader = FileSystemLoader(str(directory), encoding="utf-8")
    env = Environment(loader=loader)
    names = loader.list_templates()

    for name in names:
        try:
            source, filename, _ = loader.get_source(env, name)
        except (UnicodeDecodeError, OSError) as e:
            raise RegistryError(f"Failed to read '{name}': {e}") from e
        registry.add_raw_template(name, source, path=filename)

    logger.debug("Loaded %d templates from %s", len(names), directory)
    return registry


def load_theme_templates(
    themes_dir: Path,
    theme: str,
    autoescape: tuple[str, ...] | list[str] = DEFAULT_AUTOESCAPE,
) -> TemplateRegistry:
    """Load a theme's templates and rewrite them into its namespace."""
    registry = load_template_directory(
        themes_dir / theme / "templates",
        TemplateRegistry(autoescape=autoescape),
    )
    rewrite_theme_paths(registry, theme)
    return registry


def build_site_registry(
    site_templates_dir: Path,
    theme: str | None = None,
    themes_dir: Path | None = None,
    autoescape: tuple[str, ...] | list[str] = DEFAULT_AUTOESCAPE,
) -> TemplateRegistry:
    """Build the merged registry used for every render of a site build.

    Args:
        site_templates_dir: The site's templates directory
        theme: Active theme, or None
        themes_dir: Directory holding the themes (required with a theme)
        autoescape: File extensions rendered with HTML autoescaping

    Returns:
        Registry with inheritance chains built

    Raises:
        RegistryError: If a template fails to parse or extends a missing one
    """
    registry = load_builtin_templates(TemplateRegistry(autoescape=autoescape))
    load_template_directory(site_templates_dir, registry)

    if theme is not None:
        if themes_dir is None:
            raise ValueError(f"Theme {theme!r} is set but no themes directory was given")
        registry.extend(load_theme_templates(themes_dir, theme, autoescape))

    registry.build_inheritance_chains()
    logger.info("Template registry ready (%d templates)", len(registry))
    return registry
