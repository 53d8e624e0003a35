"""Site renderer: configured entry point for template rendering."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from tessera.config import TesseraConfig
from tessera.templates.loader import build_site_registry
from tessera.templates.registry import TemplateRegistry
from tessera.templates.resolver import render_template

logger = logging.getLogger(__name__)


class SiteRenderer:
    """Renders logical template names for one site.

    The merged registry is built on first use and reused for every render
    of the build.

    Usage:
        renderer = SiteRenderer(load_config(start_path=site_root), site_root)
        html = renderer.render("page.html", {"page": page, "lang": "en"})
    """

    def __init__(self, config: TesseraConfig | None = None, root: Path | None = None) -> None:
        """Initialize the renderer.

        Args:
            config: Tessera configuration
            root: Site root that relative config paths are resolved against
        """
        self.config = config or TesseraConfig()
        self.root = root or Path.cwd()
        self._registry: TemplateRegistry | None = None

    @property
    def theme(self) -> str | None:
        return self.config.templates.theme

    @property
    def base_path(self) -> Path | None:
        """Locales anchor, or None when localization is disabled."""
        base_path = self.config.templates.base_path
        if not base_path:
            return None
        return self.root / base_path

    @property
    def registry(self) -> TemplateRegistry:
        if self._registry is None:
            templates = self.config.templates
            self._registry = build_site_registry(
                self.root / templates.directory,
                theme=templates.theme,
                themes_dir=self.root / templates.themes_directory,
                autoescape=templates.autoescape,
            )
        return self._registry

    def render(self, name: str, context: Mapping[str, Any]) -> str:
        """Render a logical template name.

        Args:
            name: Template name, e.g. "index.html"
            context: Template variables

        Returns:
            Rendered output
        """
        rendered = render_template(
            name,
            self.registry,
            context,
            theme=self.theme,
            base_path=self.base_path,
        )
        logger.debug("Rendered %s (%d characters)", name, len(rendered))
        return rendered

