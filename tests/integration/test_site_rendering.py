"""Integration tests: rendering the sample site end to end."""

from pathlib import Path

import pytest

from tessera.config import load_config
from tessera.errors import RenderError
from tessera.templates.renderer import SiteRenderer


@pytest.fixture
def renderer(sample_site_dir: Path) -> SiteRenderer:
    """Create a renderer for the sample site (theme: hyde)."""
    return SiteRenderer(load_config(start_path=sample_site_dir), sample_site_dir)


class TestSiteRendering:
    """End-to-end rendering across site, theme and built-in layers."""

    def test_theme_page_uses_site_base(self, renderer: SiteRenderer) -> None:
        """Test that the theme page extends the site's bare base.html."""
        output = renderer.render("page.html", {"page": {"content": "Body"}})

        assert "<article>Body</article>" in output
        assert "My Site" in output
        assert 'class="hyde"' not in output

    def test_site_template_with_localization(self, renderer: SiteRenderer) -> None:
        """Test the fluent function on a site template."""
        output = renderer.render("about.html", {"lang": "fr", "author": "Ada"})

        assert "Bonjour, Ada !" in output

    def test_theme_template_with_localization(self, renderer: SiteRenderer) -> None:
        """Test the fluent function on a theme template."""
        output = renderer.render("section.html", {"lang": "en"})

        assert "<h1>All posts</h1>" in output

    def test_fluent_missing_without_lang(self, renderer: SiteRenderer) -> None:
        """Test that templates calling fluent fail without a page language."""
        with pytest.raises(RenderError):
            renderer.render("section.html", {})

    def test_builtin_overrides_site(self, renderer: SiteRenderer) -> None:
        """Test that built-in templates win over site templates."""
        output = renderer.render("404.html", {})

        assert "404 Not Found" in output

    def test_structural_placeholder(self, renderer: SiteRenderer) -> None:
        """Test that a structural page kind missing everywhere degrades."""
        output = renderer.render("single.html", {})

        assert "single.html" in output

    def test_registry_built_once(self, renderer: SiteRenderer) -> None:
        """Test that the registry is reused between renders."""
        assert renderer.registry is renderer.registry


class TestLocalizationDisabled:
    """Rendering with base_path disabled in config."""

    def test_empty_base_path_skips_fluent(self, sample_site_dir: Path) -> None:
        """Test that an empty base_path leaves fluent unregistered."""
        config = load_config(start_path=sample_site_dir)
        config.templates.base_path = ""
        renderer = SiteRenderer(config, sample_site_dir)

        assert renderer.base_path is None
        with pytest.raises(RenderError, match="fluent"):
            renderer.render("section.html", {"lang": "en"})
