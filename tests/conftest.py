"""Shared pytest fixtures for Tessera tests.

Fixtures are organized by category:
- Path fixtures: bundled sample site and template directories
- Registry fixtures: in-memory registries for resolver tests
- Locale fixtures: temporary Fluent resource trees
"""

from pathlib import Path

import pytest

from tessera.templates.registry import TemplateRegistry

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def test_templates_dir(fixtures_dir: Path) -> Path:
    """Return the directory with the index/child inheritance templates."""
    return fixtures_dir / "test-templates"


@pytest.fixture
def sample_site_dir(fixtures_dir: Path) -> Path:
    """Return the sample site (site templates, hyde theme, locales)."""
    return fixtures_dir / "sample_site"


# =============================================================================
# Registry Fixtures
# =============================================================================


@pytest.fixture
def registry() -> TemplateRegistry:
    """Return an empty registry."""
    return TemplateRegistry()


@pytest.fixture
def layered_registry() -> TemplateRegistry:
    """Return a registry providing `index.html` from all three layers."""
    registry = TemplateRegistry()
    registry.add_raw_template("index.html", "site index")
    registry.add_raw_template("hyde/templates/index.html", "theme index")
    registry.add_raw_template("__zola_builtins/index.html", "builtin index")
    registry.add_raw_template("page.html", "site page {{ title }}")
    registry.add_raw_template("hyde/templates/page.html", "theme page {{ title }}")
    registry.add_raw_template("about.html", "site about")
    return registry


# =============================================================================
# Locale Fixtures
# =============================================================================


@pytest.fixture
def locales_root(tmp_path: Path) -> Path:
    """Create a site root with `locales/en` and `locales/fr-FR` resources."""
    en_dir = tmp_path / "locales" / "en"
    en_dir.mkdir(parents=True)
    (en_dir / "main.ftl").write_text(
        "hello = Hello, { $name }!\nonly-english = English only\n",
        encoding="utf-8",
    )

    fr_dir = tmp_path / "locales" / "fr-FR"
    fr_dir.mkdir(parents=True)
    (fr_dir / "main.ftl").write_text("hello = Bonjour, { $name } !\n", encoding="utf-8")

    return tmp_path
