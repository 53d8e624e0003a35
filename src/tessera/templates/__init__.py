"""Tessera template resolution.

Resolves logical template names across the site, theme and built-in layers
and renders them with Jinja2.
"""

from tessera.templates.builtins import load_builtin_templates, render_default_template
from tessera.templates.loader import build_site_registry, load_template_directory
from tessera.templates.localization import FluentLoader, parse_locale
from tessera.templates.registry import TemplateDefinition, TemplateRegistry
from tessera.templates.renderer import SiteRenderer
from tessera.templates.resolver import (
    TemplateCandidate,
    TemplateLayer,
    render_template,
    resolve_template,
)
from tessera.templates.themes import rewrite_theme_paths

__all__ = [
    "FluentLoader",
    "SiteRenderer",
    "TemplateCandidate",
    "TemplateDefinition",
    "TemplateLayer",
    "TemplateRegistry",
    "build_site_registry",
    "load_builtin_templates",
    "load_template_directory",
    "parse_locale",
    "render_default_template",
    "render_template",
    "resolve_template",
    "rewrite_theme_paths",
]
