"""Template resolution across the site, theme and built-in layers.

Candidates are checked in a fixed order and the LAST one present in the
registry wins:

    1. site      index.html
    2. theme     hyde/templates/index.html
    3. builtin   __zola_builtins/index.html

So a built-in always overrides a theme template, and a theme-scoped
template overrides a bare one of the same name. When nothing matches,
structural page kinds render a placeholder and anything else fails.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, TypeGuard

from tessera.errors import TemplateNotFoundError
from tessera.templates.builtins import (
    BUILTINS_PREFIX,
    STRUCTURAL_FALLBACKS,
    render_default_template,
)
from tessera.templates.localization import LOCALES_DIRECTORY, FluentLoader, parse_locale
from tessera.templates.registry import TemplateRegistry
from tessera.templates.themes import theme_base_path
from tessera.utils.logging import get_logger

logger = get_logger(__name__)


class TemplateLayer(Enum):
    """Source layer of a template candidate."""

    SITE = "site"
    THEME = "theme"
    BUILTIN = "builtin"


@dataclass(frozen=True)
class TemplateCandidate:
    """A registry key that may provide a logical template name."""

    layer: TemplateLayer
    key: str


def template_candidates(name: str, theme: str | None = None) -> list[TemplateCandidate]:
    """Return the keys that may provide ``name``, in evaluation order."""
    candidates = [TemplateCandidate(TemplateLayer.SITE, name)]
    if theme is not None:
        candidates.append(TemplateCandidate(TemplateLayer.THEME, f"{theme_base_path(theme)}{name}"))
    candidates.append(TemplateCandidate(TemplateLayer.BUILTIN, f"{BUILTINS_PREFIX}{name}"))
    return candidates


def resolve_template(
    name: str,
    registry: TemplateRegistry,
    theme: str | None = None,
) -> TemplateCandidate | None:
    """Pick the registry entry used to render ``name``.

    Args:
        name: Logical template name
        registry: Merged site registry
        theme: Active theme, or None

    Returns:
        The last candidate present in the registry, or None
    """
    selected: TemplateCandidate | None = None
    for candidate in template_candidates(name, theme):
        if candidate.key in registry:
            selected = candidate
    return selected


def _has_base_path(base_path: str | os.PathLike[str] | None) -> TypeGuard[str | os.PathLike[str]]:
    # Internal snippets such as shortcodes render without a filesystem anchor
    return base_path is not None and os.fspath(base_path) != ""


def render_template(
    name: str,
    registry: TemplateRegistry,
    context: Mapping[str, Any],
    theme: str | None = None,
    base_path: str | os.PathLike[str] | None = None,
) -> str:
    """Render a logical template name.

    The shared registry is never mutated: the ``fluent`` function is
    registered on a private clone when the context carries a ``lang`` and a
    ``locales`` directory exists under ``base_path``.

    Args:
        name: Logical template name, e.g. "page.html"
        registry: Merged site registry
        context: Template variables; ``lang`` enables localization
        theme: Active theme, or None
        base_path: Site root holding the ``locales`` directory

    Returns:
        Rendered output

    Raises:
        LocaleParseError: If ``lang`` is not a locale identifier
        LocalizationSetupError: If the locale files cannot be loaded
        RenderError: If the engine fails to render
        TemplateNotFoundError: If nothing provides ``name`` and it is not a
            structural page kind
    """
    selected = resolve_template(name, registry, theme)

    if selected is not None:
        logger.structured(
            logging.DEBUG,
            f"Resolved template {name}",
            template=name,
            key=selected.key,
            layer=selected.layer.value,
        )
        scoped = registry.clone()

        if "lang" in context:
            locale = parse_locale(context["lang"])

            if _has_base_path(base_path):
                locales_dir = Path(base_path) / LOCALES_DIRECTORY
                if locales_dir.exists():
                    scoped.register_function("fluent", FluentLoader(locales_dir, locale))

        return scoped.render(selected.key, context)

    url = STRUCTURAL_FALLBACKS.get(name)
    if url is None:
        raise TemplateNotFoundError(name)

    logger.debug("No template for %s, rendering placeholder", name)
    return render_default_template(name, url)
