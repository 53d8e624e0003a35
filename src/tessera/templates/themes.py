"""Theme namespace rewriting.

Theme templates are merged into the site registry with lower priority than
site templates. So that a site template can still extend the theme template
it shadows, every theme template is also registered under
``<theme>/templates/<name>``.
"""

import logging

from tessera.templates.registry import TemplateDefinition, TemplateRegistry

logger = logging.getLogger(__name__)


def theme_base_path(theme: str) -> str:
    """Return the key prefix for templates of ``theme``."""
    return f"{theme}/templates/"


def rewrite_theme_paths(theme_registry: TemplateRegistry, theme: str) -> None:
    """Register a prefixed copy of every template in a theme registry.

    The original bare entries are kept unchanged. Parent references are not
    rewritten: they resolve against whatever key space exists after the
    theme registry is merged into the site registry.

    Not idempotent. A second call prefixes the prefixed copies again, so each
    theme registry must be rewritten exactly once per build.

    Args:
        theme_registry: Registry holding only the theme's templates
        theme: Theme name
    """
    prefix = theme_base_path(theme)
    staged: dict[str, TemplateDefinition] = {}

    for key, definition in theme_registry.items():
        renamed = definition.clone()
        renamed.name = f"{prefix}{key}"
        staged[renamed.name] = renamed

    # Replace-on-conflict merge; no renamed key can clash with a bare one
    theme_registry.update(staged)
    logger.debug("Rewrote %d templates of theme %s", len(staged), theme)
