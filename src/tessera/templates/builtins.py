"""Built-in templates.

Two kinds of built-ins exist. Templates shipped in the ``bundled`` package
directory are registered under ``__zola_builtins/<name>`` and take part in
normal resolution. The structural fallback placeholder is never registered:
it is rendered directly when a structural page kind has no template at all.
"""

import logging

from jinja2 import Environment, PackageLoader

from tessera.templates.registry import TemplateRegistry

logger = logging.getLogger(__name__)

BUILTINS_PREFIX = "__zola_builtins/"

SECTION_VARIABLES_URL = (
    "https://www.getzola.org/documentation/templates/pages-sections/#section-variables"
)
PAGE_VARIABLES_URL = (
    "https://www.getzola.org/documentation/templates/pages-sections/#page-variables"
)
TAXONOMIES_URL = "https://www.getzola.org/documentation/templates/taxonomies/"

# Page kinds that render a placeholder instead of failing the build
STRUCTURAL_FALLBACKS: dict[str, str] = {
    "index.html": SECTION_VARIABLES_URL,
    "section.html": SECTION_VARIABLES_URL,
    "page.html": PAGE_VARIABLES_URL,
    "single.html": TAXONOMIES_URL,
    "list.html": TAXONOMIES_URL,
}

DEFAULT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta http-equiv="X-UA-Compatible" content="ie=edge">
    <title>Zola</title>
</head>
<body>
    <section>
        <h1>Welcome to Zola!</h1>
        <p>
            You're seeing this page because we couldn't find a template to render.
        </p>
        <p>
            To modify this page, create a <b>{{ filename }}</b> file in the templates directory or
            <a href="https://www.getzola.org/themes/" target="_blank">install a theme</a>.
            <br>
            You can find what variables are available in this template in the
            <a href="{{ url }}" target="_blank">documentation</a>.
        </p>
    </section>
</body>
</html>
"""

_placeholder_env = Environment(autoescape=True, keep_trailing_newline=True)


def render_default_template(filename: str, url: str) -> str:
    """Render the structural fallback placeholder.

    Args:
        filename: Template name the site is missing
        url: Documentation page listing the variables for that page kind

    Returns:
        Placeholder HTML
    """
    return _placeholder_env.from_string(DEFAULT_TEMPLATE).render(filename=filename, url=url)


def load_builtin_templates(registry: TemplateRegistry | None = None) -> TemplateRegistry:
    """Register the packaged built-in templates under ``__zola_builtins/``.

    Args:
        registry: Registry to add to (a new one is created if omitted)

    Returns:
        The registry holding the built-ins
    """
    if registry is None:
        registry = TemplateRegistry()

    loader = PackageLoader("tessera", "templates/bundled")
    env = Environment(loader=loader)

    for name in loader.list_templates():
        source, filename, _ = loader.get_source(env, name)
        registry.add_raw_template(f"{BUILTINS_PREFIX}{name}", source, path=filename)

    logger.debug("Registered %d built-in templates", len(loader.list_templates()))
    return registry
