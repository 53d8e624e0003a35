"""Template registry backed by a private Jinja2 environment.

The registry maps template keys to definitions. Keys follow three
conventions: bare site names (``index.html``), theme-scoped names
(``hyde/templates/index.html``) and built-in names
(``__zola_builtins/404.html``). Jinja2 reads every source, including
``{% extends %}`` targets, through the registry, so the final flat key space
decides what a parent reference points at.
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from jinja2 import (
    BaseLoader,
    BytecodeCache,
    Environment,
    StrictUndefined,
    TemplateNotFound,
    TemplateSyntaxError,
    nodes,
    select_autoescape,
)

from tessera.errors import RegistryError, RenderError, TesseraError

logger = logging.getLogger(__name__)

DEFAULT_AUTOESCAPE: tuple[str, ...] = ("html", "htm", "xml")


@dataclass
class TemplateDefinition:
    """A registered template.

    Attributes:
        name: The template's own key
        source: Template text
        path: File the source was read from, if any
        parent: Key of the template this one extends
        parents: Full inheritance chain, nearest parent first
    """

    name: str
    source: str
    path: str | None = None
    parent: str | None = None
    parents: list[str] = field(default_factory=list)

    def clone(self) -> "TemplateDefinition":
        """Return an independent copy of this definition."""
        return replace(self, parents=list(self.parents))


class RegistryLoader(BaseLoader):
    """Jinja2 loader that serves sources straight from a registry."""

    def __init__(self, registry: "TemplateRegistry") -> None:
        self._registry = registry

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, str | None, Callable[[], bool]]:
        definition = self._registry.get(template)
        if definition is None:
            raise TemplateNotFound(template)

        # Stale as soon as the key is rebound to another definition
        return (
            definition.source,
            definition.path,
            lambda: self._registry.get(template) is definition,
        )

    def list_templates(self) -> list[str]:
        return sorted(self._registry.keys())


class MemoryBytecodeCache(BytecodeCache):
    """In-memory Jinja2 bytecode cache shared by a registry and its clones.

    Buckets are keyed by template name and checked against a source
    checksum, so a rebound key recompiles instead of reusing stale code.
    """

    def __init__(self) -> None:
        self._bytecode: dict[str, bytes] = {}

    def load_bytecode(self, bucket: Any) -> None:
        data = self._bytecode.get(bucket.key)
        if data is not None:
            bucket.bytecode_from_string(data)

    def dump_bytecode(self, bucket: Any) -> None:
        self._bytecode[bucket.key] = bucket.bytecode_to_string()

    def clear(self) -> None:
        self._bytecode.clear()

    def __len__(self) -> int:
        return len(self._bytecode)


class TemplateRegistry:
    """Keyed store of template definitions with Jinja2 rendering.

    A registry is assembled once per build and treated as read-only
    afterwards. Per-call additions such as render-time functions must be
    made on a ``clone()`` so they never leak into the shared instance.

    Usage:
        registry = TemplateRegistry()
        registry.add_raw_template("base.html", "<main>{% block body %}{% endblock %}</main>")
        registry.add_raw_template("index.html", '{% extends "base.html" %}')
        registry.build_inheritance_chains()
        html = registry.render("index.html", {"title": "Home"})
    """

    def __init__(
        self,
        autoescape: tuple[str, ...] | list[str] = DEFAULT_AUTOESCAPE,
        bytecode_cache: MemoryBytecodeCache | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            autoescape: File extensions rendered with HTML autoescaping
            bytecode_cache: Compiled template cache (clones pass their
                origin's cache so compiled code survives cloning)
        """
        self._autoescape = tuple(autoescape)
        self._templates: dict[str, TemplateDefinition] = {}
        self._functions: dict[str, Callable[..., Any]] = {}
        self._bytecode_cache = bytecode_cache if bytecode_cache is not None else MemoryBytecodeCache()
        self._env = Environment(
            loader=RegistryLoader(self),
            autoescape=select_autoescape(list(self._autoescape)),
            undefined=StrictUndefined,
            bytecode_cache=self._bytecode_cache,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    # =========================================================================
    # Lookup
    # =========================================================================

    def __contains__(self, key: object) -> bool:
        return key in self._templates

    def __getitem__(self, key: str) -> TemplateDefinition:
        return self._templates[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def get(self, key: str) -> TemplateDefinition | None:
        return self._templates.get(key)

    def keys(self) -> list[str]:
        return list(self._templates.keys())

    def items(self) -> list[tuple[str, TemplateDefinition]]:
        """Return a snapshot of (key, definition) pairs."""
        return list(self._templates.items())

    @property
    def functions(self) -> Mapping[str, Callable[..., Any]]:
        """Render-time functions registered on this registry."""
        return dict(self._functions)

    @property
    def autoescape(self) -> tuple[str, ...]:
        return self._autoescape

    @property
    def bytecode_cache(self) -> MemoryBytecodeCache:
        return self._bytecode_cache

    # =========================================================================
    # Insertion
    # =========================================================================

    def add_raw_template(self, name: str, source: str, path: str | None = None) -> TemplateDefinition:
        """Parse a template source and insert it, replacing any existing entry.

        Args:
            name: Template key
            source: Template text
            path: Origin filename, used in engine diagnostics

        Returns:
            The inserted definition

        Raises:
            RegistryError: If the source is not valid template syntax
        """
        definition = TemplateDefinition(
            name=name,
            source=source,
            path=path,
            parent=self._find_parent(name, source, path),
        )
        self._templates[name] = definition
        return definition

    def update(self, templates: Mapping[str, TemplateDefinition]) -> None:
        """Insert many definitions, overwriting keys that already exist."""
        self._templates.update(templates)

    def extend(self, other: "TemplateRegistry") -> None:
        """Merge another registry without replacing existing entries.

        Templates already present here win, which is how site templates take
        priority over same-named theme templates.
        """
        for key, definition in other.items():
            if key not in self._templates:
                self._templates[key] = definition.clone()

        for name, function in other.functions.items():
            self._functions.setdefault(name, function)
            self._env.globals.setdefault(name, function)

    def register_function(self, name: str, function: Callable[..., Any]) -> None:
        """Expose a callable to templates under ``name``."""
        self._functions[name] = function
        self._env.globals[name] = function

    def clone(self) -> "TemplateRegistry":
        """Return an independent copy with its own engine environment.

        Globals and definitions are copied; only the bytecode cache is shared.
        """
        copy = TemplateRegistry(autoescape=self._autoescape, bytecode_cache=self._bytecode_cache)
        copy._templates = {key: definition.clone() for key, definition in self._templates.items()}
        for name, function in self._functions.items():
            copy.register_function(name, function)
        return copy

    # =========================================================================
    # Inheritance
    # =========================================================================

    def build_inheritance_chains(self) -> None:
        """Resolve the ``parents`` chain of every registered template.

        Raises:
            RegistryError: If a parent is missing or a chain loops
        """
        for key, definition in self._templates.items():
            chain: list[str] = []
            seen = {key}
            parent = definition.parent

            while parent is not None:
                if parent in seen:
                    raise RegistryError(
                        f"Circular extend detected for template '{key}'. "
                        f"Inheritance chain: {[key, *chain, parent]}"
                    )
                parent_definition = self._templates.get(parent)
                if parent_definition is None:
                    raise RegistryError(
                        f"Template '{key}' is inheriting from '{parent}', "
                        "which doesn't exist or isn't loaded."
                    )
                chain.append(parent)
                seen.add(parent)
                parent = parent_definition.parent

            definition.parents = chain

        logger.debug("Built inheritance chains for %d templates", len(self._templates))

    def _find_parent(self, name: str, source: str, path: str | None) -> str | None:
        try:
            tree = self._env.parse(source, name=name, filename=path)
        except TemplateSyntaxError as e:
            raise RegistryError(f"Failed to parse '{name}': {e}") from e

        for node in tree.find_all(nodes.Extends):
            target = node.template
            if isinstance(target, nodes.Const) and isinstance(target.value, str):
                return target.value
            # Dynamic extends: the parent is only known at render time
            return None
        return None

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self, key: str, context: Mapping[str, Any]) -> str:
        """Render a registered template.

        Args:
            key: Registry key of the template
            context: Template variables

        Returns:
            Rendered output

        Raises:
            RenderError: If the engine fails (missing variable, bad syntax,
                missing parent, failing function)
        """
        try:
            template = self._env.get_template(key)
            return template.render(dict(context))
        except TesseraError:
            raise
        except Exception as e:
            # Errors raised by template code or registered functions too
            logger.error("Template rendering failed for %s: %s", key, e)
            raise RenderError(key, e) from e
