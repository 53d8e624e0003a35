"""Error taxonomy for template resolution and rendering.

Every failure is raised to the immediate caller. The structural fallback in
the resolver is the only path that degrades instead of failing.
"""


class TesseraError(Exception):
    """Base class for all Tessera errors."""

    pass


class LocaleParseError(TesseraError):
    """Raised when the `lang` value of a render context is not a locale.

    Locales are validated when site content is loaded, so this signals a
    broken invariant rather than bad user input.
    """

    def __init__(self, value: object, message: str | None = None) -> None:
        self.value = value
        self.message = message or f"Invalid locale identifier in render context: {value!r}"
        super().__init__(self.message)


class LocalizationSetupError(TesseraError):
    """Raised when the Fluent loader cannot be built from a locales directory."""

    def __init__(self, path: object, message: str) -> None:
        self.path = path
        super().__init__(f"Failed to load locales from {path}: {message}")


class RenderError(TesseraError):
    """Raised when the template engine fails to render a template."""

    def __init__(self, template: str, cause: Exception) -> None:
        self.template = template
        self.cause = cause
        super().__init__(f"Failed to render '{template}': {cause}")


class TemplateNotFoundError(TesseraError):
    """Raised when no layer provides a template and no fallback exists."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tried to render `{name}` but the template wasn't found")


class RegistryError(TesseraError):
    """Raised for templates that cannot be registered or chained."""

    pass
