"""Locale parsing and the ``fluent`` render-time function.

Message files live under ``<base_path>/locales/<locale>/*.ftl``:

    locales/
      en/main.ftl
      fr-FR/main.ftl
"""

import logging
from pathlib import Path
from typing import Any

from babel import Locale, UnknownLocaleError
from fluent.runtime import FluentBundle, FluentResource
from fluent.syntax.ast import Junk
from jinja2 import TemplateRuntimeError

from tessera.errors import LocaleParseError, LocalizationSetupError

logger = logging.getLogger(__name__)

LOCALES_DIRECTORY = "locales"


def parse_locale(value: object) -> Locale:
    """Parse a locale identifier such as ``en``, ``en-US`` or ``fr_FR``.

    Args:
        value: Value of the ``lang`` context field

    Returns:
        Parsed Babel locale

    Raises:
        LocaleParseError: If the value is not a string or not a known locale
    """
    if not isinstance(value, str):
        raise LocaleParseError(value, "Can't get page language")

    try:
        return Locale.parse(value.replace("_", "-"), sep="-")
    except (ValueError, UnknownLocaleError) as e:
        raise LocaleParseError(value) from e


def locale_tag(locale: Locale) -> str:
    """Return the hyphenated tag of a locale, e.g. ``en-US``."""
    return str(locale).replace("_", "-")


class FluentLoader:
    """Loads Fluent bundles from a locales directory.

    Instances are callable and meant to be registered as the ``fluent``
    template function:

        {{ fluent(key="greeting", name=page.title) }}
        {{ fluent(key="greeting", lang="fr") }}
    """

    def __init__(self, root: Path, fallback: Locale) -> None:
        """Build one bundle per locale directory under ``root``.

        Args:
            root: The locales directory
            fallback: Locale used when a call does not pass ``lang``

        Raises:
            LocalizationSetupError: If a directory is not named after a
                locale, or a resource cannot be read or parsed
        """
        self.root = root
        self.fallback = fallback
        self._bundles: dict[str, FluentBundle] = {}

        try:
            entries = sorted(p for p in root.iterdir() if p.is_dir())
        except OSError as e:
            raise LocalizationSetupError(root, str(e)) from e

        for locale_dir in entries:
            try:
                locale = parse_locale(locale_dir.name)
            except LocaleParseError as e:
                raise LocalizationSetupError(
                    root, f"'{locale_dir.name}' is not a locale identifier"
                ) from e
            tag = locale_tag(locale)
            self._bundles[tag] = self._load_bundle(tag, locale_dir)

        logger.debug("Loaded %d locale bundles from %s", len(self._bundles), root)

    def _load_bundle(self, tag: str, locale_dir: Path) -> FluentBundle:
        bundle = FluentBundle([tag], use_isolating=False)

        for ftl_path in sorted(locale_dir.glob("*.ftl")):
            try:
                text = ftl_path.read_text(encoding="utf-8")
            except OSError as e:
                raise LocalizationSetupError(self.root, f"cannot read {ftl_path}: {e}") from e

            resource = FluentResource(text)
            junk = [entry for entry in resource.body if isinstance(entry, Junk)]
            if junk:
                raise LocalizationSetupError(
                    self.root,
                    f"syntax error in {ftl_path} near {junk[0].content.strip()[:40]!r}",
                )
            bundle.add_resource(resource)

        return bundle

    @property
    def locales(self) -> list[str]:
        """Tags of the loaded locales."""
        return sorted(self._bundles)

    def _candidates(self, lang: str | None) -> list[str]:
        locales = [self.fallback]
        if lang is not None:
            try:
                locales.insert(0, parse_locale(lang))
            except LocaleParseError as e:
                raise TemplateRuntimeError(e.message) from e

        tags: list[str] = []
        for locale in locales:
            for tag in (locale_tag(locale), locale.language):
                if tag not in tags:
                    tags.append(tag)
        return tags

    def lookup(self, key: str, lang: str | None = None, **args: Any) -> str:
        """Format the message ``key`` for ``lang`` or the fallback locale.

        Raises:
            TemplateRuntimeError: If no loaded locale defines the message
        """
        for tag in self._candidates(lang):
            bundle = self._bundles.get(tag)
            if bundle is None or not bundle.has_message(key):
                continue

            message = bundle.get_message(key)
            if message.value is None:
                continue

            value, errors = bundle.format_pattern(message.value, args)
            for error in errors:
                logger.warning("Fluent message %s (%s): %s", key, tag, error)
            return value

        raise TemplateRuntimeError(
            f"Fluent message '{key}' not found for locale '{lang or locale_tag(self.fallback)}'"
        )

    def __call__(self, key: str, lang: str | None = None, **args: Any) -> str:
        return self.lookup(key, lang, **args)
