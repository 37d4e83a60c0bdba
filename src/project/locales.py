"""Locale resolution.

Model files are written per locale, which may be generic (`en`) or specific (`en-US`). Platforms
that need specific locales resolve generic ones through an explicit mapping from the project
config. Without a mapping, the two-letter prefix of a specific locale is built as well; projects
can turn that heuristic off (`resolveGenericLocales: false`).
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

_LOCALE_RE = re.compile(r"^[a-zA-Z]{2}(?:-[a-zA-Z0-9]{2,})?$")


class InvalidLocaleError(ValueError):
    """Raised when a locale does not look like `xx` or `xx-YY`."""


class MissingDefaultLocaleError(RuntimeError):
    """Raised when no default locale is configured and none can be derived."""


def validate_locale(locale: str) -> str:
    if not _LOCALE_RE.match(locale):
        raise InvalidLocaleError(f"Locale {locale!r} is not supported (expected e.g. en or en-US)")
    return locale


def locale_prefix(locale: str) -> str:
    return locale[:2]


def _unique(values: Sequence[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def resolve_locales(
        locale: str,
        mapping: Mapping[str, Sequence[str]] | None = None,
        *,
        prefix_fallback: bool = True,
) -> list[str]:
    """Return the platform locales to build for a model locale.

    Order: prefix (if enabled), the locale itself, then any mapped locales. Duplicates are removed.
    """

    resolved: list[str] = []
    if prefix_fallback:
        resolved.append(locale_prefix(locale))
    resolved.append(locale)
    resolved.extend((mapping or {}).get(locale, ()))
    return _unique(resolved)


def default_locale(locales: Sequence[str], configured: str | None = None) -> str:
    """Choose the agent's default locale.

    Strategy:
        1) A configured default wins.
        2) If any locale is English, `en`.
        3) Otherwise the prefix of the first locale.

    Raises:
        MissingDefaultLocaleError: If nothing is configured and `locales` is empty.
    """

    if configured:
        return configured
    if not locales:
        raise MissingDefaultLocaleError(
            "Could not find a default locale. Try adding defaultLocale to project.json."
        )
    for locale in locales:
        if "en" in locale:
            return "en"
    return locale_prefix(locales[0])
