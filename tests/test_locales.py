"""Tests for locale validation, resolution and default-locale selection."""

from __future__ import annotations

import pytest

from src.project.locales import (
    InvalidLocaleError,
    MissingDefaultLocaleError,
    default_locale,
    resolve_locales,
    validate_locale,
)


@pytest.mark.parametrize("locale", ["en", "en-US", "de-DE", "es-419"])
def test_valid_locales(locale: str) -> None:
    assert validate_locale(locale) == locale


@pytest.mark.parametrize("locale", ["", "e", "english", "en_US", "en-", "../en"])
def test_invalid_locales(locale: str) -> None:
    with pytest.raises(InvalidLocaleError):
        validate_locale(locale)


def test_specific_locale_also_builds_prefix() -> None:
    assert resolve_locales("en-US") == ["en", "en-US"]


def test_generic_locale_resolves_to_itself() -> None:
    assert resolve_locales("en") == ["en"]


def test_mapping_is_appended_without_duplicates() -> None:
    mapping = {"en": ["en-US", "en-GB", "en"]}
    assert resolve_locales("en", mapping) == ["en", "en-US", "en-GB"]


def test_prefix_fallback_can_be_disabled() -> None:
    assert resolve_locales("en-US", prefix_fallback=False) == ["en-US"]


def test_configured_default_locale_wins() -> None:
    assert default_locale(["en", "de"], "de") == "de"


def test_english_is_preferred_default() -> None:
    assert default_locale(["de", "en-us"]) == "en"


def test_first_locale_prefix_is_fallback_default() -> None:
    assert default_locale(["de-DE", "fr"]) == "de"


def test_missing_default_locale() -> None:
    with pytest.raises(MissingDefaultLocaleError):
        default_locale([])
