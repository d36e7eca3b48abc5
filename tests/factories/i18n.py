"""Test data factories for the i18n system.

Provides deterministic builders for:
- Language
- StringEntry
- Persisted cache state (languages, strings, sync timestamps)
"""

from typing import Dict, List, Optional

from languagecenter.infrastructure.cache import CacheKeyBuilder, CacheStore
from languagecenter.infrastructure.i18n import Language, StringEntry

NOW = 1_700_000_000


def make_language(
    codename: str = "en",
    is_fallback: bool = False,
    timestamp: int = NOW - 3600,
) -> Language:
    """Create a Language instance.

    Args:
        codename: Locale codename.
        is_fallback: Whether the language is the fallback locale.
        timestamp: Last remote change (default: one hour before NOW).

    Returns:
        Language instance.
    """
    return Language(codename=codename, is_fallback=is_fallback, timestamp=timestamp)


def make_languages() -> List[Language]:
    """English (fallback) and Danish."""
    return [make_language("en", is_fallback=True), make_language("da")]


def make_string_entry(
    key: str = "greeting.hello",
    value: str = "Hi :name",
    locale: str = "en",
    platform: str = "web",
) -> StringEntry:
    return StringEntry(locale=locale, platform=platform, key=key, value=value)


def seed_cache(
    store: CacheStore,
    keys: Optional[CacheKeyBuilder] = None,
    languages: Optional[List[Language]] = None,
    strings: Optional[Dict] = None,
    languages_at: int = NOW,
    synced_at: Optional[int] = NOW,
) -> None:
    """Persist a warm cache: languages, their refresh time and strings.

    Every language, and every (locale, platform) bucket in ``strings``, gets
    a sync timestamp of ``synced_at`` (skipped when None), so nothing is
    stale relative to NOW with the default timestamps.
    """
    keys = keys or CacheKeyBuilder()
    languages = make_languages() if languages is None else languages

    store.forever(keys.languages(), [language.to_dict() for language in languages])
    store.forever(keys.languages_timestamp(), languages_at)

    if strings is not None:
        store.forever(keys.strings(), strings)

    if synced_at is not None:
        for language in languages:
            store.forever(keys.locale_timestamp(language.codename), synced_at)
        for locale, platforms in (strings or {}).items():
            for platform in platforms:
                store.forever(keys.bucket_timestamp(locale, platform), synced_at)
