"""Translation resolver.

Resolves a key for a locale and platform through the remote string cache,
then the static string table, walking the locale fallback chain. A key
found nowhere is registered with the remote service and looked up once
more; if it is still missing the key itself is returned.
"""

import threading
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from languagecenter.core.exceptions import RemoteError
from languagecenter.core.logging import get_module_logger
from languagecenter.infrastructure.i18n.client import RemoteClient
from languagecenter.infrastructure.i18n.loader import TranslationLoader
from languagecenter.infrastructure.i18n.models import (
    KEY_SEPARATOR,
    LocaleContext,
    LookupRequest,
    ParsedKey,
)
from languagecenter.infrastructure.i18n.registry import LanguageRegistry
from languagecenter.infrastructure.i18n.strings import StringCache
from languagecenter.infrastructure.operations.result import OperationResult

logger = get_module_logger()

Line = Union[str, List[Any], Dict[str, Any]]


def make_replacements(line: str, replacements: Optional[Mapping[str, Any]]) -> str:
    """Substitute ``:token`` placeholders in a line.

    Longer tokens are replaced first so ``:name`` never eats into
    ``:name_full``. ``:TOKEN`` receives the upper-cased value and ``:Token``
    the value with its first letter upper-cased.

    Args:
        line: Line with ``:token`` placeholders.
        replacements: Mapping of token -> value.

    Returns:
        Line with placeholders replaced. Unknown placeholders are kept.
    """
    if not replacements:
        return line

    ordered = sorted(
        replacements.items(), key=lambda item: len(item[0]), reverse=True
    )
    for token, value in ordered:
        value = str(value)
        line = line.replace(f":{token}", value)
        line = line.replace(f":{token.upper()}", value.upper())
        line = line.replace(
            f":{token[:1].upper()}{token[1:]}", value[:1].upper() + value[1:]
        )

    return line


def _dig(data: Mapping[str, Any], item: str) -> Any:
    """Read a dotted item path from nested static lines."""
    if item in data:
        return data[item]

    current: Any = data
    for segment in item.split(KEY_SEPARATOR):
        if not isinstance(current, Mapping) or segment not in current:
            return None
        current = current[segment]
    return current


class TranslationResolver:
    """Public translation engine.

    Attributes:
        locale: Current locale, used when a call passes none.
        context: Process default and fallback locales.
        default_platform: Platform used when a call passes none.
    """

    def __init__(
        self,
        registry: LanguageRegistry,
        strings: StringCache,
        client: RemoteClient,
        loader: Optional[TranslationLoader] = None,
        locale: str = "en",
        fallback_locale: Optional[str] = None,
        default_platform: str = "web",
    ):
        self._registry = registry
        self._strings = strings
        self._client = client
        self._loader = loader
        self._loaded: Dict[Tuple[str, str, str], Dict[str, Any]] = {}
        self._locale_lock = threading.Lock()
        self._groups_lock = threading.Lock()
        self.locale = locale
        self.context = LocaleContext(
            default_locale=locale, fallback_locale=fallback_locale or locale
        )
        self.default_platform = default_platform

    def resolve(
        self,
        request: Union[str, Mapping[str, Any], LookupRequest],
        replacements: Optional[Mapping[str, Any]] = None,
        locale: Optional[str] = None,
        platform: Optional[str] = None,
        fallback: bool = True,
    ) -> Line:
        """Get the translation for a key.

        Args:
            request: Bare key, or mapping with ``key`` and optional
                ``string``, ``platform`` and ``comment``.
            replacements: ``:token`` values applied to string results.
            locale: Requested locale (defaults to the current locale).
            platform: Requested platform (defaults to the request's platform,
                then the configured platform).
            fallback: Walk the fallback chain when True, otherwise only try
                the requested (or current) locale.

        Returns:
            The translated line (string, or list/dict for static groups), or
            the requested key when nothing was found even after
            auto-creation.

        Raises:
            InvalidKeyError: If the key has no group separator.
            RemoteError: If the language list has never been loaded and the
                remote service is unreachable.
        """
        lookup = LookupRequest.from_input(request)
        parsed = ParsedKey.from_string(lookup.key)
        platform = platform or lookup.platform or self.default_platform

        self.load_languages()

        locales = self.parse_locale(locale) if fallback else [locale or self.locale]

        line = self._find_line(parsed, locales, platform, replacements)
        if line is None:
            self._create_missing(parsed, lookup, platform)
            line = self._find_line(parsed, locales, platform, replacements)

        if line is None:
            logger.info(
                "translation_missing",
                key=lookup.key,
                locales=locales,
                platform=platform,
            )
            return lookup.key

        return line

    def has(
        self,
        key: str,
        locale: Optional[str] = None,
        platform: Optional[str] = None,
        fallback: bool = True,
    ) -> bool:
        """Check whether a key resolves, without auto-creating it."""
        parsed = ParsedKey.from_string(key)
        platform = platform or self.default_platform

        self.load_languages()

        locales = self.parse_locale(locale) if fallback else [locale or self.locale]
        return self._find_line(parsed, locales, platform, None) is not None

    def parse_locale(self, locale: Optional[str] = None) -> List[str]:
        """Locale candidates in lookup order.

        Requested (or current) locale, then the fallback locale, then the
        default locale, without empties or duplicates.
        """
        candidates = [
            locale or self.locale,
            self.context.fallback_locale,
            self.context.default_locale,
        ]

        chain: List[str] = []
        for candidate in candidates:
            if candidate and candidate not in chain:
                chain.append(candidate)
        return chain

    def set_locale(self, locale: str) -> None:
        """Set the current, default and fallback locale together."""
        with self._locale_lock:
            self.context = LocaleContext.for_locale(locale)
            self.locale = locale

    def get_locale(self) -> str:
        return self.locale

    def set_fallback(self, locale: str) -> None:
        with self._locale_lock:
            self.context = LocaleContext(
                default_locale=self.context.default_locale, fallback_locale=locale
            )

    def apply_locale_context(self, context: LocaleContext) -> None:
        with self._locale_lock:
            self.context = context
            self.locale = context.default_locale

    def load_languages(self) -> None:
        """Make sure languages are loaded and reasonably fresh.

        The first load applies the locale context implied by the fallback
        language. Later calls only re-check staleness; a failed re-check is
        logged and the cached list stays in use.
        """
        context = self._registry.ensure_loaded()
        if context is not None:
            self.apply_locale_context(context)
            logger.info("applied_fallback_locale", locale=context.fallback_locale)
            return

        result = self._registry.refresh_if_stale()
        if result is not None:
            result.log_failure(logger, "language_refresh_failed")

    def get_languages(self) -> List[str]:
        """Codenames of every known language."""
        self.load_languages()
        return self._registry.codenames

    def update_languages(self) -> OperationResult:
        """Force a language refresh, ignoring the update interval.

        Raises:
            RemoteError: If the refresh fails and nothing is persisted.
        """
        result = self._registry.refresh()
        if not self._registry.has_snapshot():
            result.raise_for_error()
        return result

    def update_strings(
        self, locale: str, platform: Optional[str] = None
    ) -> OperationResult:
        """Force a string refresh for one bucket, ignoring staleness."""
        return self._strings.refresh(locale, platform or self.default_platform)

    def _find_line(
        self,
        parsed: ParsedKey,
        locales: List[str],
        platform: str,
        replacements: Optional[Mapping[str, Any]],
    ) -> Optional[Line]:
        for locale in locales:
            self._strings.ensure_loaded(locale, platform)

            line = self._get_line(parsed, locale, platform, replacements)
            if line is not None:
                return line

        return None

    def _get_line(
        self,
        parsed: ParsedKey,
        locale: str,
        platform: str,
        replacements: Optional[Mapping[str, Any]],
    ) -> Optional[Line]:
        value = self._strings.lookup(locale, platform, parsed.cache_key)
        if value is not None:
            return make_replacements(value, replacements)

        lines = self._load_group(parsed.namespace, parsed.group, locale)
        line = _dig(lines, parsed.item)

        if isinstance(line, str):
            return make_replacements(line, replacements)
        if isinstance(line, (list, dict)) and len(line) > 0:
            return line

        return None

    def _load_group(self, namespace: str, group: str, locale: str) -> Dict[str, Any]:
        cache_key = (namespace, group, locale)
        with self._groups_lock:
            if cache_key not in self._loaded:
                loader = self._loader
                lines = loader.load(namespace, group, locale) if loader else {}
                self._loaded[cache_key] = lines
            return self._loaded[cache_key]

    def _create_missing(
        self, parsed: ParsedKey, lookup: LookupRequest, platform: str
    ) -> None:
        """Register a missing key remotely and show the placeholder locally.

        A failed remote create is logged only; the placeholder is written to
        every known locale either way so the retry can find it.
        """
        try:
            self._client.create_string(
                parsed.cache_key, lookup.default_string, platform, lookup.comment
            )
            logger.info("auto_created_string", key=parsed.cache_key, platform=platform)
        except RemoteError as e:
            logger.warning(
                "auto_create_failed",
                key=parsed.cache_key,
                platform=platform,
                error=str(e),
            )

        self._strings.upsert(platform, parsed.cache_key, lookup.default_string)
