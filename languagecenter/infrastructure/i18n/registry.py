"""Registry of the locales known to the remote translation service.

Holds the language list in memory, mirrors it in the durable cache and
re-checks the remote service once the configured update interval has
passed. A failed refresh keeps the previous snapshot; only a first-ever
load with nothing persisted raises.
"""

import threading
import time
from typing import Callable, List, Optional

from languagecenter.core.exceptions import RemoteError
from languagecenter.core.logging import get_module_logger
from languagecenter.infrastructure.cache.keys import CacheKeyBuilder
from languagecenter.infrastructure.cache.store import CacheStore
from languagecenter.infrastructure.i18n.client import RemoteClient
from languagecenter.infrastructure.i18n.models import Language, LocaleContext
from languagecenter.infrastructure.operations.classifiers import classify_remote_error
from languagecenter.infrastructure.operations.result import OperationResult

logger = get_module_logger()


class LanguageRegistry:
    """Known locales and the fallback locale.

    Attributes:
        update_after: Seconds between staleness checks. None disables
            periodic checks: the list is loaded once and kept.
    """

    def __init__(
        self,
        client: RemoteClient,
        store: CacheStore,
        keys: Optional[CacheKeyBuilder] = None,
        update_after: Optional[int] = 60,
        clock: Callable[[], float] = time.time,
    ):
        self._client = client
        self._store = store
        self._keys = keys or CacheKeyBuilder()
        self._clock = clock
        self._languages: List[Language] = []
        self._lock = threading.Lock()
        self.update_after = update_after

    @property
    def languages(self) -> List[Language]:
        return list(self._languages)

    @property
    def codenames(self) -> List[str]:
        return [language.codename for language in self._languages]

    @property
    def is_loaded(self) -> bool:
        return bool(self._languages)

    def get(self, codename: str) -> Optional[Language]:
        for language in self._languages:
            if language.codename == codename:
                return language
        return None

    @property
    def locale_context(self) -> Optional[LocaleContext]:
        """Locale context implied by the fallback flag.

        Every flagged language overrides the previous one, so the last
        flagged language in the list wins.
        """
        context = None
        for language in self._languages:
            if language.is_fallback:
                context = LocaleContext.for_locale(language.codename)
        return context

    def has_snapshot(self) -> bool:
        """Return True when a language list has been persisted."""
        return self._store.get(self._keys.languages()) is not None

    def ensure_loaded(self, now: Optional[int] = None) -> Optional[LocaleContext]:
        """Load the language list if none is held in memory.

        Returns:
            The LocaleContext from the fallback flag when a load happened,
            None when languages were already held.

        Raises:
            RemoteError: If nothing is persisted and the remote call fails.
        """
        if self._languages:
            return None
        return self.load(now)

    def load(self, now: Optional[int] = None) -> Optional[LocaleContext]:
        """Load languages from the durable cache, refreshing when needed.

        A full refresh runs when nothing is persisted yet, or when the
        persisted list is older than the update interval.

        Returns:
            The LocaleContext implied by the loaded list (None when no
            language is flagged as fallback).

        Raises:
            RemoteError: If nothing is persisted and the remote call fails.
        """
        if not self.has_snapshot():
            result = self.refresh(now)
            if not result.is_success:
                logger.error("language_bootstrap_failed", error=result.message)
                result.raise_for_error()
        else:
            result = self.refresh_if_stale(now)
            if result is not None:
                result.log_failure(logger, "language_refresh_failed")
            self._languages = self._read_snapshot()

        return self.locale_context

    def is_stale(self, now: Optional[int] = None) -> bool:
        if self.update_after is None:
            return False

        now = self._now(now)
        threshold = now - self.update_after
        last_updated = self._store.get(self._keys.languages_timestamp(), 0)
        return threshold > last_updated

    def refresh_if_stale(self, now: Optional[int] = None) -> Optional[OperationResult]:
        """Refresh when the update interval has passed since the last refresh.

        Returns:
            None when no refresh was due, otherwise the refresh result.
        """
        if not self.is_stale(now):
            return None

        with self._lock:
            # Another caller may have refreshed while we waited.
            if not self.is_stale(now):
                return None
            return self._refresh(now)

    def refresh(self, now: Optional[int] = None) -> OperationResult:
        """Replace the language list with the remote one.

        On failure the persisted list and timestamp are left untouched and
        an error result is returned; the caller decides whether to log it or
        raise ``result.data``.

        Returns:
            OperationResult whose data is the LocaleContext on success and
            the RemoteError on failure.
        """
        with self._lock:
            return self._refresh(now)

    def _refresh(self, now: Optional[int]) -> OperationResult:
        now = self._now(now)

        try:
            languages = self._client.list_languages()
        except RemoteError as e:
            if not self._languages:
                self._languages = self._read_snapshot()
            return classify_remote_error(e)

        self._store.forever(
            self._keys.languages(), [language.to_dict() for language in languages]
        )
        self._store.forever(self._keys.languages_timestamp(), now)
        self._languages = list(languages)

        logger.info("languages_refreshed", language_count=len(languages))
        return OperationResult.success(
            data=self.locale_context, message="languages refreshed"
        )

    def _read_snapshot(self) -> List[Language]:
        data = self._store.get(self._keys.languages(), []) or []
        return [Language.from_dict(item) for item in data]

    def _now(self, now: Optional[int]) -> int:
        return int(self._clock()) if now is None else int(now)
