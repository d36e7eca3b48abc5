"""Durable cache of remote strings.

The cache is one snapshot ``locale -> platform -> key -> value`` persisted
forever in the cache store and mirrored in memory. A (locale, platform)
bucket is only ever replaced whole by a refresh or extended by an upsert.
Staleness is decided per bucket: each language's remote timestamp is
compared with the time that bucket was last synced. An upsert never counts
as a sync, so a placeholder cannot hide a bucket that was never fetched.
"""

import copy
import threading
import time
from typing import Callable, Dict, Optional, Tuple

from languagecenter.core.exceptions import RemoteError
from languagecenter.core.logging import get_module_logger
from languagecenter.infrastructure.cache.keys import CacheKeyBuilder
from languagecenter.infrastructure.cache.store import CacheStore
from languagecenter.infrastructure.i18n.client import RemoteClient
from languagecenter.infrastructure.i18n.models import StringEntry
from languagecenter.infrastructure.i18n.registry import LanguageRegistry
from languagecenter.infrastructure.operations.classifiers import classify_remote_error
from languagecenter.infrastructure.operations.result import OperationResult

logger = get_module_logger()

Snapshot = Dict[str, Dict[str, Dict[str, str]]]


def record_entry(snapshot: Snapshot, entry: StringEntry, also_under: str) -> None:
    """Write a synced entry under its own locale and the requesting locale.

    The service may answer a request for one locale with strings reported
    under another; both buckets must hold the value.

    Args:
        snapshot: Snapshot to write into.
        entry: Entry returned by the service.
        also_under: Locale the strings were requested for.
    """
    for locale in (also_under, entry.locale):
        bucket = snapshot.setdefault(locale, {}).setdefault(entry.platform, {})
        bucket[entry.key] = entry.value


class StringCache:
    """Remote strings held in the durable cache.

    Attributes:
        update_after: Seconds between staleness checks, or None to only
            sync locales that were never synced.
    """

    def __init__(
        self,
        client: RemoteClient,
        store: CacheStore,
        registry: LanguageRegistry,
        keys: Optional[CacheKeyBuilder] = None,
        update_after: Optional[int] = 60,
        clock: Callable[[], float] = time.time,
    ):
        self._client = client
        self._store = store
        self._registry = registry
        self._keys = keys or CacheKeyBuilder()
        self._clock = clock
        self._strings: Snapshot = {}
        self._bucket_locks: Dict[Tuple[str, str], threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._write_lock = threading.Lock()
        self.update_after = update_after

    def ensure_loaded(
        self, locale: str, platform: str, now: Optional[int] = None
    ) -> None:
        """Sync stale locales for a platform, then mirror the snapshot.

        Every known language is checked, not only the requested locale. A
        language is synced when its bucket for the platform is stale (see
        is_stale). Refresh failures are logged and the stale snapshot stays
        in use.

        Args:
            locale: Locale of the current request.
            platform: Platform of the current request.
            now: Current unix time (defaults to the clock).
        """
        for language in self._registry.languages:
            if not self.is_stale(language.codename, platform, language.timestamp):
                continue

            result = self.refresh(language.codename, platform, now)
            result.log_failure(
                logger,
                "strings_refresh_failed",
                locale=language.codename,
                platform=platform,
                requested_locale=locale,
            )

        self._strings = self._store.get(self._keys.strings(), {}) or {}

    def is_stale(self, locale: str, platform: str, remote_timestamp: int) -> bool:
        """Return True when a (locale, platform) bucket needs a sync.

        A bucket that was never synced is always stale, whatever an upsert
        put into it. Otherwise, with checks enabled, it is stale when the
        service reports a change newer than its last sync.
        """
        synced_at = self._store.get(self._keys.bucket_timestamp(locale, platform))
        if synced_at is None:
            return True
        if self.update_after is None:
            return False
        return remote_timestamp > synced_at

    def refresh(
        self, locale: str, platform: str, now: Optional[int] = None
    ) -> OperationResult:
        """Replace the (locale, platform) bucket with the remote strings.

        On failure nothing is written and an error result is returned.

        Returns:
            OperationResult whose data is the number of entries synced.
        """
        now = int(self._clock()) if now is None else int(now)

        with self._bucket_lock(locale, platform):
            try:
                entries = self._client.list_strings(locale, platform)
            except RemoteError as e:
                return classify_remote_error(e)

            with self._write_lock:
                snapshot = self._store.get(self._keys.strings(), {}) or {}
                snapshot.setdefault(locale, {})[platform] = {}

                for entry in entries:
                    record_entry(snapshot, entry, also_under=locale)

                self._store.forever(self._keys.strings(), snapshot)
                self._store.forever(self._keys.locale_timestamp(locale), now)
                self._store.forever(self._keys.bucket_timestamp(locale, platform), now)
                self._strings = snapshot

        logger.info(
            "strings_refreshed",
            locale=locale,
            platform=platform,
            entry_count=len(entries),
        )
        return OperationResult.success(data=len(entries), message="strings refreshed")

    def lookup(self, locale: str, platform: str, key: str) -> Optional[str]:
        """Read a value from the in-memory mirror. Never does I/O."""
        return self._strings.get(locale, {}).get(platform, {}).get(key)

    def upsert(
        self, platform: str, key: str, value: str, locale: Optional[str] = None
    ) -> None:
        """Write one value and persist the snapshot.

        Args:
            platform: Platform bucket.
            key: String key (``group.item``).
            value: Value to store.
            locale: Locale bucket. When None the value goes into every known
                locale (registry languages and cached locales).
        """
        with self._write_lock:
            snapshot = self._store.get(self._keys.strings(), {}) or {}

            if locale is None:
                locales = list(snapshot)
                locales += [c for c in self._registry.codenames if c not in snapshot]
            else:
                locales = [locale]

            for target in locales:
                snapshot.setdefault(target, {}).setdefault(platform, {})[key] = value

            self._store.forever(self._keys.strings(), snapshot)
            self._strings = snapshot

        logger.debug("string_upserted", key=key, platform=platform, locales=locales)

    def snapshot(self) -> Snapshot:
        """Return a copy of the in-memory mirror."""
        return copy.deepcopy(self._strings)

    def _bucket_lock(self, locale: str, platform: str) -> threading.Lock:
        with self._locks_guard:
            return self._bucket_locks.setdefault((locale, platform), threading.Lock())
