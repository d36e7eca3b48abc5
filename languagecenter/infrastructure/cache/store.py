"""Durable key/value cache stores.

Values are JSON-compatible structures stored forever: nothing expires, and
entries are replaced only by an explicit write. Each write of one key is
atomic, which is the granularity the string cache relies on for bucket
replacement.
"""

import copy
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

import redis
from redis.exceptions import RedisError

from languagecenter.core.logging import get_module_logger

logger = get_module_logger()


class CacheStore(Protocol):
    """Storage interface for the durable translation cache.

    Methods:
        get: Return the stored value or a default
        forever: Store a value with no expiry
        has: Check whether a key is stored
        forget: Remove a key
        clear: Remove every key (for testing)
    """

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default."""
        ...

    def forever(self, key: str, value: Any) -> None:
        """Store value under key with no expiry."""
        ...

    def has(self, key: str) -> bool:
        """Return True when key is stored."""
        ...

    def forget(self, key: str) -> None:
        """Remove key if present."""
        ...

    def clear(self) -> None:
        """Remove every stored key."""
        ...


class InMemoryCacheStore:
    """Thread-safe in-process implementation of CacheStore.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store, matching a serialising backend.

    Suitable for single-process deployments and tests.
    """

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def forever(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def forget(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get store statistics.

        Returns:
            Dict with the number of stored keys.
        """
        with self._lock:
            return {"backend": "memory", "keys": len(self._data)}


class FileCacheStore:
    """JSON-file implementation of CacheStore.

    One file per key inside a directory; writes go to a temporary file that
    is then renamed over the target, so readers in other processes see
    either the old or the new value. The directory is only shared by
    processes on one host; use RedisCacheStore across hosts.

    Attributes:
        directory: Directory holding the cache files.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

        logger.info("initialized_file_cache_store", directory=str(self.directory))

    def _path(self, key: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "._-" else "_" for c in key)
        return self.directory / f"{safe}.json"

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return default
        except json.JSONDecodeError as e:
            logger.warning("cache_file_corrupt", key=key, error=str(e))
            return default

    def forever(self, key: str, value: Any) -> None:
        path = self._path(key)
        with self._lock:
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(value, f, ensure_ascii=False)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise

    def has(self, key: str) -> bool:
        return self._path(key).exists()

    def forget(self, key: str) -> None:
        with self._lock:
            try:
                self._path(key).unlink()
            except FileNotFoundError:
                pass

    def clear(self) -> None:
        with self._lock:
            for path in self.directory.glob("*.json"):
                path.unlink()
        logger.info("cleared_file_cache_store", directory=str(self.directory))


class RedisCacheStore:
    """Redis-backed implementation of CacheStore.

    Values are stored as JSON strings with no TTL. Suitable for deployments
    where several processes or hosts must share one translation cache.

    Read and write failures are logged and never raised: a failed read
    returns the default, a failed write leaves the previous value in place,
    and the caller keeps working from its in-memory mirror.

    Attributes:
        prefix: Key prefix cleared by clear().
    """

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        url: Optional[str] = None,
        prefix: str = "languagecenter",
    ) -> None:
        if client is None:
            if not url:
                raise ValueError("A redis client or URL is required")
            client = redis.Redis.from_url(url, decode_responses=True)

        self._client = client
        self.prefix = prefix

        logger.info("initialized_redis_cache_store", prefix=prefix)

    def get(self, key: str, default: Any = None) -> Any:
        try:
            raw = self._client.get(key)
        except RedisError as e:
            logger.error("redis_cache_get_error", key=key, error=str(e))
            return default

        if raw is None:
            return default

        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning("redis_cache_value_corrupt", key=key, error=str(e))
            return default

    def forever(self, key: str, value: Any) -> None:
        try:
            self._client.set(key, json.dumps(value, ensure_ascii=False))
        except RedisError as e:
            logger.error("redis_cache_set_error", key=key, error=str(e))

    def has(self, key: str) -> bool:
        try:
            return self._client.exists(key) > 0
        except RedisError as e:
            logger.error("redis_cache_has_error", key=key, error=str(e))
            return False

    def forget(self, key: str) -> None:
        try:
            self._client.delete(key)
        except RedisError as e:
            logger.error("redis_cache_forget_error", key=key, error=str(e))

    def clear(self) -> None:
        """Delete every key under the prefix (for testing)."""
        logger.warning("redis_cache_clear_called", prefix=self.prefix)
        try:
            keys = list(self._client.scan_iter(match=f"{self.prefix}.*"))
            if keys:
                self._client.delete(*keys)
        except RedisError as e:
            logger.error("redis_cache_clear_error", prefix=self.prefix, error=str(e))
            return

        logger.info("redis_cache_cleared", keys_deleted=len(keys))

    def get_stats(self) -> Dict[str, Any]:
        return {"backend": "redis", "prefix": self.prefix}
