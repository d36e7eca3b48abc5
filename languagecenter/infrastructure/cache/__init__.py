"""Durable cache layer - stores and key builder."""

from languagecenter.infrastructure.cache.keys import CacheKeyBuilder
from languagecenter.infrastructure.cache.store import (
    CacheStore,
    FileCacheStore,
    InMemoryCacheStore,
    RedisCacheStore,
)

__all__ = [
    "CacheKeyBuilder",
    "CacheStore",
    "FileCacheStore",
    "InMemoryCacheStore",
    "RedisCacheStore",
]
