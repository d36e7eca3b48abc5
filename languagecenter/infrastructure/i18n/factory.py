"""Factory functions for creating i18n components.

Provides convenience functions for wiring the remote client, durable store,
static loader, registry, string cache and resolver from settings.
"""

from pathlib import Path
from typing import Optional

from languagecenter.core.config import Settings, get_settings
from languagecenter.core.logging import get_module_logger
from languagecenter.infrastructure.cache.keys import CacheKeyBuilder
from languagecenter.infrastructure.cache.store import (
    CacheStore,
    FileCacheStore,
    InMemoryCacheStore,
    RedisCacheStore,
)
from languagecenter.infrastructure.i18n.client import RemoteClient
from languagecenter.infrastructure.i18n.loader import (
    ArrayTranslationLoader,
    TranslationLoader,
    YAMLTranslationLoader,
)
from languagecenter.infrastructure.i18n.registry import LanguageRegistry
from languagecenter.infrastructure.i18n.strings import StringCache
from languagecenter.infrastructure.i18n.translator import TranslationResolver

logger = get_module_logger()


def create_store(settings: Settings) -> CacheStore:
    """Create the durable store selected by settings.

    Redis when LANGUAGECENTER_REDIS_URL is set, then the file store when
    LANGUAGECENTER_CACHE_DIR is set, otherwise an in-process memory store.
    """
    config = settings.languagecenter
    if config.REDIS_URL:
        return RedisCacheStore(url=config.REDIS_URL, prefix=config.CACHE_PREFIX)
    if config.CACHE_DIR:
        return FileCacheStore(Path(config.CACHE_DIR))
    return InMemoryCacheStore()


def create_loader(settings: Settings) -> TranslationLoader:
    """Create the static loader selected by LANGUAGECENTER_LANG_PATH."""
    lang_path = settings.languagecenter.LANG_PATH
    if lang_path:
        return YAMLTranslationLoader(Path(lang_path))
    return ArrayTranslationLoader()


def create_translator(
    settings: Optional[Settings] = None,
    client: Optional[RemoteClient] = None,
    store: Optional[CacheStore] = None,
    loader: Optional[TranslationLoader] = None,
    preload: bool = True,
) -> TranslationResolver:
    """Create and configure a TranslationResolver.

    Args:
        settings: Settings to use (default: process settings singleton)
        client: Remote client (default: built from settings)
        store: Durable store (default: see create_store)
        loader: Static loader (default: YAML loader when
            LANGUAGECENTER_LANG_PATH is set, otherwise empty)
        preload: Load languages immediately, applying the fallback locale

    Returns:
        TranslationResolver: Configured resolver

    Raises:
        ValueError: If LANGUAGECENTER_URL is missing and no client is given
        RemoteError: If preload is set, nothing is cached and the remote
            service is unreachable

    Usage:
        translator = create_translator()
        translator.resolve("greeting.hello", {"name": "Sam"})
    """
    settings = settings or get_settings()
    config = settings.languagecenter

    client = client or RemoteClient(
        base_url=config.URL,
        username=config.USERNAME,
        password=config.PASSWORD,
        timeout=config.TIMEOUT,
        default_platform=config.PLATFORM,
    )
    store = store if store is not None else create_store(settings)
    loader = loader if loader is not None else create_loader(settings)
    keys = CacheKeyBuilder(prefix=config.CACHE_PREFIX)

    registry = LanguageRegistry(
        client=client, store=store, keys=keys, update_after=config.UPDATE_AFTER
    )
    strings = StringCache(
        client=client,
        store=store,
        registry=registry,
        keys=keys,
        update_after=config.UPDATE_AFTER,
    )
    translator = TranslationResolver(
        registry=registry,
        strings=strings,
        client=client,
        loader=loader,
        locale=settings.LOCALE,
        fallback_locale=settings.FALLBACK_LOCALE,
        default_platform=config.PLATFORM,
    )

    if preload:
        translator.load_languages()
        logger.info(
            "translator_created_with_preload",
            base_url=client.base_url,
            locale=translator.get_locale(),
            language_count=len(registry.codenames),
        )
    else:
        logger.info("translator_created_lazy", base_url=client.base_url)

    return translator
