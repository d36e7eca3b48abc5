"""Shared fixtures for the languagecenter test suite.

The remote client is always a mock: no test talks to the network.
"""

from unittest.mock import MagicMock

import pytest

from languagecenter.infrastructure.cache import CacheKeyBuilder, InMemoryCacheStore
from languagecenter.infrastructure.i18n import (
    ArrayTranslationLoader,
    LanguageRegistry,
    RemoteClient,
    StringCache,
    TranslationResolver,
)
from tests.factories.i18n import NOW, make_languages


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """Frozen clock returning NOW."""
    return MagicMock(return_value=NOW)


@pytest.fixture
def store():
    return InMemoryCacheStore()


@pytest.fixture
def keys():
    return CacheKeyBuilder(prefix="languagecenter")


@pytest.fixture
def mock_client():
    """RemoteClient mock answering with English (fallback) and Danish."""
    client = MagicMock(spec=RemoteClient)
    client.base_url = "https://lc.example.com/api/v1/"
    client.list_languages.return_value = make_languages()
    client.list_strings.return_value = []
    client.create_string.return_value = None
    return client


@pytest.fixture
def static_loader():
    return ArrayTranslationLoader()


@pytest.fixture
def registry(mock_client, store, keys, clock):
    return LanguageRegistry(
        client=mock_client, store=store, keys=keys, update_after=60, clock=clock
    )


@pytest.fixture
def string_cache(mock_client, store, registry, keys, clock):
    return StringCache(
        client=mock_client,
        store=store,
        registry=registry,
        keys=keys,
        update_after=60,
        clock=clock,
    )


@pytest.fixture
def translator(registry, string_cache, mock_client, static_loader):
    return TranslationResolver(
        registry=registry,
        strings=string_cache,
        client=mock_client,
        loader=static_loader,
        locale="en",
        fallback_locale="en",
        default_platform="web",
    )
