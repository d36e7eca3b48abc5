"""Tests for languagecenter.infrastructure.i18n.translator module."""

# pylint: disable=protected-access

import threading
import time
from unittest.mock import MagicMock

import pytest

from languagecenter.infrastructure.i18n import (
    InvalidKeyError,
    LanguageRegistry,
    LocaleContext,
    RemoteClient,
    RemoteError,
    StringCache,
    TranslationResolver,
    make_replacements,
)
from languagecenter.infrastructure.i18n.loader import TranslationLoader
from tests.factories.i18n import NOW, make_language, make_string_entry, seed_cache


@pytest.mark.unit
class TestResolveFromCache:
    """Resolution of keys already held in the string cache."""

    def test_cached_value_with_replacements_and_no_remote_calls(
        self, translator, mock_client, store, keys
    ):
        seed_cache(
            store,
            keys,
            languages=[make_language("en", is_fallback=True)],
            strings={"en": {"web": {"greeting.hello": "Hi :name"}}},
        )

        result = translator.resolve("greeting.hello", {"name": "Sam"}, "en")

        assert result == "Hi Sam"
        mock_client.list_languages.assert_not_called()
        mock_client.list_strings.assert_not_called()
        mock_client.create_string.assert_not_called()

    def test_remote_value_wins_over_static_line(
        self, translator, store, keys, static_loader
    ):
        seed_cache(
            store,
            keys,
            strings={
                "en": {"web": {"greeting.hello": "Remote hello"}},
                "da": {"web": {}},
            },
        )
        static_loader.add_messages("en", "greeting", {"hello": "Static hello"})

        assert translator.resolve("greeting.hello") == "Remote hello"

    def test_stale_cache_used_when_refresh_fails(
        self, translator, mock_client, store, keys
    ):
        seed_cache(
            store,
            keys,
            languages=[make_language("en", is_fallback=True, timestamp=NOW)],
            strings={"en": {"web": {"greeting.hello": "Hi :name"}}},
            synced_at=NOW - 600,
        )
        mock_client.list_strings.side_effect = RemoteError(
            "API returned status [503].", status_code=503
        )

        result = translator.resolve("greeting.hello", {"name": "Sam"}, "en")

        assert result == "Hi Sam"
        mock_client.list_strings.assert_called_with("en", "web")
        assert store.get(keys.strings()) == {
            "en": {"web": {"greeting.hello": "Hi :name"}}
        }

    def test_malformed_remote_body_keeps_cached_value(self, store, keys, clock):
        response = MagicMock()
        response.status_code = 200
        response.json.return_value = [{"key": "a.b", "value": "x"}]
        session = MagicMock()
        session.request.return_value = response
        client = RemoteClient(
            base_url="https://lc.example.com/api/v1/", session=session
        )
        registry = LanguageRegistry(client=client, store=store, keys=keys, clock=clock)
        strings = StringCache(
            client=client, store=store, registry=registry, keys=keys, clock=clock
        )
        resolver = TranslationResolver(
            registry=registry, strings=strings, client=client
        )
        seed_cache(
            store,
            keys,
            languages=[make_language("en", is_fallback=True, timestamp=NOW)],
            strings={"en": {"web": {"greeting.hello": "Hi"}}},
            synced_at=NOW - 600,
        )

        assert resolver.resolve("greeting.hello") == "Hi"
        session.request.assert_called_once()
        assert session.request.call_args.kwargs["url"].endswith("/strings")
        assert store.get(keys.strings()) == {"en": {"web": {"greeting.hello": "Hi"}}}

    def test_platform_synced_once_remote_recovers(
        self, translator, mock_client, store, keys
    ):
        seed_cache(
            store,
            keys,
            languages=[make_language("en", is_fallback=True)],
            strings={"en": {"web": {"greeting.hello": "Hi"}}},
            synced_at=NOW - 600,
        )
        mock_client.list_strings.side_effect = RemoteError("down")
        translator.resolve("greeting.hello", platform="ios")

        mock_client.list_strings.side_effect = None
        mock_client.list_strings.return_value = [
            make_string_entry(key="menu.title", value="Menu", platform="ios")
        ]

        assert translator.resolve("menu.title", platform="ios") == "Menu"
        mock_client.create_string.assert_called_once_with(
            "greeting.hello", "greeting.hello", "ios", None
        )

    def test_platform_argument_selects_bucket(self, translator, store, keys):
        seed_cache(
            store,
            keys,
            languages=[make_language("en", is_fallback=True)],
            strings={
                "en": {
                    "web": {"greeting.hello": "Hello web"},
                    "ios": {"greeting.hello": "Hello iOS"},
                }
            },
        )

        assert translator.resolve("greeting.hello", platform="ios") == "Hello iOS"
        assert translator.resolve({"key": "greeting.hello", "platform": "ios"}) == (
            "Hello iOS"
        )


@pytest.mark.unit
class TestLocaleFallback:
    """Locale candidate chain."""

    @pytest.fixture
    def danish_translator(self, registry, string_cache, mock_client, static_loader):
        return TranslationResolver(
            registry=registry,
            strings=string_cache,
            client=mock_client,
            loader=static_loader,
            locale="da",
            fallback_locale="en",
        )

    def test_parse_locale_order(self, danish_translator):
        assert danish_translator.parse_locale() == ["da", "en"]
        assert danish_translator.parse_locale("de") == ["de", "en", "da"]

    def test_parse_locale_removes_duplicates(self, translator):
        assert translator.parse_locale("en") == ["en"]
        assert translator.parse_locale(None) == ["en"]

    def test_first_locale_with_a_hit_wins(self, translator, store, keys):
        seed_cache(
            store,
            keys,
            strings={
                "en": {"web": {"greeting.hello": "Hello", "greeting.bye": "Bye"}},
                "da": {"web": {"greeting.hello": "Hej"}},
            },
        )

        assert translator.resolve("greeting.hello", locale="da") == "Hej"
        assert translator.resolve("greeting.bye", locale="da") == "Bye"

    def test_no_fallback_only_tries_requested_locale(
        self, translator, mock_client, store, keys
    ):
        seed_cache(
            store,
            keys,
            strings={
                "en": {"web": {"greeting.bye": "Bye"}},
                "da": {"web": {}},
            },
        )
        mock_client.create_string.side_effect = RemoteError("down")

        result = translator.resolve("greeting.bye", locale="fr", fallback=False)

        assert result == "greeting.bye"
        mock_client.create_string.assert_called_once()

    def test_first_load_applies_fallback_language(
        self, registry, string_cache, mock_client
    ):
        translator = TranslationResolver(
            registry=registry,
            strings=string_cache,
            client=mock_client,
            locale="de",
        )

        translator.load_languages()

        assert translator.get_locale() == "en"
        assert translator.context == LocaleContext("en", "en")

    def test_set_locale_updates_locale_and_context(self, translator):
        translator.set_locale("da")

        assert translator.get_locale() == "da"
        assert translator.context.default_locale == "da"
        assert translator.context.fallback_locale == "da"

    def test_set_fallback_keeps_default(self, danish_translator):
        danish_translator.set_fallback("sv")

        assert danish_translator.context == LocaleContext("da", "sv")
        assert danish_translator.parse_locale() == ["da", "sv"]


@pytest.mark.unit
class TestStaticFallback:
    """Static string table tier."""

    @pytest.fixture(autouse=True)
    def warm_empty_cache(self, store, keys, static_loader):
        seed_cache(store, keys, strings={"en": {"web": {}}, "da": {"web": {}}})
        static_loader.add_messages(
            "en",
            "messages",
            {
                "welcome": "Welcome :name",
                "menu": ["Home", "About"],
                "empty": [],
                "nested": {"deep": "Deep line"},
            },
        )

    def test_static_string_with_replacements(self, translator, mock_client):
        assert translator.resolve("messages.welcome", {"name": "sam"}) == "Welcome sam"
        mock_client.create_string.assert_not_called()

    def test_static_list_returned_as_is(self, translator):
        assert translator.resolve("messages.menu") == ["Home", "About"]

    def test_static_nested_item(self, translator):
        assert translator.resolve("messages.nested.deep") == "Deep line"

    def test_empty_static_list_counts_as_missing(self, translator, mock_client):
        translator.resolve("messages.empty")

        mock_client.create_string.assert_called_once_with(
            "messages.empty", "messages.empty", "web", None
        )

    def test_static_group_loaded_once(self, translator, static_loader):
        translator.resolve("messages.welcome")
        static_loader.add_messages("en", "messages", {"welcome": "Changed"})

        assert translator.resolve("messages.welcome") == "Welcome :name"

    def test_concurrent_resolves_load_group_once(
        self, registry, string_cache, mock_client, store, keys
    ):
        guard = threading.Lock()
        calls = []

        def slow_load(namespace, group, locale):
            with guard:
                calls.append((namespace, group, locale))
            time.sleep(0.02)
            return {"welcome": "Welcome"}

        loader = MagicMock(spec=TranslationLoader)
        loader.load.side_effect = slow_load
        resolver = TranslationResolver(
            registry=registry, strings=string_cache, client=mock_client, loader=loader
        )
        seed_cache(
            store,
            keys,
            languages=[make_language("en", is_fallback=True)],
            strings={"en": {"web": {}}},
        )
        resolver.load_languages()
        results = []

        def worker(barrier):
            barrier.wait()
            results.append(resolver.resolve("messages.welcome"))

        barrier = threading.Barrier(5)
        threads = [threading.Thread(target=worker, args=(barrier,)) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert results == ["Welcome"] * 5
        assert calls == [("*", "messages", "en")]

    def test_namespaced_key(self, translator, static_loader):
        static_loader.add_messages(
            "en", "users", {"title": "Users"}, namespace="admin"
        )

        assert translator.resolve("admin::users.title") == "Users"


@pytest.mark.unit
class TestAutoCreation:
    """Missing keys are registered remotely and retried once."""

    @pytest.fixture(autouse=True)
    def english_only(self, mock_client):
        mock_client.list_languages.return_value = [
            make_language("en", is_fallback=True)
        ]

    def test_missing_key_created_once_and_key_returned(self, translator, mock_client):
        result = translator.resolve("greeting.hello")

        assert result == "greeting.hello"
        mock_client.create_string.assert_called_once_with(
            "greeting.hello", "greeting.hello", "web", None
        )

    def test_second_resolve_does_not_create_again(self, translator, mock_client):
        translator.resolve("greeting.hello")
        translator.resolve("greeting.hello")

        assert mock_client.create_string.call_count == 1

    def test_structured_request_uses_default_string(self, translator, mock_client):
        result = translator.resolve(
            {
                "key": "greeting.bye",
                "string": "Goodbye",
                "platform": "ios",
                "comment": "Shown at logout",
            }
        )

        assert result == "Goodbye"
        mock_client.create_string.assert_called_once_with(
            "greeting.bye", "Goodbye", "ios", "Shown at logout"
        )
        mock_client.list_strings.assert_called_with("en", "ios")

    def test_placeholder_gets_replacements(self, translator):
        result = translator.resolve(
            {"key": "greeting.hello", "string": "Hello :name"}, {"name": "Sam"}
        )

        assert result == "Hello Sam"

    def test_create_failure_is_swallowed(self, translator, mock_client, string_cache):
        mock_client.create_string.side_effect = RemoteError("boom", status_code=500)

        result = translator.resolve("greeting.hello")

        assert result == "greeting.hello"
        assert string_cache.lookup("en", "web", "greeting.hello") == "greeting.hello"

    def test_placeholder_written_for_every_known_locale(
        self, translator, mock_client, string_cache
    ):
        mock_client.list_languages.return_value = [
            make_language("en", is_fallback=True),
            make_language("da"),
        ]

        translator.resolve({"key": "greeting.hello", "string": "Hello"})

        assert string_cache.lookup("en", "web", "greeting.hello") == "Hello"
        assert string_cache.lookup("da", "web", "greeting.hello") == "Hello"

    def test_namespaced_key_created_without_namespace(self, translator, mock_client):
        translator.resolve("admin::users.title")

        mock_client.create_string.assert_called_once_with(
            "users.title", "admin::users.title", "web", None
        )


@pytest.mark.unit
class TestResolveErrors:
    def test_key_without_separator_raises_before_io(self, translator, mock_client):
        with pytest.raises(InvalidKeyError):
            translator.resolve("hello")

        mock_client.list_languages.assert_not_called()
        mock_client.list_strings.assert_not_called()
        mock_client.create_string.assert_not_called()

    def test_unreachable_service_on_first_load_raises(self, translator, mock_client):
        mock_client.list_languages.side_effect = RemoteError("down")

        with pytest.raises(RemoteError):
            translator.resolve("greeting.hello")

    def test_language_refresh_failure_after_load_is_absorbed(
        self, translator, mock_client, store, keys, clock
    ):
        seed_cache(
            store,
            keys,
            strings={"en": {"web": {"greeting.hello": "Hello"}}, "da": {"web": {}}},
        )
        translator.load_languages()
        mock_client.list_languages.side_effect = RemoteError("down")
        clock.return_value = NOW + 3600

        assert translator.resolve("greeting.hello") == "Hello"
        mock_client.list_languages.assert_called_once()


@pytest.mark.unit
class TestHas:
    def test_has_existing_key(self, translator, store, keys, mock_client):
        seed_cache(
            store,
            keys,
            strings={"en": {"web": {"greeting.hello": "Hello"}}, "da": {"web": {}}},
        )

        assert translator.has("greeting.hello") is True
        assert translator.has("greeting.unknown") is False
        mock_client.create_string.assert_not_called()


@pytest.mark.unit
class TestForcedRefresh:
    def test_get_languages(self, translator):
        assert translator.get_languages() == ["en", "da"]

    def test_update_strings_uses_default_platform(self, translator, mock_client):
        result = translator.update_strings("da")

        assert result.is_success
        mock_client.list_strings.assert_called_once_with("da", "web")

    def test_update_languages_raises_without_snapshot(self, translator, mock_client):
        mock_client.list_languages.side_effect = RemoteError("down")

        with pytest.raises(RemoteError):
            translator.update_languages()

    def test_update_languages_returns_error_with_snapshot(
        self, translator, mock_client, store, keys
    ):
        seed_cache(store, keys)
        mock_client.list_languages.side_effect = RemoteError("down")

        result = translator.update_languages()

        assert not result.is_success
        assert translator.get_languages() == ["en", "da"]


@pytest.mark.unit
class TestMakeReplacements:
    def test_no_replacements(self):
        assert make_replacements("Hello :name", None) == "Hello :name"
        assert make_replacements("Hello :name", {}) == "Hello :name"

    def test_simple_token(self):
        assert make_replacements("Hello :name", {"name": "sam"}) == "Hello sam"

    def test_upper_and_capitalised_variants(self):
        line = ":name, :Name and :NAME"

        assert make_replacements(line, {"name": "sam"}) == "sam, Sam and SAM"

    def test_longer_tokens_first(self):
        line = ":name_full (:name)"

        result = make_replacements(line, {"name": "Sam", "name_full": "Sam Smith"})

        assert result == "Sam Smith (Sam)"

    def test_values_converted_to_string(self):
        assert make_replacements("Count: :count", {"count": 42}) == "Count: 42"

    def test_unknown_tokens_kept(self):
        assert make_replacements("Hi :who", {"name": "x"}) == "Hi :who"
