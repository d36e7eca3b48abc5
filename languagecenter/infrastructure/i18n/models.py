"""Translation models for the i18n system.

Defines the data structures exchanged between the remote client, the
language registry, the string cache and the resolver.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from languagecenter.core.exceptions import InvalidKeyError

DEFAULT_NAMESPACE = "*"
NAMESPACE_SEPARATOR = "::"
KEY_SEPARATOR = "."


@dataclass(frozen=True)
class Language:
    """A locale known to the remote translation service.

    Attributes:
        codename: Locale identifier (e.g., "en", "da").
        is_fallback: Whether this locale is the fallback locale.
        timestamp: Unix seconds of the last remote change for this locale.
    """

    codename: str
    is_fallback: bool = False
    timestamp: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Language":
        """Build a Language from the remote (or persisted) JSON shape.

        Args:
            data: Mapping with codename, is_fallback and timestamp.

        Returns:
            Language instance.
        """
        return cls(
            codename=str(data["codename"]),
            is_fallback=bool(data.get("is_fallback", False)),
            timestamp=int(data.get("timestamp") or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "codename": self.codename,
            "is_fallback": self.is_fallback,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class StringEntry:
    """A single remote string.

    (locale, platform, key) is the identity; ``key`` is ``group.item``.
    """

    locale: str
    platform: str
    key: str
    value: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], platform: str) -> "StringEntry":
        """Build a StringEntry from the remote JSON shape.

        Args:
            data: Mapping with key, value and language.
            platform: Platform the strings were requested for.

        Returns:
            StringEntry instance.
        """
        value = data.get("value")
        return cls(
            locale=str(data["language"]),
            platform=platform,
            key=str(data["key"]),
            value="" if value is None else str(value),
        )


@dataclass(frozen=True)
class ParsedKey:
    """A translation key split into namespace, group and item.

    Keys look like ``group.item`` or ``namespace::group.item``. The item
    may itself contain dots, which address nested static entries.
    """

    namespace: str
    group: str
    item: str

    @property
    def cache_key(self) -> str:
        """Key under which the string is stored remotely (``group.item``)."""
        return f"{self.group}{KEY_SEPARATOR}{self.item}"

    @classmethod
    def from_string(cls, key: str) -> "ParsedKey":
        """Parse a translation key.

        Args:
            key: Key string (e.g., "greeting.hello", "admin::users.title").

        Returns:
            ParsedKey instance.

        Raises:
            InvalidKeyError: If the group or item part is missing.
        """
        namespace = DEFAULT_NAMESPACE
        remainder = key
        if NAMESPACE_SEPARATOR in key:
            namespace, remainder = key.split(NAMESPACE_SEPARATOR, 1)
            if not namespace:
                raise InvalidKeyError(key)

        group, _, item = remainder.partition(KEY_SEPARATOR)
        if not group or not item:
            raise InvalidKeyError(key)

        return cls(namespace=namespace, group=group, item=item)


@dataclass(frozen=True)
class LookupRequest:
    """Canonical form of a resolution request.

    Callers pass either a bare key or a mapping with ``key`` and optional
    ``string`` (default text), ``platform`` and ``comment``; both shapes are
    normalised here once.

    Attributes:
        key: Requested key.
        default_string: Placeholder used for auto-creation and as the
            interim value. Defaults to the key.
        platform: Requested platform, or None for the configured default.
        comment: Optional note sent to translators on auto-creation.
    """

    key: str
    default_string: str
    platform: Optional[str] = None
    comment: Optional[str] = None

    @classmethod
    def from_input(
        cls, request: Union[str, Mapping[str, Any], "LookupRequest"]
    ) -> "LookupRequest":
        if isinstance(request, LookupRequest):
            return request

        if isinstance(request, str):
            return cls(key=request, default_string=request)

        key = request["key"]
        default_string = request.get("string")
        if default_string is None:
            default_string = request.get("default_string")

        return cls(
            key=key,
            default_string=key if default_string is None else default_string,
            platform=request.get("platform"),
            comment=request.get("comment"),
        )


@dataclass(frozen=True)
class LocaleContext:
    """Process default and fallback locales derived from a registry load.

    The registry returns this value rather than mutating shared state; the
    resolver decides whether to apply it.
    """

    default_locale: str
    fallback_locale: str

    @classmethod
    def for_locale(cls, locale: str) -> "LocaleContext":
        return cls(default_locale=locale, fallback_locale=locale)
