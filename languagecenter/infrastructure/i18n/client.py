"""HTTP client for the remote translation service.

Thin boundary over the service API: list languages, list strings for a
locale and platform, create a string. No caching and no retries; callers
own the retry and fallback policy.

Usage:
    from languagecenter.infrastructure.i18n.client import RemoteClient

    client = RemoteClient(
        base_url="https://translations.example.com/api/v1/",
        username="app",
        password="secret",
    )
    languages = client.list_languages()
    strings = client.list_strings("en", "web")
"""

import json
from typing import Any, Callable, Dict, List, Optional, TypeVar
from urllib.parse import urljoin

import requests

from languagecenter.core.exceptions import InvalidKeyError, RemoteError
from languagecenter.core.logging import get_module_logger
from languagecenter.infrastructure.i18n.models import (
    KEY_SEPARATOR,
    Language,
    StringEntry,
)

logger = get_module_logger()

T = TypeVar("T")


def _humanize(segment: str) -> str:
    segment = segment[:1].upper() + segment[1:]
    return segment.replace("_", " ")


def split_key(key: str) -> tuple[str, str]:
    """Split a key into the (category, name) pair the service expects.

    The key is split on its first separator; each part gets an upper-cased
    first letter and underscores replaced by spaces.

    Args:
        key: Key such as "user_profile.first_name".

    Returns:
        Tuple such as ("User profile", "First name").

    Raises:
        InvalidKeyError: If the key has no separator, or starts with one.
    """
    position = key.find(KEY_SEPARATOR)
    if position <= 0:
        raise InvalidKeyError(key)

    return _humanize(key[:position]), _humanize(key[position + 1 :])


class RemoteClient:
    """Client for the remote translation service.

    Every call authenticates with the configured username/password pair
    and raises RemoteError on transport failure or non-2xx status.

    Attributes:
        base_url: Base API URL, always ending with "/".
        timeout: Default timeout in seconds.
        default_platform: Platform used when create_string gets none.
    """

    def __init__(
        self,
        base_url: str,
        username: str = "",
        password: str = "",
        timeout: float = 10.0,
        default_platform: str = "web",
        session: Optional[requests.Session] = None,
    ) -> None:
        if not base_url:
            raise ValueError("LANGUAGECENTER_URL is missing")

        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.timeout = timeout
        self.default_platform = default_platform
        self._session = session or requests.Session()
        self._session.auth = (username, password)
        self._session.headers.update({"Accept": "application/json"})
        self._logger = logger.bind(base_url=self.base_url)

    def list_languages(self, timeout: Optional[float] = None) -> List[Language]:
        """Fetch every language known to the service.

        Args:
            timeout: Per-call timeout (overrides default).

        Returns:
            List of Language.

        Raises:
            RemoteError: On transport failure, non-2xx status or a body
                that is not a list of well-formed objects.
        """
        data = self._request(
            "GET", "languages", params={"timestamp": "on"}, timeout=timeout
        )
        return self._parse_items("languages", data, Language.from_dict)

    def list_strings(
        self, locale: str, platform: str, timeout: Optional[float] = None
    ) -> List[StringEntry]:
        """Fetch every string for a locale and platform.

        Args:
            locale: Locale codename.
            platform: Platform name.
            timeout: Per-call timeout (overrides default).

        Returns:
            List of StringEntry. Each entry carries the locale reported by
            the service, which may differ from the requested one.

        Raises:
            RemoteError: On transport failure, non-2xx status or a body
                that is not a list of well-formed objects.
        """
        data = self._request(
            "GET",
            "strings",
            params={"platform": platform, "language": locale},
            timeout=timeout,
        )
        return self._parse_items(
            "strings", data, lambda item: StringEntry.from_dict(item, platform)
        )

    def create_string(
        self,
        key: str,
        value: str,
        platform: Optional[str] = None,
        comment: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Register a new string with the service.

        Args:
            key: Key in "group.item" form.
            value: Default text for the string.
            platform: Target platform (defaults to default_platform).
            comment: Optional note for translators.
            timeout: Per-call timeout (overrides default).

        Raises:
            InvalidKeyError: If the key has no separator. No request is sent.
            RemoteError: On transport failure or non-2xx status.
        """
        category, name = split_key(key)

        self._request(
            "POST",
            "string",
            data={
                "platform": platform or self.default_platform,
                "category": category,
                "key": name,
                "value": value,
                "comment": comment,
            },
            timeout=timeout,
            expect_body=False,
        )
        self._logger.info("remote_string_created", key=key, platform=platform)

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
        expect_body: bool = True,
    ) -> Any:
        """Send a request and decode the JSON body.

        Returns:
            Decoded JSON body, or None when expect_body is False.

        Raises:
            RemoteError: On transport failure, non-2xx status or invalid JSON.
        """
        url = urljoin(self.base_url, path)
        timeout = timeout or self.timeout

        log = self._logger.bind(method=method, path=path)
        log.debug("remote_request")

        try:
            response = self._session.request(
                method=method,
                url=url,
                params=params,
                data=data,
                timeout=timeout,
            )
        except requests.Timeout as e:
            log.warning("remote_request_timeout", timeout=timeout)
            raise RemoteError(f"Request timeout after {timeout}s") from e
        except requests.RequestException as e:
            log.warning("remote_request_failed", error=str(e))
            raise RemoteError(f"Connection error: {str(e)}") from e

        if not 200 <= response.status_code < 300:
            log.warning("remote_request_rejected", status_code=response.status_code)
            raise RemoteError(
                f"API returned status [{response.status_code}].",
                status_code=response.status_code,
            )

        if not expect_body:
            return None

        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as e:
            log.warning("remote_response_not_json", content=response.text[:200])
            raise RemoteError("API returned a non-JSON body.") from e

    def _parse_items(
        self, path: str, data: Any, build: Callable[[Any], T]
    ) -> List[T]:
        """Build models from a decoded JSON array.

        Raises:
            RemoteError: If the body is not an array of well-formed objects.
        """
        if data is None:
            return []

        if not isinstance(data, list):
            self._logger.warning(
                "remote_response_malformed", path=path, body_type=type(data).__name__
            )
            raise RemoteError("API returned a malformed body.")

        try:
            return [build(item) for item in data]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            self._logger.warning("remote_response_malformed", path=path, error=str(e))
            raise RemoteError("API returned a malformed body.") from e

    def close(self) -> None:
        """Close HTTP session and release connections."""
        self._session.close()


__all__ = ["RemoteClient", "split_key"]
