"""Custom exceptions for the translation system.

A missing translation is not an exception: the resolver returns the
requested key instead.
"""

from typing import Optional


class LanguageCenterError(Exception):
    """Base exception for all translation system errors.

    Example:
        try:
            translator.resolve("greeting.hello")
        except LanguageCenterError as e:
            logger.error("translation_error", error=str(e))
    """

    pass


class RemoteError(LanguageCenterError):
    """Raised when the remote translation service call fails.

    Covers non-2xx responses, timeouts, connection failures and bodies
    that are not valid JSON.

    Attributes:
        status_code: HTTP status code, or None for transport failures.

    Example:
        >>> client.list_languages()
        Traceback (most recent call last):
        ...
        RemoteError: API returned status [503].
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidKeyError(LanguageCenterError, ValueError):
    """Raised when a translation key has no group separator.

    Keys must look like ``group.item`` (optionally ``namespace::group.item``).
    Always raised before any network I/O.

    Example:
        >>> client.create_string("hello", "Hello")
        Traceback (most recent call last):
        ...
        InvalidKeyError: Missing [.] in string key: hello
    """

    def __init__(self, key: str):
        super().__init__(f"Missing [.] in string key: {key}")
        self.key = key
