"""Durable cache key builder."""


class CacheKeyBuilder:
    """Build the durable cache keys used by the translation system.

    Every key lives under one prefix so unrelated consumers of a shared
    store do not collide.

    Example:
        >>> keys = CacheKeyBuilder(prefix="languagecenter")
        >>> keys.languages()
        'languagecenter.languages'
        >>> keys.locale_timestamp("da")
        'languagecenter.language.da.timestamp'
        >>> keys.bucket_timestamp("da", "ios")
        'languagecenter.language.da.ios.timestamp'
    """

    def __init__(self, prefix: str = "languagecenter"):
        self.prefix = prefix

    def build(self, *parts: str) -> str:
        return ".".join([self.prefix, *parts])

    def languages(self) -> str:
        """Key of the persisted language list."""
        return self.build("languages")

    def languages_timestamp(self) -> str:
        """Key of the last language refresh time."""
        return self.build("timestamp")

    def strings(self) -> str:
        """Key of the persisted locale -> platform -> key -> value snapshot."""
        return self.build("strings")

    def locale_timestamp(self, locale: str) -> str:
        """Key of the last string sync time for one locale."""
        return self.build("language", locale, "timestamp")

    def bucket_timestamp(self, locale: str, platform: str) -> str:
        """Key of the last successful sync of one (locale, platform) bucket."""
        return self.build("language", locale, platform, "timestamp")
