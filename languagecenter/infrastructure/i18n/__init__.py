"""i18n system - remote-synchronised translations with local fallback.

Main components:
- models: Language, StringEntry, ParsedKey, LookupRequest, LocaleContext
- client: RemoteClient for the remote translation service
- registry: LanguageRegistry of known locales
- strings: StringCache of remote strings in the durable store
- loader: TranslationLoader and YAMLTranslationLoader for static lines
- translator: TranslationResolver, the public engine
"""

from languagecenter.core.exceptions import (
    InvalidKeyError,
    LanguageCenterError,
    RemoteError,
)
from languagecenter.infrastructure.i18n.client import RemoteClient
from languagecenter.infrastructure.i18n.factory import create_translator
from languagecenter.infrastructure.i18n.loader import (
    ArrayTranslationLoader,
    TranslationLoader,
    YAMLTranslationLoader,
)
from languagecenter.infrastructure.i18n.models import (
    Language,
    LocaleContext,
    LookupRequest,
    ParsedKey,
    StringEntry,
)
from languagecenter.infrastructure.i18n.registry import LanguageRegistry
from languagecenter.infrastructure.i18n.strings import StringCache
from languagecenter.infrastructure.i18n.translator import (
    TranslationResolver,
    make_replacements,
)

__all__ = [
    "ArrayTranslationLoader",
    "InvalidKeyError",
    "Language",
    "LanguageCenterError",
    "LanguageRegistry",
    "LocaleContext",
    "LookupRequest",
    "ParsedKey",
    "RemoteClient",
    "RemoteError",
    "StringCache",
    "StringEntry",
    "TranslationLoader",
    "TranslationResolver",
    "YAMLTranslationLoader",
    "create_translator",
    "make_replacements",
]
