"""Static translation loading interface and YAML implementation.

The static table is the second lookup tier, consulted when the remote
string cache has no value for a key.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict

import yaml

from languagecenter.core.logging import get_module_logger
from languagecenter.infrastructure.i18n.models import DEFAULT_NAMESPACE

logger = get_module_logger()


class TranslationLoader(ABC):
    """Abstract base for static translation loaders."""

    @abstractmethod
    def load(self, namespace: str, group: str, locale: str) -> Dict[str, Any]:
        """Load one group of static lines for a locale.

        Args:
            namespace: Namespace ("*" for the application's own lines).
            group: Group name (first segment of the key).
            locale: Locale codename.

        Returns:
            Mapping of item -> string or nested mapping/list. Empty when the
            group does not exist for the locale.

        Raises:
            ValueError: If the translation source is malformed.
        """
        pass


class YAMLTranslationLoader(TranslationLoader):
    """Loader for YAML-based static string tables.

    Expects files laid out as ``<path>/<locale>/<group>.yml``. Namespaced
    lines live under their own registered directory with the same layout.

    Attributes:
        path: Directory holding the application's own lines.
        hints: Mapping of namespace -> directory.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.hints: Dict[str, Path] = {}

        if not self.path.exists():
            raise ValueError(f"Translations directory not found: {self.path}")

        logger.info("initialized_yaml_loader", path=str(self.path))

    def add_namespace(self, namespace: str, path: Path) -> None:
        """Register a directory holding the lines of a namespace."""
        self.hints[namespace] = Path(path)

    def load(self, namespace: str, group: str, locale: str) -> Dict[str, Any]:
        if namespace in (None, DEFAULT_NAMESPACE):
            return self._load_path(self.path, group, locale)

        if namespace in self.hints:
            return self._load_path(self.hints[namespace], group, locale)

        return {}

    def _load_path(self, base: Path, group: str, locale: str) -> Dict[str, Any]:
        yaml_file = base / locale / f"{group}.yml"
        if not yaml_file.exists():
            return {}

        try:
            with open(yaml_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error("yaml_parse_error", file=str(yaml_file), error=str(e))
            raise ValueError(f"Failed to parse {yaml_file}: {e}") from e

        if data is None:
            return {}

        if not isinstance(data, dict):
            logger.warning("invalid_yaml_format", file=str(yaml_file), expected="dict")
            return {}

        logger.debug("loaded_static_group", group=group, locale=locale)
        return data


class ArrayTranslationLoader(TranslationLoader):
    """In-memory loader fed with plain dictionaries.

    Useful when static lines are bundled in code or in tests. Namespaced
    lines are added with the ``namespace`` argument of add_messages.
    """

    def __init__(self) -> None:
        self.messages: Dict[tuple, Dict[str, Any]] = {}

    def add_messages(
        self,
        locale: str,
        group: str,
        messages: Dict[str, Any],
        namespace: str = DEFAULT_NAMESPACE,
    ) -> "ArrayTranslationLoader":
        bucket = self.messages.setdefault((namespace, group, locale), {})
        bucket.update(messages)
        return self

    def load(self, namespace: str, group: str, locale: str) -> Dict[str, Any]:
        return dict(self.messages.get((namespace, group, locale), {}))
