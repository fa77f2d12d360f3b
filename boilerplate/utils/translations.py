"""
Translations: loading and caching of the panel language files.

Supports:
- One JSON catalog per locale in resources/lang (nested keys, "a.b.c")
- Extra catalog directories from the host application (they win)
- Fallback to the default locale, then to the key itself
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from boilerplate.config import LANG_DIR

logger = logging.getLogger(__name__)

FALLBACK_LOCALE = "en"


class Translator:
    def __init__(self, default_locale: str = FALLBACK_LOCALE, paths: Optional[List[Path]] = None):
        self.default_locale = default_locale
        # Later paths override earlier ones
        self.paths: List[Path] = [LANG_DIR] + [Path(p) for p in (paths or [])]
        self._catalogs: Dict[str, Dict[str, Any]] = {}

    def add_path(self, path) -> None:
        """Register a host directory of <locale>.json overrides"""
        self.paths.append(Path(path))
        self._catalogs.clear()

    def locales(self) -> List[str]:
        found = set()
        for path in self.paths:
            if path.exists():
                found.update(p.stem for p in path.glob("*.json"))
        return sorted(found)

    def catalog(self, locale: str) -> Dict[str, Any]:
        """Merged catalog for a locale (cached)"""
        if locale in self._catalogs:
            return self._catalogs[locale]

        merged: Dict[str, Any] = {}
        for path in self.paths:
            file = path / f"{locale}.json"
            if not file.exists():
                continue
            try:
                with open(file, "r", encoding="utf-8") as f:
                    _deep_update(merged, json.load(f))
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to load translations from {file}: {e}")

        self._catalogs[locale] = merged
        return merged

    def _lookup(self, locale: str, key: str) -> Optional[str]:
        node: Any = self.catalog(locale)
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node if isinstance(node, str) else None

    def trans(self, key: str, locale: Optional[str] = None, **kwargs) -> str:
        """
        Translate a key.

        Args:
            key: Dotted key (e.g., "menu.users.title")
            locale: Locale code, default locale if omitted
            **kwargs: Format placeholders

        Returns:
            Formatted text, or the key itself when nothing matches
        """
        locale = locale or self.default_locale
        text = self._lookup(locale, key)
        if text is None and locale != self.default_locale:
            text = self._lookup(self.default_locale, key)
        if text is None and self.default_locale != FALLBACK_LOCALE:
            text = self._lookup(FALLBACK_LOCALE, key)
        if text is None:
            return key

        if kwargs:
            try:
                text = text.format(**kwargs)
            except KeyError as e:
                logger.warning(f"Missing placeholder in {key}: {e}")
        return text

    def clear_cache(self) -> None:
        self._catalogs.clear()


def _deep_update(target: Dict[str, Any], source: Dict[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_update(target[key], value)
        else:
            target[key] = value
