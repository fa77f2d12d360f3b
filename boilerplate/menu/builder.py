"""
Menu Builder

Turns registry items into plain dicts for the sidebar template.
Entries the user may not see are skipped; broken entries are logged
and skipped without stopping the rest of the menu.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from boilerplate.core.registry import ItemRegistry
from .items import MenuItem

logger = logging.getLogger(__name__)


class MenuBuilder:
    def __init__(self, registry: ItemRegistry, roles_config, translate: Optional[Callable[[str], str]] = None):
        self.registry = registry
        self.roles_config = roles_config
        self.translate = translate or (lambda key: key)

    def build(self, user: Optional[Dict], current_path: str = "") -> List[Dict[str, Any]]:
        """Render-ready menu for a user. Reads the registry once."""
        menu = []
        for item in self.registry.all():
            try:
                entry = self._build_entry(item.key, item.payload, user, current_path)
            except (ValidationError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed menu item '{item.key}': {e}")
                continue
            if entry is not None:
                menu.append(entry)
        return menu

    def _build_entry(self, key: str, payload: Any, user: Optional[Dict], current_path: str) -> Optional[Dict[str, Any]]:
        if isinstance(payload, dict):
            payload = MenuItem(**payload)
        if not isinstance(payload, MenuItem):
            raise TypeError(f"unsupported payload type {type(payload).__name__}")

        if not payload.is_visible(user, self.roles_config):
            return None

        children = []
        for index, child in enumerate(payload.children):
            entry = self._build_entry(f"{key}.{index}", child, user, current_path)
            if entry is not None:
                children.append(entry)

        # A parent without a link is pointless once all its children are hidden
        if payload.children and not children and not payload.url:
            return None

        active_prefix = payload.active or payload.url
        return {
            "key": key,
            "label": self.translate(payload.label),
            "url": payload.url,
            "route": payload.route,
            "icon": payload.icon,
            "active": bool(active_prefix) and current_path.startswith(active_prefix),
            "children": children,
        }
