"""
Item Registry

Ordered, deduplicating collections of UI items (menu, navbar) that the
package and the host application fill during startup.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

Number = Union[int, float]


@dataclass
class Item:
    """One registrable UI entry. The payload is only read by the renderer."""
    key: str
    payload: Any = None
    order: Optional[Number] = None


class ItemRegistry:
    """
    Accumulates items contributed by several callers.

    Usage:
        menu_items = MenuItemsRepository()
        menu_items.register([Item("users", users_payload, order=100)])
        menu_items.register([Item("reports", reports_payload)])

        for item in menu_items.all():
            ...

    Re-registering a key replaces the previous item but keeps its
    registration position for tie-breaking.
    """

    name = "items"

    def __init__(self):
        self._items: Dict[str, Item] = {}
        self._sequence: Dict[str, int] = {}
        self._counter = 0
        self._lock = threading.Lock()

    def register(self, items: Iterable[Item]) -> None:
        """Insert or replace items by key."""
        with self._lock:
            for item in items:
                if item.key in self._items:
                    logger.debug(f"{self.name}: replacing item '{item.key}'")
                else:
                    self._sequence[item.key] = self._counter
                    self._counter += 1
                self._items[item.key] = item

    def all(self) -> List[Item]:
        """Items with explicit order first (ascending), then unordered ones."""
        with self._lock:
            ordered = [i for i in self._items.values() if i.order is not None]
            unordered = [i for i in self._items.values() if i.order is None]
            ordered.sort(key=lambda i: (i.order, self._sequence[i.key]))
            unordered.sort(key=lambda i: self._sequence[i.key])
            return ordered + unordered

    def get(self, key: str) -> Optional[Item]:
        with self._lock:
            return self._items.get(key)

    def keys(self) -> List[str]:
        return [item.key for item in self.all()]

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: str) -> bool:
        return key in self._items


class MenuItemsRepository(ItemRegistry):
    """Sidebar menu entries"""
    name = "menu"


class NavbarItemsRepository(ItemRegistry):
    """Top navbar entries"""
    name = "navbar"
