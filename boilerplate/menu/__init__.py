"""Sidebar menu: item payloads, built-in entries and the builder."""

from .items import MenuItem, users_menu_item, logs_menu_item, BUILTIN_ITEMS
from .builder import MenuBuilder

__all__ = [
    'MenuItem',
    'MenuBuilder',
    'users_menu_item',
    'logs_menu_item',
    'BUILTIN_ITEMS',
]
