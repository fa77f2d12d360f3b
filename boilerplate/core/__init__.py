"""
Boilerplate core

Registries, logging and the provider that wires everything together.
"""

from .registry import Item, ItemRegistry, MenuItemsRepository, NavbarItemsRepository
from .provider import BoilerplateProvider

__all__ = [
    "Item",
    "ItemRegistry",
    "MenuItemsRepository",
    "NavbarItemsRepository",
    "BoilerplateProvider",
]
