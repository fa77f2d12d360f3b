"""
Boilerplate: admin panel scaffolding for FastAPI applications.

Menus, navbar, role/permission guards, localization and view
composition wired into the host application's startup.
"""

from .config import BoilerplateConfig, BoilerplateConfigError, validate_config
from .core.registry import Item, ItemRegistry, MenuItemsRepository, NavbarItemsRepository
from .core.provider import BoilerplateProvider
from .menu import MenuItem
from .users import UserProvider, EnvUserProvider, MemoryUserProvider

__version__ = "1.0.0"

__all__ = [
    "BoilerplateConfig",
    "BoilerplateConfigError",
    "validate_config",
    "Item",
    "ItemRegistry",
    "MenuItemsRepository",
    "NavbarItemsRepository",
    "BoilerplateProvider",
    "MenuItem",
    "UserProvider",
    "EnvUserProvider",
    "MemoryUserProvider",
]
