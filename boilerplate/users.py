"""
User Providers

This is the contract the panel uses to find users. Storage is up to the
host application: implement UserProvider and point
BOILERPLATE_USER_PROVIDER at it ("package.module:ClassName").
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import importlib
import logging

import bcrypt

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def check_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Not a bcrypt hash
        return False


class UserProvider(ABC):
    """
    Base class for user lookups.

    Users are dicts:
        {"username": "jane", "roles": ["admin"], "permissions": [], "password_hash": "..."}
    """

    # Whether create_user is supported (users page shows the form)
    can_create: bool = False

    def __init__(self, config):
        self.config = config

    @abstractmethod
    async def get_user(self, username: str) -> Optional[Dict[str, Any]]:
        """Return the user dict or None."""
        pass

    @abstractmethod
    async def list_users(self) -> List[Dict[str, Any]]:
        pass

    async def create_user(self, username: str, password: str, roles: List[str]) -> Dict[str, Any]:
        raise NotImplementedError(f"{self.__class__.__name__} does not support creating users")

    async def authenticate(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        """Return the user (without password hash) if the password matches"""
        user = await self.get_user(username)
        if not user or not check_password(password, user.get("password_hash", "")):
            return None
        return public_user(user)


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in user.items() if k != "password_hash"}


class EnvUserProvider(UserProvider):
    """Single administrator taken from ADMIN_PANEL_USER / ADMIN_PANEL_PASSWORD"""

    def __init__(self, config):
        super().__init__(config)
        self._password_hash = hash_password(config.auth.admin_password) if config.auth.admin_password else ""

    def _admin(self) -> Dict[str, Any]:
        return {
            "username": self.config.auth.admin_user,
            "roles": [self.config.roles.admin_role],
            "permissions": [],
            "password_hash": self._password_hash,
        }

    async def get_user(self, username: str) -> Optional[Dict[str, Any]]:
        if username and username == self.config.auth.admin_user:
            return self._admin()
        return None

    async def list_users(self) -> List[Dict[str, Any]]:
        return [public_user(self._admin())]


class MemoryUserProvider(UserProvider):
    """Process-local users, seeded with the env administrator. Handy for development."""

    can_create = True

    def __init__(self, config):
        super().__init__(config)
        self._users: Dict[str, Dict[str, Any]] = {}
        if config.auth.admin_password:
            self._users[config.auth.admin_user] = {
                "username": config.auth.admin_user,
                "roles": [config.roles.admin_role],
                "permissions": [],
                "password_hash": hash_password(config.auth.admin_password),
            }

    async def get_user(self, username: str) -> Optional[Dict[str, Any]]:
        user = self._users.get(username)
        return dict(user) if user else None

    async def list_users(self) -> List[Dict[str, Any]]:
        return [public_user(u) for _, u in sorted(self._users.items())]

    async def create_user(self, username: str, password: str, roles: List[str]) -> Dict[str, Any]:
        if username in self._users:
            raise ValueError(f"User '{username}' already exists")
        user = {
            "username": username,
            "roles": list(roles),
            "permissions": [],
            "password_hash": hash_password(password),
        }
        self._users[username] = user
        logger.info(f"Created panel user: {username} (roles: {', '.join(roles) or '-'})")
        return public_user(user)


def import_string(path: str):
    """Import "package.module:attr" (or "package.module.attr")"""
    if ":" in path:
        module_name, attr = path.split(":", 1)
    else:
        module_name, _, attr = path.rpartition(".")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError:
        raise ImportError(f"Module '{module_name}' has no attribute '{attr}'")


def load_user_provider(config) -> UserProvider:
    """Instantiate the provider selected by the auth config."""
    if config.auth.driver == "provider" and config.auth.user_provider:
        provider_cls = import_string(config.auth.user_provider)
        if not (isinstance(provider_cls, type) and issubclass(provider_cls, UserProvider)):
            raise TypeError(f"{config.auth.user_provider} is not a UserProvider")
        logger.info(f"Using user provider: {config.auth.user_provider}")
        return provider_cls(config)
    return EnvUserProvider(config)
