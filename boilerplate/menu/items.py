"""Menu item payloads and the built-in entries"""
from typing import List, Optional
from pydantic import BaseModel, Field

from boilerplate.core.acl import has_permission, has_role
from boilerplate.core.registry import Item


class MenuItem(BaseModel):
    """
    Payload of a sidebar entry.

    label is a translation key (falls back to the literal text).
    permission / role restrict visibility; children share the same format.
    """
    label: str
    url: Optional[str] = None
    route: Optional[str] = None
    icon: str = "circle"
    permission: Optional[str] = None
    role: Optional[str] = None
    # Path prefix marking the entry as active, defaults to url
    active: Optional[str] = None
    children: List["MenuItem"] = Field(default_factory=list)

    def is_visible(self, user, roles_config) -> bool:
        if self.role and not has_role(user, [self.role]):
            return False
        if self.permission and not has_permission(user, [self.permission], roles_config):
            return False
        return True


def users_menu_item(config) -> Item:
    prefix = config.app.prefix
    return Item("users", MenuItem(
        label="menu.users.title",
        icon="users",
        permission="users_crud",
        active=f"{prefix}/users",
        children=[
            MenuItem(label="menu.users.list", url=f"{prefix}/users", icon="list"),
            MenuItem(label="menu.users.add", url=f"{prefix}/users/create", icon="user-plus"),
        ],
    ), order=100)


def logs_menu_item(config) -> Item:
    prefix = config.app.prefix
    return Item("logs", MenuItem(
        label="menu.logs.title",
        icon="list-alt",
        role=config.roles.admin_role,
        active=f"{prefix}/logs",
        children=[
            MenuItem(label="menu.logs.stats", url=f"{prefix}/logs", icon="chart-bar"),
            MenuItem(label="menu.logs.list", url=f"{prefix}/logs/files", icon="file-alt"),
        ],
    ), order=1000)


BUILTIN_ITEMS = [users_menu_item, logs_menu_item]
