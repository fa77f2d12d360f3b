import logging

from boilerplate import BoilerplateConfig, Item, MenuItem, MenuItemsRepository
from boilerplate.core.acl import grantable_roles, has_ability, has_permission, has_role, user_permissions
from boilerplate.menu import MenuBuilder, logs_menu_item, users_menu_item

ROLES = BoilerplateConfig().roles
ADMIN = {"username": "root", "roles": ["admin"]}
EDITOR = {"username": "ed", "roles": ["backend_user"], "permissions": ["users_crud"]}
VIEWER = {"username": "vi", "role": "backend_user"}


def test_acl_roles_and_permissions() -> None:
    assert has_role(ADMIN, ["admin"])
    assert has_role(VIEWER, ["backend_user"])
    assert not has_role(VIEWER, ["admin", "editor"])
    assert not has_role(EDITOR, ["admin", "backend_user"], require_all=True)
    assert has_role(None, [])

    assert user_permissions(EDITOR, ROLES) == {"users_crud", "backend_access"}
    assert has_permission(ADMIN, ["anything"], ROLES)
    assert has_permission(EDITOR, ["users_crud", "backend_access"], ROLES, require_all=True)
    assert not has_permission(VIEWER, ["users_crud"], ROLES)
    assert not has_permission(None, ["users_crud"], ROLES)


def test_acl_ability() -> None:
    assert has_ability(EDITOR, ["admin"], ["users_crud"], ROLES)
    assert not has_ability(EDITOR, ["admin"], ["users_crud"], ROLES, require_all=True)
    assert has_ability(ADMIN, ["admin"], ["users_crud"], ROLES, require_all=True)
    assert not has_ability(VIEWER, ["admin"], ["users_crud"], ROLES)


def build(registry, user):
    return MenuBuilder(registry, ROLES).build(user)


def test_builtin_items_visibility() -> None:
    config = BoilerplateConfig()
    registry = MenuItemsRepository()
    registry.register([logs_menu_item(config), users_menu_item(config)])

    assert [e["key"] for e in build(registry, ADMIN)] == ["users", "logs"]
    assert [e["key"] for e in build(registry, EDITOR)] == ["users"]
    assert build(registry, VIEWER) == []
    assert build(registry, None) == []


def test_builtin_items_follow_prefix() -> None:
    config = BoilerplateConfig(app={"prefix": "/admin"})
    users = users_menu_item(config).payload
    assert [c.url for c in users.children] == ["/admin/users", "/admin/users/create"]


def test_entries_are_translated_and_marked_active() -> None:
    registry = MenuItemsRepository()
    registry.register([users_menu_item(BoilerplateConfig())])

    builder = MenuBuilder(registry, ROLES, translate=lambda key: key.upper())
    [entry] = builder.build(ADMIN, "/users/create")

    assert entry["label"] == "MENU.USERS.TITLE"
    assert entry["active"] is True
    assert [c["label"] for c in entry["children"]] == ["MENU.USERS.LIST", "MENU.USERS.ADD"]
    assert [c["active"] for c in entry["children"]] == [True, True]


def test_dict_payloads_are_accepted() -> None:
    registry = MenuItemsRepository()
    registry.register([Item("docs", {"label": "Docs", "url": "/docs", "icon": "book"})])
    [entry] = build(registry, VIEWER)
    assert entry["url"] == "/docs"
    assert entry["icon"] == "book"


def test_malformed_items_are_skipped_and_logged(caplog) -> None:
    registry = MenuItemsRepository()
    registry.register([
        Item("no-label", {"url": "/x"}),
        Item("not-a-menu-item", 42),
        Item("ok", MenuItem(label="Fine", url="/fine")),
    ])

    with caplog.at_level(logging.WARNING):
        menu = build(registry, ADMIN)

    assert [e["key"] for e in menu] == ["ok"]
    assert "no-label" in caplog.text
    assert "not-a-menu-item" in caplog.text


def test_parent_without_visible_children_is_hidden() -> None:
    registry = MenuItemsRepository()
    registry.register([Item("tools", MenuItem(label="Tools", children=[
        MenuItem(label="Secret", url="/secret", role="admin"),
    ]))])

    assert build(registry, VIEWER) == []
    assert [e["key"] for e in build(registry, ADMIN)] == ["tools"]


def test_menu_order_is_registry_order() -> None:
    registry = MenuItemsRepository()
    registry.register([
        Item("last", MenuItem(label="Last", url="/l")),
        Item("first", MenuItem(label="First", url="/f"), order=1),
    ])
    assert [e["key"] for e in build(registry, VIEWER)] == ["first", "last"]


def test_grantable_roles() -> None:
    assert grantable_roles(ADMIN, ROLES) == ["admin", "backend_user"]
    # holds backend_access (through backend_user) but is not an admin
    assert grantable_roles(EDITOR, ROLES) == ["backend_user"]
    assert grantable_roles({"username": "x", "roles": []}, ROLES) == []
    assert grantable_roles(None, ROLES) == []
