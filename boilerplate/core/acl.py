"""
Role / permission checks on user dicts.

A user is a dict with 'username' and either 'roles' (list) or 'role' (str),
plus optional direct 'permissions'. Roles map to permissions via RolesConfig.
"""
from typing import Dict, Iterable, List, Optional, Set

WILDCARD = "*"


def user_roles(user: Optional[Dict]) -> Set[str]:
    if not user:
        return set()
    roles = set(user.get("roles") or [])
    if user.get("role"):
        roles.add(user["role"])
    return roles


def user_permissions(user: Optional[Dict], roles_config) -> Set[str]:
    """Direct permissions plus everything granted by the user's roles"""
    if not user:
        return set()
    perms = set(user.get("permissions") or [])
    for role in user_roles(user):
        perms.update(roles_config.roles.get(role, []))
    return perms


def has_role(user: Optional[Dict], roles: Iterable[str], require_all: bool = False) -> bool:
    owned = user_roles(user)
    wanted = list(roles)
    if not wanted:
        return True
    if require_all:
        return all(r in owned for r in wanted)
    return any(r in owned for r in wanted)


def has_permission(user: Optional[Dict], permissions: Iterable[str], roles_config,
                   require_all: bool = False) -> bool:
    owned = user_permissions(user, roles_config)
    wanted = list(permissions)
    if not wanted:
        return True
    if WILDCARD in owned:
        return True
    if require_all:
        return all(p in owned for p in wanted)
    return any(p in owned for p in wanted)


def has_ability(user: Optional[Dict], roles: Iterable[str], permissions: Iterable[str],
                roles_config, require_all: bool = False) -> bool:
    """Roles and permissions together: any of them, or all of them with require_all"""
    roles, permissions = list(roles), list(permissions)
    if require_all:
        return has_role(user, roles, True) and has_permission(user, permissions, roles_config, True)
    role_ok = bool(roles) and has_role(user, roles)
    perm_ok = bool(permissions) and has_permission(user, permissions, roles_config)
    return role_ok or perm_ok or (not roles and not permissions)


def grantable_roles(user: Optional[Dict], roles_config) -> List[str]:
    """
    Roles this user may hand out to someone else.

    Only configured roles qualify. The admin role needs the user to be an
    admin, any other role needs every permission it grants.
    """
    granted = []
    for role, permissions in sorted(roles_config.roles.items()):
        if role == roles_config.admin_role and not has_role(user, [role]):
            continue
        if not has_permission(user, permissions, roles_config, require_all=True):
            continue
        granted.append(role)
    return granted
