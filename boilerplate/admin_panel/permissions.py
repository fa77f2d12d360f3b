"""
Role / permission guards

FastAPI dependency factories, used the same way on any route:

    @router.get("/reports", dependencies=[Depends(require_role(auth, "admin"))])
    @router.get("/users")
    async def users(user: Dict = Depends(require_permission(auth, "users_crud"))): ...
"""
from typing import Callable, Dict, Iterable
import logging

from fastapi import Depends, HTTPException

from boilerplate.core.acl import has_ability, has_permission, has_role

logger = logging.getLogger(__name__)


def _deny(user: Dict, what: str):
    logger.warning(f"🚫 Access denied for {user.get('username')}: {what}")
    raise HTTPException(status_code=403, detail="Access denied")


def require_role(auth, *roles: str, require_all: bool = False) -> Callable:
    """Dependency: user must have one of the roles (all of them with require_all)"""
    async def dependency(user: Dict = Depends(auth.get_current_user)) -> Dict:
        if not has_role(user, roles, require_all):
            _deny(user, f"role {'&' if require_all else '|'} {', '.join(roles)}")
        return user
    return dependency


def require_permission(auth, *permissions: str, require_all: bool = False) -> Callable:
    """Dependency: user must hold one of the permissions (all of them with require_all)"""
    async def dependency(user: Dict = Depends(auth.get_current_user)) -> Dict:
        if not has_permission(user, permissions, auth.config.roles, require_all):
            _deny(user, f"permission {'&' if require_all else '|'} {', '.join(permissions)}")
        return user
    return dependency


def require_ability(auth, roles: Iterable[str] = (), permissions: Iterable[str] = (),
                    require_all: bool = False) -> Callable:
    """Dependency: roles and permissions combined"""
    roles, permissions = tuple(roles), tuple(permissions)

    async def dependency(user: Dict = Depends(auth.get_current_user)) -> Dict:
        if not has_ability(user, roles, permissions, auth.config.roles, require_all):
            _deny(user, f"ability roles={list(roles)} permissions={list(permissions)}")
        return user
    return dependency


GUARDS = {
    "role": require_role,
    "permission": require_permission,
    "ability": require_ability,
}
