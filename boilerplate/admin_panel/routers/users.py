"""Users router: list, create (when the provider allows it), JSON listing"""
from fastapi import APIRouter, Request, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse
from typing import Dict
import logging

from boilerplate.core.acl import grantable_roles
from boilerplate.users import public_user
from boilerplate.utils import responses

logger = logging.getLogger(__name__)

USERS_PERMISSION = "users_crud"


def setup_routes(cfg) -> APIRouter:
    router = APIRouter(prefix=cfg.prefix, tags=["users"])
    provider = cfg.auth.users
    can_manage = cfg.guards["permission"](USERS_PERMISSION)

    @router.get("/users", response_class=HTMLResponse, name="boilerplate.users")
    async def users_list(request: Request, msg: str = None, user: Dict = Depends(can_manage)):
        users = await provider.list_users()
        return cfg.views.render(request, "boilerplate/users/list.html",
                                title=cfg.views.trans(request, "menu.users.list"),
                                users=users, can_create=provider.can_create, message=msg)

    @router.get("/users/create", response_class=HTMLResponse, name="boilerplate.users.create")
    async def users_create_page(request: Request, user: Dict = Depends(can_manage)):
        return cfg.views.render(request, "boilerplate/users/create.html",
                                title=cfg.views.trans(request, "menu.users.add"),
                                can_create=provider.can_create,
                                roles=grantable_roles(user, cfg.config.roles))

    @router.post("/users/create", dependencies=[Depends(cfg.verify_csrf_token)])
    async def users_create(
        request: Request,
        username: str = Form(...),
        password: str = Form(...),
        role: str = Form(""),
        user: Dict = Depends(can_manage),
    ):
        if not provider.can_create:
            return RedirectResponse(f"{cfg.prefix}/users?msg=readonly", 303)
        username = username.strip()
        if not username:
            return RedirectResponse(f"{cfg.prefix}/users?msg=invalid", 303)
        if role and role not in grantable_roles(user, cfg.config.roles):
            logger.warning(f"🚫 {user['username']} tried to grant role '{role}' to {username}")
            return RedirectResponse(f"{cfg.prefix}/users?msg=forbidden_role", 303)
        if await provider.get_user(username):
            return RedirectResponse(f"{cfg.prefix}/users?msg=exists", 303)
        roles = [role] if role else []
        await provider.create_user(username, password, roles)
        logger.info(f"{user['username']} created panel user {username}")
        return RedirectResponse(f"{cfg.prefix}/users?msg=created", 303)

    @router.get("/api/users", name="boilerplate.api.users")
    async def api_users(page: int = 1, per_page: int = 25, user: Dict = Depends(can_manage)):
        return responses.paginated(await provider.list_users(), page, per_page)

    @router.get("/api/users/{username}", name="boilerplate.api.user")
    async def api_user(username: str, user: Dict = Depends(can_manage)):
        found = await provider.get_user(username)
        if not found:
            return responses.not_found(f"User '{username}' not found")
        return responses.success(public_user(found))

    return router
