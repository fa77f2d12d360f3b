"""Authentication: login, logout, token management"""
from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict
import logging
import secrets

from boilerplate.core.acl import has_permission

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_COOKIE = "access_token"


class Authenticator:
    """Issues and checks the panel's JWT cookie against a UserProvider"""

    def __init__(self, config, users):
        self.config = config
        self.users = users

    @property
    def login_url(self) -> str:
        return f"{self.config.app.prefix}/login"

    def create_token(self, user: Dict) -> str:
        """Create JWT token for user"""
        expire = datetime.now(timezone.utc) + timedelta(hours=self.config.app.token_expire_hours)
        return jwt.encode({
            "sub": user["username"],
            "roles": list(user.get("roles") or []),
            "permissions": list(user.get("permissions") or []),
            "exp": expire,
        }, self.config.app.secret_key, algorithm=ALGORITHM)

    def verify_token(self, token: str) -> Optional[Dict]:
        """Verify JWT token and return user data"""
        try:
            payload = jwt.decode(token, self.config.app.secret_key, algorithms=[ALGORITHM])
        except JWTError:
            return None
        if not payload.get("sub"):
            return None
        return {
            "username": payload["sub"],
            "roles": payload.get("roles", []),
            "permissions": payload.get("permissions", []),
        }

    async def get_optional_user(self, request: Request) -> Optional[Dict]:
        token = request.cookies.get(TOKEN_COOKIE)
        if not token:
            return None
        return self.verify_token(token)

    async def get_current_user(self, request: Request) -> Dict:
        """Dependency: Returns dict with 'username', 'roles' and 'permissions' keys"""
        user = await self.get_optional_user(request)
        if not user:
            raise HTTPException(status_code=status.HTTP_303_SEE_OTHER, headers={"Location": self.login_url})
        request.state.user = user
        return user

    async def require_backend(self, request: Request) -> Dict:
        """Dependency: authenticated user allowed into the panel at all"""
        user = await self.get_current_user(request)
        if not has_permission(user, [self.config.roles.backend_permission], self.config.roles):
            logger.warning(f"Backend access denied for {user['username']}")
            raise HTTPException(status_code=403, detail="Backend access denied")
        return user


def get_csrf_token(request: Request) -> str:
    """Get or create CSRF token"""
    token = request.session.get("csrf_token")
    if not token:
        token = secrets.token_hex(32)
        request.session["csrf_token"] = token
    return token


async def verify_csrf_token(request: Request):
    """Verify CSRF token from form or header"""
    token = request.session.get("csrf_token")
    if not token:
        raise HTTPException(status_code=403, detail="CSRF token missing in session")

    header_token = request.headers.get("X-CSRF-Token")
    if header_token and header_token == token:
        return

    form = await request.form()
    submitted_token = form.get("csrf_token") or header_token
    if not submitted_token or submitted_token != token:
        raise HTTPException(status_code=403, detail="CSRF token invalid")


def setup_routes(cfg) -> APIRouter:
    """Setup login/logout routes"""
    router = APIRouter(prefix=cfg.prefix, tags=["auth"])
    auth = cfg.auth
    views = cfg.views

    @router.get("/login", response_class=HTMLResponse, name="boilerplate.login")
    async def login_page(request: Request):
        return views.render(request, "boilerplate/auth/login.html")

    @router.post("/login", name="boilerplate.login.post")
    async def login(request: Request):
        form = await request.form()
        username = form.get("username") or ""
        password = form.get("password") or ""

        user = await auth.users.authenticate(username, password)
        if user:
            logger.info(f"🔑 Login: {username}")
            token = auth.create_token(user)
            home = request.app.url_path_for(cfg.config.menu.dashboard)
            response = RedirectResponse(url=str(home), status_code=status.HTTP_303_SEE_OTHER)
            response.set_cookie(TOKEN_COOKIE, token, httponly=True,
                                max_age=cfg.config.app.token_expire_hours * 3600)
            return response

        logger.warning(f"Failed login attempt for '{username}'")
        return views.render(request, "boilerplate/auth/login.html",
                            error=views.trans(request, "auth.failed"), username=username,
                            status_code=status.HTTP_401_UNAUTHORIZED)

    @router.get("/logout", name="boilerplate.logout")
    async def logout():
        response = RedirectResponse(url=auth.login_url, status_code=status.HTTP_303_SEE_OTHER)
        response.delete_cookie(TOKEN_COOKIE)
        return response

    return router
