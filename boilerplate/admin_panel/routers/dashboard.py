"""Dashboard router: panel home page"""
from fastapi import APIRouter, Request, Depends
from fastapi.responses import HTMLResponse
from typing import Dict


def setup_routes(cfg) -> APIRouter:
    router = APIRouter(prefix=cfg.prefix, tags=["dashboard"])

    @router.get("/", response_class=HTMLResponse, name="boilerplate.dashboard")
    async def dashboard(request: Request, user: Dict = Depends(cfg.require_backend)):
        return cfg.views.render(request, "boilerplate/dashboard.html",
                                title=cfg.views.trans(request, "app.dashboard"))

    return router
