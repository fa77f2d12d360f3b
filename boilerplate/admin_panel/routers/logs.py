"""Logs router: daily log statistics, file list, entries filtered by level"""
from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import HTMLResponse
from pathlib import Path
from typing import Dict
import logging

from boilerplate.utils import logs as log_reader

logger = logging.getLogger(__name__)


def setup_routes(cfg) -> APIRouter:
    router = APIRouter(prefix=f"{cfg.prefix}/logs", tags=["logs"])
    log_dir = Path(cfg.log_dir or cfg.config.app.log_dir)
    admin_only = cfg.guards["role"](cfg.config.roles.admin_role)

    @router.get("", response_class=HTMLResponse, name="boilerplate.logs")
    async def logs_stats(request: Request, user: Dict = Depends(admin_only)):
        files = log_reader.list_log_files(log_dir, cfg.config.tz)
        stats = []
        totals = {lvl: 0 for lvl in log_reader.LEVELS}
        for day, path in files.items():
            counts = await log_reader.level_counts(path)
            for lvl, n in counts.items():
                totals[lvl] += n
            stats.append({"date": day, "counts": counts})
        return cfg.views.render(request, "boilerplate/logs/stats.html",
                                title=cfg.views.trans(request, "menu.logs.stats"),
                                stats=stats, totals=totals, levels=log_reader.LEVELS)

    @router.get("/files", response_class=HTMLResponse, name="boilerplate.logs.files")
    async def logs_files(request: Request, user: Dict = Depends(admin_only)):
        files = [
            {"date": day, "name": path.name, "size_kb": round(path.stat().st_size / 1024, 1)}
            for day, path in log_reader.list_log_files(log_dir, cfg.config.tz).items()
        ]
        return cfg.views.render(request, "boilerplate/logs/files.html",
                                title=cfg.views.trans(request, "menu.logs.list"), files=files)

    @router.get("/files/{day}", response_class=HTMLResponse, name="boilerplate.logs.filter")
    async def logs_show(request: Request, day: str, level: str = None, user: Dict = Depends(admin_only)):
        if not log_reader.is_valid_day(day):
            raise HTTPException(404, "Log file not found")
        path = log_reader.list_log_files(log_dir, cfg.config.tz).get(day)
        if not path:
            raise HTTPException(404, "Log file not found")
        if level and level.upper() not in log_reader.LEVELS:
            raise HTTPException(400, f"Unknown level: {level}")

        entries = await log_reader.read_entries(path, level)
        return cfg.views.render(request, "boilerplate/logs/show.html",
                                title=day, day=day, entries=entries,
                                levels=log_reader.LEVELS, active_level=level.upper() if level else None)

    return router
