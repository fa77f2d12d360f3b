"""
JSON responses of the panel API

    {"success": true, "data": ..., "message": null}
    {"success": false, "message": "...", "errors": [...]}

Listings add a "meta" block (page, per_page, total) for table widgets.
"""
from typing import Any, Dict, List, Optional, Sequence
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class APIResponse(BaseModel):
    success: bool
    data: Optional[Any] = None
    message: Optional[str] = None
    errors: Optional[List[str]] = None
    meta: Optional[Dict[str, int]] = None


def _send(body: APIResponse, status_code: int) -> JSONResponse:
    return JSONResponse(content=body.model_dump(exclude_none=True), status_code=status_code)


def success(data: Any = None, message: str = None, status_code: int = 200) -> JSONResponse:
    return _send(APIResponse(success=True, data=data, message=message), status_code)


def paginated(items: Sequence[Any], page: int = 1, per_page: int = 25) -> JSONResponse:
    """One page of a listing; page numbers start at 1"""
    page = max(page, 1)
    per_page = max(per_page, 1)
    start = (page - 1) * per_page
    return _send(APIResponse(
        success=True,
        data=list(items[start:start + per_page]),
        meta={"page": page, "per_page": per_page, "total": len(items)},
    ), 200)


def error(message: str, errors: List[str] = None, status_code: int = 400) -> JSONResponse:
    return _send(APIResponse(success=False, message=message, errors=errors or []), status_code)


def not_found(message: str = "Not found") -> JSONResponse:
    return error(message, status_code=404)
