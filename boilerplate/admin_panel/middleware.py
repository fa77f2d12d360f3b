"""
Panel middleware

- BoilerplateLocale: picks the request locale (query > session > Accept-Language > config)
- BoilerplateAuthenticate: dependency guarding every panel page
- log_requests: request timing, slow request warnings
"""
from typing import Callable, List
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

SLOW_REQUEST_THRESHOLD = 3.0
LOCALE_SESSION_KEY = "locale"


def parse_accept_language(header: str) -> List[str]:
    """Language codes from an Accept-Language header, best first"""
    weighted = []
    for index, part in enumerate(header.split(",")):
        part = part.strip()
        if not part:
            continue
        lang, _, params = part.partition(";")
        quality = 1.0
        if params.strip().startswith("q="):
            try:
                quality = float(params.strip()[2:])
            except ValueError:
                quality = 0.0
        weighted.append((-quality, index, lang.strip().lower()))
    return [lang for _, _, lang in sorted(weighted)]


class BoilerplateLocale(BaseHTTPMiddleware):
    """Sets request.state.locale to one of the available catalogs"""

    def __init__(self, app, translator, default_locale: str = "en"):
        super().__init__(app)
        self.translator = translator
        self.default_locale = default_locale

    def resolve(self, request: Request) -> str:
        available = set(self.translator.locales())

        requested = request.query_params.get("lang")
        if requested in available:
            if "session" in request.scope:
                request.session[LOCALE_SESSION_KEY] = requested
            return requested

        if "session" in request.scope:
            stored = request.session.get(LOCALE_SESSION_KEY)
            if stored in available:
                return stored

        for lang in parse_accept_language(request.headers.get("accept-language", "")):
            if lang in available:
                return lang
            short = lang.split("-")[0]
            if short in available:
                return short

        return self.default_locale

    async def dispatch(self, request: Request, call_next):
        request.state.locale = self.resolve(request)
        return await call_next(request)


def BoilerplateAuthenticate(auth) -> Callable:
    """Dependency requiring a logged-in user with backend access"""
    return auth.require_backend


async def log_requests(request: Request, call_next):
    """Log request and its duration"""
    start_time = time.time()
    logger.info(f"➡️  {request.method} {request.url.path}")

    try:
        response = await call_next(request)
    except Exception as e:
        duration = time.time() - start_time
        logger.error(f"❌ Request failed: {request.method} {request.url.path} - {duration:.2f}s - {e}")
        raise

    duration = time.time() - start_time
    if duration > SLOW_REQUEST_THRESHOLD:
        logger.warning(f"🐢 Slow request: {request.url.path} {duration:.2f}s")

    return response
