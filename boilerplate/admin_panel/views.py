"""
Views - Jinja2 templates with view composers

A composer adds variables to the context whenever a matching template
is rendered, directly or through extends/include/import. The sidebar
menu is built this way, so pages never have to pass it themselves.
"""
from fnmatch import fnmatch
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set, Tuple
import logging

from fastapi import Request
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateNotFound, meta
from markupsafe import Markup

from boilerplate.config import RESOURCES_DIR
from boilerplate.menu.builder import MenuBuilder
from .auth import get_csrf_token

logger = logging.getLogger(__name__)

TEMPLATES_DIR = RESOURCES_DIR / "views"


class MenuComposer:
    """Sidebar menu for the current user"""

    def __init__(self, registry, config, translator, var: str = "menu"):
        self.registry = registry
        self.config = config
        self.translator = translator
        self.var = var

    def compose(self, request: Request, context: Dict[str, Any]) -> None:
        locale = context.get("locale")
        builder = MenuBuilder(self.registry, self.config.roles,
                              lambda key: self.translator.trans(key, locale))
        context[self.var] = builder.build(context.get("current_user"), request.url.path)


class DatatablesComposer:
    """Datatables language strings for the current locale"""

    def __init__(self, translator):
        self.translator = translator

    def compose(self, request: Request, context: Dict[str, Any]) -> None:
        locale = context.get("locale")
        context["datatables_locale"] = {
            "search": self.translator.trans("datatables.search", locale),
            "emptyTable": self.translator.trans("datatables.empty", locale),
            "info": self.translator.trans("datatables.info", locale),
        }


class BoilerplateViews:
    """
    Template rendering for the panel.

    Host template directories come first, so any boilerplate template
    can be overridden by a file with the same name.
    """

    def __init__(self, config, translator, directories: Optional[List[Path]] = None):
        self.config = config
        self.translator = translator
        dirs = [str(d) for d in (directories or [])] + [str(TEMPLATES_DIR)]
        self.templates = Jinja2Templates(directory=dirs)
        self.env = self.templates.env
        self._composers: List[Tuple[str, Any]] = []
        self._references: Dict[str, Set[str]] = {}

        self.env.globals["card"] = self.card
        self.env.globals["app_config"] = config.app
        self.env.globals["theme"] = config.theme

    # === Composers ===

    def composer(self, pattern: str, composer) -> None:
        """Attach a composer (object with compose() or a callable) to a template pattern"""
        self._composers.append((pattern, composer))

    def _referenced(self, name: str) -> Set[str]:
        """Template name plus everything it extends/includes/imports, recursively"""
        if name in self._references:
            return self._references[name]

        found = {name}
        pending = [name]
        while pending:
            current = pending.pop()
            try:
                source, _, _ = self.env.loader.get_source(self.env, current)
            except TemplateNotFound:
                continue
            for ref in meta.find_referenced_templates(self.env.parse(source)):
                # Dynamic references come back as None
                if ref and ref not in found:
                    found.add(ref)
                    pending.append(ref)

        self._references[name] = found
        return found

    def _compose(self, request: Request, name: str, context: Dict[str, Any]) -> None:
        names = self._referenced(name)
        for pattern, composer in self._composers:
            if not any(fnmatch(n, pattern) for n in names):
                continue
            compose: Callable = getattr(composer, "compose", composer)
            compose(request, context)

    # === Rendering ===

    def trans(self, request: Request, key: str, **kwargs) -> str:
        return self.translator.trans(key, getattr(request.state, "locale", None), **kwargs)

    def context(self, request: Request, **kwargs) -> Dict[str, Any]:
        """Helper to add common context variables"""
        locale = getattr(request.state, "locale", self.config.app.locale)
        context = {
            "request": request,
            "csrf_token": get_csrf_token(request) if "session" in request.scope else "",
            "current_user": getattr(request.state, "user", None),
            "locale": locale,
            "prefix": self.config.app.prefix,
            "trans": lambda key, **kw: self.translator.trans(key, locale, **kw),
        }
        context.update(kwargs)
        return context

    def render(self, request: Request, name: str, status_code: int = 200, **kwargs):
        context = self.context(request, **kwargs)
        self._compose(request, name, context)
        return self.templates.TemplateResponse(request, name, context, status_code=status_code)

    def card(self, title: str = "", body: str = "", color: Optional[str] = None,
             outline: Optional[bool] = None, footer: str = "") -> Markup:
        """Card component, usable in templates as {{ card(title, body) }}"""
        defaults = self.config.theme.card
        html = self.env.get_template("boilerplate/components/card.html").render(
            title=title,
            body=body,
            footer=footer,
            color=color or defaults.get("color", "info"),
            outline=outline if outline is not None else defaults.get("outline", "true") == "true",
        )
        return Markup(html)
