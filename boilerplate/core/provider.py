"""
Boilerplate Provider

Wires the admin panel into a FastAPI application in two steps:

    provider = BoilerplateProvider(overrides={"app": {"prefix": "/admin"}})
    provider.register()                  # config, logging, repositories, menu
    provider.menu_items.register([...])  # host additions / overrides
    provider.boot(app)                   # middleware, templates, routes

Repositories are plain objects owned by the provider; pass
provider.menu_items / provider.navbar_items to whatever needs them.
"""
from functools import partial
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union
import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from boilerplate.config import (
    BoilerplateConfig, BoilerplateConfigError, LANG_DIR, RESOURCES_DIR, validate_config
)
from boilerplate.core.log import setup_logging
from boilerplate.core.registry import Item, MenuItemsRepository, NavbarItemsRepository
from boilerplate.menu.items import BUILTIN_ITEMS
from boilerplate.users import UserProvider, import_string, load_user_provider
from boilerplate.utils.translations import Translator, FALLBACK_LOCALE

logger = logging.getLogger(__name__)

PUBLIC_DIR = RESOURCES_DIR / "public"
CONFIG_DIR = RESOURCES_DIR / "config"
PUBLISH_TAGS = ("config", "public", "lang")


class BoilerplateProvider:
    def __init__(
        self,
        config: Optional[BoilerplateConfig] = None,
        overrides: Optional[Dict[str, Any]] = None,
        menu_items: Optional[MenuItemsRepository] = None,
        navbar_items: Optional[NavbarItemsRepository] = None,
        user_provider: Optional[UserProvider] = None,
        template_dirs: Optional[List[Union[str, Path]]] = None,
        lang_dirs: Optional[List[Union[str, Path]]] = None,
    ):
        self._base_config = config
        self._overrides = overrides
        self.menu_items = menu_items
        self.navbar_items = navbar_items
        self.users = user_provider
        self.template_dirs = [Path(d) for d in (template_dirs or [])]
        self.lang_dirs = [Path(d) for d in (lang_dirs or [])]

        self.config: Optional[BoilerplateConfig] = None
        self.translator: Optional[Translator] = None
        self.auth = None
        self.views = None
        self.guards: Dict[str, Callable] = {}
        self.registered = False
        self.booted = False

    # === Register ===

    def register(self) -> "BoilerplateProvider":
        """Merge and validate config, set up logging, fill the repositories."""
        if self.registered:
            return self

        from boilerplate.admin_panel.auth import Authenticator
        from boilerplate.admin_panel.permissions import GUARDS

        base = self._base_config or BoilerplateConfig.from_env()
        self.config = base.merged(self._overrides)

        errors = validate_config(self.config)
        if errors:
            for e in errors:
                logger.critical(f"Config error: {e}")
            raise BoilerplateConfigError(errors)

        setup_logging(self.config)

        if self.menu_items is None:
            self.menu_items = MenuItemsRepository()
        if self.navbar_items is None:
            self.navbar_items = NavbarItemsRepository()

        self.menu_items.register([factory(self.config) for factory in BUILTIN_ITEMS])
        for path in self.config.menu.providers:
            self.register_menu_items(import_string(path))

        self.translator = Translator(self.config.app.locale, self.lang_dirs)
        if self.users is None:
            self.users = load_user_provider(self.config)
        self.auth = Authenticator(self.config, self.users)
        self.guards = {alias: partial(guard, self.auth) for alias, guard in GUARDS.items()}

        self.registered = True
        logger.info(f"Boilerplate registered ({len(self.menu_items)} menu items)")
        return self

    def register_menu_items(self, source: Union[Item, Iterable[Item], Callable]) -> None:
        """Register items, or a factory called with the config that returns them"""
        items = source(self.config) if callable(source) else source
        if isinstance(items, Item):
            items = [items]
        self.menu_items.register(items)

    def middleware(self, alias: str) -> Callable:
        """
        Resolve a middleware alias.

        "boilerplatelocale" is an ASGI middleware class, "boilerplateauth" a
        ready dependency; "role", "permission" and "ability" are dependency
        factories: Depends(provider.middleware("role")("admin")).
        """
        from boilerplate.admin_panel.middleware import BoilerplateLocale, BoilerplateAuthenticate

        self.register()
        aliases = {
            "boilerplatelocale": BoilerplateLocale,
            "boilerplateauth": BoilerplateAuthenticate(self.auth),
            **self.guards,
        }
        if alias not in aliases:
            raise KeyError(f"Unknown middleware alias: {alias}")
        return aliases[alias]

    # === Boot ===

    def boot(self, app: FastAPI) -> FastAPI:
        """Attach middleware, templates and routes to the application."""
        from boilerplate.admin_panel import auth, core, middleware, views
        from boilerplate.admin_panel.routers import dashboard, logs, users

        self.register()
        if self.booted:
            return app

        prefix = self.config.app.prefix
        app.mount(f"{prefix}/assets/boilerplate", StaticFiles(directory=str(PUBLIC_DIR)),
                  name="boilerplate.assets")

        app.add_middleware(middleware.BoilerplateLocale, translator=self.translator,
                           default_locale=self.config.app.locale)
        app.middleware("http")(middleware.log_requests)
        # Session Middleware LAST so it wraps everything (including consumers of session)
        app.add_middleware(SessionMiddleware, secret_key=self.config.app.secret_key,
                           session_cookie=self.config.app.session_cookie)

        self.views = views.BoilerplateViews(self.config, self.translator, self.template_dirs)
        self.views.composer("boilerplate/layout/mainsidebar.html",
                            views.MenuComposer(self.menu_items, self.config, self.translator))
        self.views.composer("boilerplate/layout/header.html",
                            views.MenuComposer(self.navbar_items, self.config, self.translator,
                                               var="navbar_items"))
        self.views.composer("boilerplate/load/datatables.html",
                            views.DatatablesComposer(self.translator))

        cfg = core.RouterConfig(
            config=self.config,
            auth=self.auth,
            views=self.views,
            require_backend=self.auth.require_backend,
            verify_csrf_token=auth.verify_csrf_token,
            guards=self.guards,
            log_dir=Path(self.config.app.log_dir),
        )
        app.include_router(auth.setup_routes(cfg))
        app.include_router(dashboard.setup_routes(cfg))
        app.include_router(users.setup_routes(cfg))
        app.include_router(logs.setup_routes(cfg))

        app.state.boilerplate = self
        self.booted = True
        logger.info(f"Boilerplate booted at '{prefix or '/'}'")
        return app

    # === Publishing ===

    @staticmethod
    def publishables(tag: str, dest: Union[str, Path]) -> Dict[Path, Path]:
        """Source file -> destination file for `boilerplate publish --tag <tag>`"""
        dest = Path(dest)
        if tag == "config":
            return {f: dest / "config" / "boilerplate" / f.name for f in sorted(CONFIG_DIR.iterdir()) if f.is_file()}
        if tag == "public":
            return {f: dest / "assets" / "vendor" / "boilerplate" / f.relative_to(PUBLIC_DIR)
                    for f in sorted(PUBLIC_DIR.rglob("*")) if f.is_file()}
        if tag == "lang":
            # English ships with the package and is the fallback
            return {f: dest / "lang" / f.name for f in sorted(LANG_DIR.glob("*.json"))
                    if f.stem != FALLBACK_LOCALE}
        raise ValueError(f"Unknown publish tag: {tag} (expected one of {', '.join(PUBLISH_TAGS)})")
