"""
Boilerplate Configuration

Typed settings for the admin panel. Values come from the environment
(.env is loaded once), host applications can override any section.
"""
import os
import logging
from dotenv import load_dotenv
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
import pytz
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
RESOURCES_DIR = PACKAGE_DIR / "resources"
LANG_DIR = RESOURCES_DIR / "lang"


class BoilerplateConfigError(ValueError):
    """Raised when the configuration does not pass validation"""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("Invalid boilerplate configuration: " + "; ".join(errors))


# === Sections ===

class AppConfig(BaseModel):
    name: str = "Boilerplate"
    # URL prefix of the panel, "" mounts it at the root
    prefix: str = ""
    locale: str = "en"
    secret_key: str = ""
    session_cookie: str = "boilerplate_session"
    log_dir: str = "storage/logs"
    log_level: str = "INFO"
    log_days: int = 14
    timezone: str = "UTC"
    token_expire_hours: int = 24


class AuthConfig(BaseModel):
    driver: str = "env"
    admin_user: str = "admin"
    admin_password: str = ""
    # Dotted path "package.module:ClassName" of a UserProvider
    user_provider: Optional[str] = None


class RolesConfig(BaseModel):
    admin_role: str = "admin"
    backend_permission: str = "backend_access"
    # role -> permissions, "*" grants everything
    roles: Dict[str, List[str]] = Field(default_factory=lambda: {
        "admin": ["*"],
        "backend_user": ["backend_access"],
    })


class MenuConfig(BaseModel):
    dashboard: str = "boilerplate.dashboard"
    # Dotted paths "package.module:factory" returning items to register
    providers: List[str] = Field(default_factory=list)


class ThemeConfig(BaseModel):
    navbar: str = "light"
    sidebar: str = "dark"
    accent: str = "primary"
    card: Dict[str, str] = Field(default_factory=lambda: {"color": "info", "outline": "true"})


class BoilerplateConfig(BaseModel):
    app: AppConfig = Field(default_factory=AppConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    roles: RolesConfig = Field(default_factory=RolesConfig)
    menu: MenuConfig = Field(default_factory=MenuConfig)
    theme: ThemeConfig = Field(default_factory=ThemeConfig)

    @classmethod
    def from_env(cls) -> "BoilerplateConfig":
        """Build configuration from environment variables (.env supported)"""
        load_dotenv()
        providers = os.getenv("BOILERPLATE_MENU_PROVIDERS", "")
        return cls(
            app=AppConfig(
                name=os.getenv("BOILERPLATE_NAME", "Boilerplate"),
                prefix=os.getenv("BOILERPLATE_PREFIX", ""),
                locale=os.getenv("BOILERPLATE_LOCALE", "en"),
                secret_key=os.getenv("BOILERPLATE_SECRET_KEY", ""),
                log_dir=os.getenv("BOILERPLATE_LOG_DIR", "storage/logs"),
                log_level=os.getenv("LOG_LEVEL", "INFO"),
                log_days=int(os.getenv("BOILERPLATE_LOG_DAYS", "14")),
                timezone=os.getenv("TIMEZONE", "UTC"),
                token_expire_hours=int(os.getenv("BOILERPLATE_TOKEN_EXPIRE_HOURS", "24")),
            ),
            auth=AuthConfig(
                driver=os.getenv("BOILERPLATE_AUTH_DRIVER", "env"),
                admin_user=os.getenv("ADMIN_PANEL_USER", "admin"),
                admin_password=os.getenv("ADMIN_PANEL_PASSWORD", ""),
                user_provider=os.getenv("BOILERPLATE_USER_PROVIDER") or None,
            ),
            menu=MenuConfig(
                providers=[p.strip() for p in providers.split(",") if p.strip()],
            ),
        )

    def merged(self, overrides: Optional[Dict[str, Any]] = None) -> "BoilerplateConfig":
        """
        Return a copy where host values win over package defaults.

        Sections are merged key by key, so a host only has to set
        what differs:
            config.merged({"app": {"prefix": "/admin"}})
        """
        if not overrides:
            return self.model_copy(deep=True)
        data = self.model_dump()
        for section, values in overrides.items():
            if isinstance(values, BaseModel):
                values = values.model_dump(exclude_unset=True)
            if isinstance(values, dict) and isinstance(data.get(section), dict):
                data[section].update(values)
            else:
                data[section] = values
        return BoilerplateConfig(**data)

    @property
    def tz(self):
        return pytz.timezone(self.app.timezone)

    def now(self) -> datetime:
        """Current time in configured timezone."""
        return datetime.now(self.tz)


def available_locales() -> List[str]:
    """Locales shipped in resources/lang"""
    if not LANG_DIR.exists():
        return []
    return sorted(p.stem for p in LANG_DIR.glob("*.json"))


def validate_config(config: BoilerplateConfig) -> List[str]:
    """Validate critical settings on startup. Returns list of errors."""
    errors = []

    if not config.app.secret_key:
        errors.append("BOILERPLATE_SECRET_KEY must be set")
    if config.auth.driver == "env" and not config.auth.admin_password:
        errors.append("ADMIN_PANEL_PASSWORD must be set when using the env auth driver")
    if config.auth.driver not in ("env", "provider"):
        errors.append(f"Unknown auth driver: {config.auth.driver}")
    if config.auth.driver == "provider" and not config.auth.user_provider:
        errors.append("BOILERPLATE_USER_PROVIDER must be set when using the provider auth driver")
    if config.app.locale not in available_locales():
        errors.append(f"Unknown locale: {config.app.locale}")
    if config.app.timezone not in pytz.all_timezones_set:
        errors.append(f"Unknown timezone: {config.app.timezone}")
    if config.app.prefix and (not config.app.prefix.startswith("/") or config.app.prefix.endswith("/")):
        errors.append("App prefix must start with '/' and must not end with '/'")

    # Warnings (non-blocking)
    if config.roles.admin_role not in config.roles.roles:
        logger.warning(f"⚠️  Admin role '{config.roles.admin_role}' has no permissions configured")

    return errors
