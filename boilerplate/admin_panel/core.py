"""
Admin Panel Core - Shared router configuration
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Dict, Any

from boilerplate.config import BoilerplateConfig


@dataclass
class RouterConfig:
    """Configuration object for router setup - avoids passing many arguments"""
    config: BoilerplateConfig
    auth: Any
    views: Any
    require_backend: Callable
    verify_csrf_token: Callable
    guards: Dict[str, Callable]
    log_dir: Optional[Path] = None

    @property
    def prefix(self) -> str:
        return self.config.app.prefix
