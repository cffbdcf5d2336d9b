from htmx_components.config import AppConfig, load_app_config
from htmx_components.errors import (
    HtmxComponentsError,
    InitializationFailed,
    MisconfigurationError,
    RenderError,
    RouteNotFound,
)
from htmx_components.home import AppPaths, ensure_app_layout, resolve_app_home

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "AppPaths",
    "HtmxComponentsError",
    "InitializationFailed",
    "MisconfigurationError",
    "RenderError",
    "RouteNotFound",
    "__version__",
    "ensure_app_layout",
    "load_app_config",
    "resolve_app_home",
]
