from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from htmx_components.home import AppPaths

DEVELOPMENT = "Development"
PRODUCTION = "Production"


class NetworkConfig(BaseModel):
    bind_host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)


class LoggingConfig(BaseModel):
    max_size_mb: int = Field(
        default=10, ge=1, description="Max size of a log file in MB before rolling."
    )
    backup_count: int = Field(default=5, ge=1, description="Number of log archives to keep.")


class AntiforgeryConfig(BaseModel):
    """Request-forgery protection for fragment endpoints.

    Disabling this removes the middleware entirely; fragments that still require
    validation then fail with a misconfiguration error when invoked.
    """

    enabled: bool = Field(default=True)
    cookie_name: str = Field(default="hc_antiforgery", min_length=1)
    header_name: str = Field(default="X-CSRF-Token", min_length=1)


class HttpsConfig(BaseModel):
    redirect: bool = Field(default=False, description="Redirect plain HTTP requests to HTTPS.")
    hsts_max_age_days: int = Field(
        default=30,
        ge=0,
        description="Strict-Transport-Security max-age; only sent outside Development.",
    )


class LayoutConfig(BaseModel):
    title: str = Field(default="HtmxRazorComponents")
    htmx_src: str = Field(default="https://unpkg.com/htmx.org@2.0.4")


class AppConfig(BaseModel):
    version: str = Field(default="1")
    environment: Literal["Development", "Production"] = Field(default=PRODUCTION)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    antiforgery: AntiforgeryConfig = Field(default_factory=AntiforgeryConfig)
    https: HttpsConfig = Field(default_factory=HttpsConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)

    @property
    def is_development(self) -> bool:
        return self.environment == DEVELOPMENT


def _read_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_app_config(paths: AppPaths) -> AppConfig:
    """Load config from ${HTMX_COMPONENTS_HOME}/config/app.json.

    - If missing: returns defaults.
    - Validation is performed by Pydantic.
    """

    config_path = paths.app_config_path
    if not config_path.exists():
        return AppConfig()

    raw = _read_json(config_path)
    return AppConfig.model_validate(raw)
