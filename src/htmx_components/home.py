from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

HOME_ENV = "HTMX_COMPONENTS_HOME"


@dataclass(frozen=True)
class AppPaths:
    home: Path
    config_dir: Path
    logs_dir: Path

    @property
    def app_config_path(self) -> Path:
        return self.config_dir / "app.json"


def resolve_app_home(environ: dict[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ

    raw = (env.get(HOME_ENV) or "").strip()
    if raw:
        candidate = Path(raw).expanduser()
        # A relative value names a directory under the user home, so the app finds its
        # config and logs no matter where uvicorn was started.
        if not candidate.is_absolute():
            candidate = (Path.home() / candidate).resolve()
        else:
            candidate = candidate.resolve()
        return candidate

    def default_home() -> Path:
        if sys.platform.startswith("win"):
            base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
            if base:
                return Path(base) / "HtmxComponents"
            return Path.home() / "AppData" / "Local" / "HtmxComponents"

        if sys.platform == "darwin":
            return Path.home() / "Library" / "Application Support" / "HtmxComponents"

        xdg = os.environ.get("XDG_DATA_HOME")
        if xdg:
            return Path(xdg) / "htmx-components"
        return Path.home() / ".local" / "share" / "htmx-components"

    return default_home().resolve()


def ensure_app_layout(home: Path) -> AppPaths:
    home.mkdir(parents=True, exist_ok=True)

    config_dir = home / "config"
    logs_dir = home / "logs"

    for path in (config_dir, logs_dir):
        path.mkdir(parents=True, exist_ok=True)

    return AppPaths(home=home, config_dir=config_dir, logs_dir=logs_dir)
