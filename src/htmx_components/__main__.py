from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

import uvicorn

from htmx_components.app import create_app
from htmx_components.config import load_app_config
from htmx_components.home import ensure_app_layout, resolve_app_home


def main() -> None:
    home = resolve_app_home()
    paths = ensure_app_layout(home)

    config = load_app_config(paths)

    log_file = paths.logs_dir / "app.log"
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            RotatingFileHandler(
                log_file,
                maxBytes=config.logging.max_size_mb * 1024 * 1024,
                backupCount=config.logging.backup_count,
            ),
            logging.StreamHandler(),
        ],
    )

    host = os.environ.get("HTMX_COMPONENTS_BIND") or config.network.bind_host

    env_port = os.environ.get("HTMX_COMPONENTS_PORT")
    port = int(env_port) if env_port else config.network.port

    uvicorn.run(create_app(config), host=host, port=port)


if __name__ == "__main__":
    main()
