from __future__ import annotations

import logging
from collections.abc import Iterable
from contextlib import asynccontextmanager
from html import escape
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.responses import Response
from starlette.staticfiles import StaticFiles

from htmx_components import __version__
from htmx_components.components import COMPONENTS
from htmx_components.config import AppConfig, load_app_config
from htmx_components.dispatch import add_component_rendering, is_htmx_request, map_components
from htmx_components.errors import MisconfigurationError, RenderError, RouteNotFound
from htmx_components.fragments import ComponentRegistration
from htmx_components.home import ensure_app_layout, resolve_app_home
from htmx_components.layout import build_layout
from htmx_components.pages import ERROR_PAGE, PAGES, STATIC_DIR, PageRoute, render_page

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."


def create_app(
    config: AppConfig | None = None,
    *,
    pages: Iterable[PageRoute] = PAGES,
    components: Iterable[ComponentRegistration] = COMPONENTS,
) -> FastAPI:
    home = resolve_app_home()
    paths = ensure_app_layout(home)
    if config is None:
        config = load_app_config(paths)
    layout = build_layout(config)

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        # Configure Logging
        root = logging.getLogger()
        root.setLevel(logging.INFO)
        file_handler: RotatingFileHandler | None = None
        # Avoid adding duplicate handlers if reloaded or started by __main__
        if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
            file_handler = RotatingFileHandler(
                paths.logs_dir / "app.log",
                maxBytes=config.logging.max_size_mb * 1024 * 1024,
                backupCount=config.logging.backup_count,
                encoding="utf-8",
            )
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

        logger.info(f"htmx-components starting up ({config.environment})")
        logger.info(f"Logs directory: {paths.logs_dir}")
        try:
            yield
        finally:
            logger.info("htmx-components shutting down")
            if file_handler is not None:
                root.removeHandler(file_handler)
                file_handler.close()

    app = FastAPI(
        title="htmx-components",
        version=__version__,
        lifespan=_lifespan,
        openapi_url=None,
    )
    app.state.app_home = home
    app.state.app_paths = paths
    app.state.app_config = config

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response

    if not config.is_development and config.https.hsts_max_age_days > 0:
        hsts_value = f"max-age={config.https.hsts_max_age_days * 24 * 60 * 60}"

        @app.middleware("http")
        async def strict_transport_security(request: Request, call_next):
            response = await call_next(request)
            if request.url.scheme == "https":
                response.headers.setdefault("Strict-Transport-Security", hsts_value)
            return response

    if config.https.redirect:
        app.add_middleware(HTTPSRedirectMiddleware)

    add_component_rendering(app, layout, antiforgery=config.antiforgery)

    def _error_response(request: Request, status_code: int, message: str) -> Response:
        if is_htmx_request(request):
            return HTMLResponse(
                f'<p class="error">{escape(message)}</p>', status_code=status_code
            )
        return render_page(
            request,
            ERROR_PAGE,
            layout,
            status_code=status_code,
            extra={"status_code": status_code, "message": message},
        )

    @app.exception_handler(RouteNotFound)
    async def _route_not_found_handler(request: Request, exc: RouteNotFound) -> Response:
        return _error_response(request, 404, "Not found")

    @app.exception_handler(RenderError)
    async def _render_error_handler(request: Request, exc: RenderError) -> Response:
        message = str(exc) if config.is_development else GENERIC_ERROR_MESSAGE
        return _error_response(request, 500, message)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        return _error_response(request, exc.status_code, message)

    @app.exception_handler(Exception)
    async def _unhandled_error_handler(request: Request, exc: Exception) -> Response:
        # Starlette re-raises after this response, so the server still logs the traceback.
        if isinstance(exc, MisconfigurationError):
            logger.critical("Misconfiguration while serving %s: %s", request.url.path, exc)
        message = str(exc) if config.is_development else GENERIC_ERROR_MESSAGE
        return _error_response(request, 500, message)

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    if STATIC_DIR.is_dir():
        app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    else:
        logger.warning(
            "Static directory is missing (%s); /static will not be served",
            STATIC_DIR,
        )

    # Catch-all dispatch route; must be mapped after every other route.
    map_components(app, pages=pages, components=components)

    return app
