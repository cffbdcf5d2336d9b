"""Per-request choice between a full page and a fragment.

The page table is consulted first; only when it has no entry does the fragment
table get a chance. Both tables share one path namespace, so at most one of
them can answer a given path.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import HTMLResponse
from starlette.routing import BaseRoute, Mount
from starlette.responses import Response

from htmx_components.antiforgery import AntiforgeryMiddleware, require_antiforgery
from htmx_components.config import AntiforgeryConfig
from htmx_components.errors import MisconfigurationError, RouteNotFound
from htmx_components.fragments import (
    ComponentRegistration,
    FragmentDescriptor,
    FragmentRenderer,
)
from htmx_components.layout import Layout
from htmx_components.pages import PageRoute, render_page
from htmx_components.routing import RouteTable

logger = logging.getLogger(__name__)

HX_REQUEST_HEADER = "HX-Request"


def is_htmx_request(request: Request) -> bool:
    return request.headers.get(HX_REQUEST_HEADER, "").lower() == "true"


@dataclass(frozen=True)
class Resolution:
    page: PageRoute | None = None
    fragment: FragmentDescriptor | None = None


class Dispatcher:
    def __init__(
        self,
        layout: Layout,
        *,
        reserved_paths: Iterable[str] = (),
        reserved_prefixes: Iterable[str] = (),
    ) -> None:
        self.layout = layout
        # Paths already answered by routes matched ahead of the dispatcher.
        self.reserved_paths = frozenset(reserved_paths)
        self.reserved_prefixes = tuple(reserved_prefixes)
        self.pages: RouteTable[PageRoute] = RouteTable("page")
        self.fragments = FragmentRenderer()

    def _check_reserved(self, kind: str, path: str) -> None:
        if path in self.reserved_paths:
            raise MisconfigurationError(
                f"{kind} route {path!r} is shadowed by an application route"
            )
        for prefix in self.reserved_prefixes:
            if path == prefix or path.startswith(prefix + "/"):
                raise MisconfigurationError(
                    f"{kind} route {path!r} is shadowed by the {prefix!r} mount"
                )

    def add_page(self, page: PageRoute) -> None:
        self._check_reserved("Page", page.path)
        if page.path in self.fragments.table:
            raise MisconfigurationError(
                f"Page route {page.path!r} collides with a registered fragment"
            )
        self.pages.add(page.path, page)

    def add_component(self, registration: ComponentRegistration) -> FragmentDescriptor:
        path = registration.route_path
        if path is not None:
            self._check_reserved("Fragment", path)
        if path is not None and path in self.pages:
            raise MisconfigurationError(f"Fragment route {path!r} collides with a registered page")
        return self.fragments.register(registration)

    def freeze(self) -> None:
        self.pages.freeze()
        self.fragments.freeze()

    def resolve(self, path: str) -> Resolution:
        page = self.pages.resolve(path)
        if page is not None:
            return Resolution(page=page)
        fragment = self.fragments.lookup(path)
        if fragment is not None:
            return Resolution(fragment=fragment)
        raise RouteNotFound(path)

    async def dispatch(self, request: Request) -> Response:
        path = request.url.path
        resolution = self.resolve(path)

        if resolution.page is not None:
            return render_page(request, resolution.page, self.layout)

        if resolution.fragment is not None and resolution.fragment.antiforgery:
            require_antiforgery(request, endpoint=path)
        body = await self.fragments.render(path)
        return HTMLResponse(content=body)


router = APIRouter(tags=["components"])


@router.get("/{path:path}", response_class=HTMLResponse, include_in_schema=False)
async def dispatch_component(request: Request, path: str) -> Response:
    dispatcher: Dispatcher = request.app.state.dispatcher
    return await dispatcher.dispatch(request)


def add_component_rendering(
    app: FastAPI, layout: Layout, *, antiforgery: AntiforgeryConfig
) -> None:
    """Enable component rendering on ``app``.

    Stores the layout for page renders and installs the antiforgery middleware
    when the config enables it.
    """

    app.state.layout = layout
    app.state.antiforgery_enabled = bool(antiforgery.enabled)
    if antiforgery.enabled:
        app.add_middleware(AntiforgeryMiddleware, config=antiforgery)


def _existing_routes(routes: Iterable[BaseRoute]) -> tuple[list[str], list[str]]:
    paths: list[str] = []
    prefixes: list[str] = []
    for route in routes:
        path = getattr(route, "path", None)
        if not path:
            continue
        if isinstance(route, Mount):
            prefixes.append(path)
        elif "{" not in path:
            paths.append(path)
    return paths, prefixes


def map_components(
    app: FastAPI,
    *,
    pages: Iterable[PageRoute],
    components: Iterable[ComponentRegistration],
) -> Dispatcher:
    """Bind the page and component registration lists to the app's router.

    Raises ``MisconfigurationError`` on duplicate paths, so a bad registration
    list fails app construction rather than a request.
    """

    layout = getattr(app.state, "layout", None)
    if layout is None:
        raise MisconfigurationError("Call add_component_rendering() before map_components()")

    reserved_paths, reserved_prefixes = _existing_routes(app.router.routes)
    dispatcher = Dispatcher(
        layout, reserved_paths=reserved_paths, reserved_prefixes=reserved_prefixes
    )
    for page in pages:
        dispatcher.add_page(page)
    for registration in components:
        descriptor = dispatcher.add_component(registration)
        if descriptor.antiforgery and not app.state.antiforgery_enabled:
            logger.warning(
                "Fragment %s requires antiforgery validation but the middleware is "
                "disabled; requests to it will fail",
                descriptor.path,
            )
    dispatcher.freeze()

    app.state.dispatcher = dispatcher
    app.include_router(router)
    logger.info(
        "Mapped %d page(s) and %d fragment(s)",
        len(dispatcher.pages),
        len(dispatcher.fragments.table),
    )
    return dispatcher
