from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from htmx_components.antiforgery import get_antiforgery_state
from htmx_components.layout import Layout

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@dataclass(frozen=True)
class PageRoute:
    path: str
    template: str
    title: str | None = None
    context: dict[str, Any] = field(default_factory=dict)


def render_page(
    request: Request,
    page: PageRoute,
    layout: Layout,
    *,
    status_code: int = 200,
    extra: dict[str, Any] | None = None,
) -> Response:
    antiforgery = get_antiforgery_state(request)
    ctx: dict[str, Any] = {
        "layout": layout,
        "title": layout.page_title(page.title),
        "active": page.path,
        "antiforgery": antiforgery,
        **page.context,
    }
    if extra:
        ctx.update(extra)
    return templates.TemplateResponse(request, page.template, ctx, status_code=status_code)


PAGES: tuple[PageRoute, ...] = (
    PageRoute(path="/", template="index.html", title="Home page"),
    PageRoute(path="/privacy", template="privacy.html", title="Privacy Policy"),
    PageRoute(path="/error", template="error.html", title="Error"),
)

ERROR_PAGE = PAGES[-1]
