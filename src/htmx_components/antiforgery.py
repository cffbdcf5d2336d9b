"""Double-submit-cookie request-forgery protection.

The middleware issues a random token in a cookie, publishes it to templates
through ``request.state`` and records whether the request echoed it back in the
configured header. Endpoints decide whether that outcome matters; fragment
endpoints require it unless registered with ``antiforgery=False``.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from htmx_components.config import AntiforgeryConfig
from htmx_components.errors import MisconfigurationError

TOKEN_BYTES = 32


@dataclass(frozen=True)
class AntiforgeryState:
    token: str
    header_name: str
    validated: bool


def _is_valid(provided: str | None, expected: str | None) -> bool:
    if not provided or not expected:
        return False
    return secrets.compare_digest(provided, expected)


class AntiforgeryMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, config: AntiforgeryConfig) -> None:
        super().__init__(app)
        self.config = config

    async def dispatch(self, request: Request, call_next) -> Response:
        cfg = self.config
        cookie_token = request.cookies.get(cfg.cookie_name)
        token = cookie_token or secrets.token_urlsafe(TOKEN_BYTES)

        request.state.antiforgery = AntiforgeryState(
            token=token,
            header_name=cfg.header_name,
            validated=_is_valid(request.headers.get(cfg.header_name), cookie_token),
        )

        response = await call_next(request)
        if cookie_token != token:
            response.set_cookie(cfg.cookie_name, token, httponly=True, samesite="strict")
        return response


def get_antiforgery_state(request: Request) -> AntiforgeryState | None:
    return getattr(request.state, "antiforgery", None)


def require_antiforgery(request: Request, *, endpoint: str) -> None:
    """Enforce validation for an endpoint that has not opted out.

    Missing middleware is a misconfiguration, not a client error.
    """

    state = get_antiforgery_state(request)
    if state is None:
        raise MisconfigurationError(
            f"Endpoint {endpoint!r} requires antiforgery validation but "
            "AntiforgeryMiddleware is not installed. Enable antiforgery in the config "
            "or register the component with antiforgery=False."
        )
    if not state.validated:
        raise HTTPException(status_code=403, detail="Antiforgery token missing or invalid")
