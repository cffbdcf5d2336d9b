"""Fragment components and the renderer that serves them.

A fragment component pairs an inline Jinja2 template with an async
``on_initialized`` hook that computes the values the template renders. One
instance is created per request and dropped once its markup has been produced.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, ClassVar

from jinja2 import Environment, Template

from htmx_components.errors import InitializationFailed, MisconfigurationError, RouteNotFound
from htmx_components.routing import RouteTable

logger = logging.getLogger(__name__)

_WRAPPER_TAG = re.compile(r"<\s*/?\s*(html|head|body)\b", re.IGNORECASE)

# Compiled once per descriptor at startup; values are HTML-escaped.
_environment = Environment(autoescape=True, enable_async=True)


class FragmentComponent:
    route: ClassVar[str]
    template: ClassVar[str]
    outputs: ClassVar[tuple[str, ...]] = ()

    async def on_initialized(self) -> None:
        return None

    def render_context(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.outputs}


@dataclass(frozen=True)
class ComponentRegistration:
    """Explicit registration entry for a fragment component.

    ``antiforgery=False`` opts the endpoint out of request-forgery validation.
    """

    component: type[FragmentComponent]
    antiforgery: bool = True
    path: str | None = None

    @property
    def route_path(self) -> str | None:
        return self.path or getattr(self.component, "route", None)


@dataclass(frozen=True)
class FragmentDescriptor:
    path: str
    component: type[FragmentComponent]
    template: Template
    outputs: tuple[str, ...]
    antiforgery: bool = True

    @classmethod
    def from_registration(cls, registration: ComponentRegistration) -> FragmentDescriptor:
        component = registration.component
        path = registration.route_path
        if not path:
            raise MisconfigurationError(f"{component.__name__} does not declare a route")

        source = getattr(component, "template", None)
        if not source:
            raise MisconfigurationError(f"{component.__name__} does not declare a template")
        match = _WRAPPER_TAG.search(source)
        if match:
            raise MisconfigurationError(
                f"{component.__name__} template contains a <{match.group(1).lower()}> tag; "
                "fragments must not carry a document shell"
            )

        return cls(
            path=path,
            component=component,
            template=_environment.from_string(source),
            outputs=tuple(component.outputs),
            antiforgery=registration.antiforgery,
        )


class FragmentRenderer:
    def __init__(self) -> None:
        self._table: RouteTable[FragmentDescriptor] = RouteTable("fragment")

    @property
    def table(self) -> RouteTable[FragmentDescriptor]:
        return self._table

    def register(self, registration: ComponentRegistration) -> FragmentDescriptor:
        descriptor = FragmentDescriptor.from_registration(registration)
        self._table.add(descriptor.path, descriptor)
        return descriptor

    def freeze(self) -> None:
        self._table.freeze()

    def lookup(self, path: str) -> FragmentDescriptor | None:
        return self._table.resolve(path)

    async def render(self, path: str) -> bytes:
        descriptor = self.lookup(path)
        if descriptor is None:
            raise RouteNotFound(path)
        return await render_descriptor(descriptor)


async def render_descriptor(descriptor: FragmentDescriptor) -> bytes:
    instance = descriptor.component()
    try:
        await instance.on_initialized()
        markup = await descriptor.template.render_async(instance.render_context())
    except Exception as exc:
        logger.exception("Fragment %s failed to render", descriptor.path)
        raise InitializationFailed(descriptor.path, exc) from exc
    return markup.encode("utf-8")
