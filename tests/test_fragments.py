from __future__ import annotations

import asyncio
from typing import ClassVar

import pytest

from htmx_components.errors import InitializationFailed, MisconfigurationError, RouteNotFound
from htmx_components.fragments import (
    ComponentRegistration,
    FragmentComponent,
    FragmentDescriptor,
    FragmentRenderer,
)


class GreetingComponent(FragmentComponent):
    route: ClassVar[str] = "/greeting"
    outputs: ClassVar[tuple[str, ...]] = ("name",)
    template: ClassVar[str] = "<p>Hello, {{ name }}!</p>"

    instances: ClassVar[int] = 0

    async def on_initialized(self) -> None:
        type(self).instances += 1
        await asyncio.sleep(0)
        self.name = "<World>"


class BrokenComponent(FragmentComponent):
    route: ClassVar[str] = "/broken"
    outputs: ClassVar[tuple[str, ...]] = ("value",)
    template: ClassVar[str] = "<span>{{ value }}</span>"

    async def on_initialized(self) -> None:
        raise ValueError("sensor offline")


class ShellComponent(FragmentComponent):
    route: ClassVar[str] = "/shell"
    template: ClassVar[str] = "<html><body>nope</body></html>"


def test_render_awaits_initialization_and_escapes_values() -> None:
    renderer = FragmentRenderer()
    renderer.register(ComponentRegistration(GreetingComponent))

    body = asyncio.run(renderer.render("/greeting"))

    assert isinstance(body, bytes)
    assert body.decode("utf-8") == "<p>Hello, &lt;World&gt;!</p>"


def test_each_render_uses_a_fresh_instance() -> None:
    renderer = FragmentRenderer()
    renderer.register(ComponentRegistration(GreetingComponent))
    before = GreetingComponent.instances

    asyncio.run(renderer.render("/greeting"))
    asyncio.run(renderer.render("/greeting"))

    assert GreetingComponent.instances == before + 2


def test_unknown_path_is_not_found() -> None:
    renderer = FragmentRenderer()
    renderer.register(ComponentRegistration(GreetingComponent))

    with pytest.raises(RouteNotFound) as excinfo:
        asyncio.run(renderer.render("/greeting/extra"))
    assert excinfo.value.path == "/greeting/extra"


def test_initialization_failure_is_wrapped() -> None:
    renderer = FragmentRenderer()
    renderer.register(ComponentRegistration(BrokenComponent))

    with pytest.raises(InitializationFailed) as excinfo:
        asyncio.run(renderer.render("/broken"))
    assert excinfo.value.path == "/broken"
    assert isinstance(excinfo.value.cause, ValueError)


def test_registration_path_override_and_antiforgery_flag() -> None:
    descriptor = FragmentDescriptor.from_registration(
        ComponentRegistration(GreetingComponent, antiforgery=False, path="/hello")
    )

    assert descriptor.path == "/hello"
    assert descriptor.antiforgery is False
    assert descriptor.outputs == ("name",)


def test_descriptor_is_immutable() -> None:
    descriptor = FragmentDescriptor.from_registration(ComponentRegistration(GreetingComponent))
    with pytest.raises(AttributeError):
        descriptor.path = "/other"  # type: ignore[misc]


def test_template_with_document_shell_is_rejected() -> None:
    with pytest.raises(MisconfigurationError, match="<html>"):
        FragmentDescriptor.from_registration(ComponentRegistration(ShellComponent))


def test_duplicate_fragment_registration_fails() -> None:
    renderer = FragmentRenderer()
    renderer.register(ComponentRegistration(GreetingComponent))

    with pytest.raises(MisconfigurationError):
        renderer.register(ComponentRegistration(BrokenComponent, path="/greeting"))
