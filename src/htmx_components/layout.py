from __future__ import annotations

from dataclasses import dataclass

from htmx_components.config import AppConfig


@dataclass(frozen=True)
class NavLink:
    label: str
    href: str


@dataclass(frozen=True)
class Layout:
    """Shared page shell, injected into every full-page render."""

    title: str
    htmx_src: str
    nav: tuple[NavLink, ...] = ()
    development: bool = False

    def page_title(self, title: str | None) -> str:
        if not title:
            return self.title
        return f"{title} - {self.title}"


DEFAULT_NAV: tuple[NavLink, ...] = (
    NavLink(label="Home", href="/"),
    NavLink(label="Privacy", href="/privacy"),
)


def build_layout(config: AppConfig, nav: tuple[NavLink, ...] = DEFAULT_NAV) -> Layout:
    return Layout(
        title=config.layout.title,
        htmx_src=config.layout.htmx_src,
        nav=nav,
        development=config.is_development,
    )
