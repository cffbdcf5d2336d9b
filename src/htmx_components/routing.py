"""Literal-path route tables.

Both the page table and the fragment table are built once while the app is
constructed and frozen before the first request. Lookups are exact string
matches; the HTTP layer has already normalized and decoded the path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from htmx_components.errors import MisconfigurationError

H = TypeVar("H")


@dataclass(frozen=True)
class RouteEntry(Generic[H]):
    path: str
    handler: H


class RouteTable(Generic[H]):
    def __init__(self, name: str) -> None:
        self.name = name
        self._entries: dict[str, RouteEntry[H]] = {}
        self._frozen = False

    def add(self, path: str, handler: H) -> RouteEntry[H]:
        if self._frozen:
            raise RuntimeError(f"Cannot add {path!r}: the {self.name} table is frozen")
        if not path.startswith("/"):
            raise MisconfigurationError(f"Route path must start with '/': {path!r}")
        if path in self._entries:
            raise MisconfigurationError(
                f"Duplicate {self.name} route {path!r}: already bound to "
                f"{self._entries[path].handler!r}"
            )
        entry = RouteEntry(path=path, handler=handler)
        self._entries[path] = entry
        return entry

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def resolve(self, path: str) -> H | None:
        entry = self._entries.get(path)
        return entry.handler if entry is not None else None

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def paths(self) -> list[str]:
        return list(self._entries)
