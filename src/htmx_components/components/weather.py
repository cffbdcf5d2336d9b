from __future__ import annotations

import asyncio
import random
from typing import ClassVar

from htmx_components.fragments import FragmentComponent

# Inclusive bounds in tenths of a degree.
SEATTLE_RANGE = (410, 799)
CHICAGO_RANGE = (200, 499)
MIAMI_RANGE = (700, 899)


def _reading(bounds: tuple[int, int]) -> float:
    low, high = bounds
    return random.randint(low, high) / 10


class WeatherComponent(FragmentComponent):
    """Placeholder temperatures for three cities; the numbers are random."""

    route: ClassVar[str] = "/weather"
    outputs: ClassVar[tuple[str, ...]] = ("seattle", "chicago", "miami")
    template: ClassVar[str] = (
        "<ul class=\"weather\">\n"
        "    <li>Seattle: {{ seattle }} &deg;F</li>\n"
        "    <li>Chicago: {{ chicago }} &deg;F</li>\n"
        "    <li>Miami: {{ miami }} &deg;F</li>\n"
        "</ul>\n"
    )

    seattle: float
    chicago: float
    miami: float

    async def on_initialized(self) -> None:
        await asyncio.sleep(0)
        self.seattle = _reading(SEATTLE_RANGE)
        self.chicago = _reading(CHICAGO_RANGE)
        self.miami = _reading(MIAMI_RANGE)
