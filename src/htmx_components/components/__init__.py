"""Fragment components served by the app.

Components are listed explicitly; nothing is discovered by scanning modules.
"""

from htmx_components.components.weather import WeatherComponent
from htmx_components.fragments import ComponentRegistration

COMPONENTS: tuple[ComponentRegistration, ...] = (ComponentRegistration(WeatherComponent),)

__all__ = ["COMPONENTS", "WeatherComponent"]
