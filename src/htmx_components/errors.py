from __future__ import annotations


class HtmxComponentsError(Exception):
    """Base class for dispatch errors."""


class MisconfigurationError(HtmxComponentsError):
    """Startup or first-invocation configuration fault. Never recovered."""


class RouteNotFound(HtmxComponentsError):
    def __init__(self, path: str) -> None:
        super().__init__(f"No page or fragment registered for {path!r}")
        self.path = path


class RenderError(HtmxComponentsError):
    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


class InitializationFailed(RenderError):
    """A fragment component raised while initializing or rendering."""

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(path, f"Fragment {path!r} failed to initialize: {cause}")
        self.cause = cause
