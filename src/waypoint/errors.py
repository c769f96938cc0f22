"""Waypoint exception hierarchy.

Shared across Router, RouteFactory, Dispatcher, and Server so every module
raises and catches the same types.

Not-found and method-not-allowed are *not* exceptions here. They are
ordinary outcomes of route resolution and are expressed as response
statuses.
"""


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when a route target or router setup is invalid.

    Always raised at registration time, never while handling a request.
    """


class DispatchError(WaypointError):
    """Raised when a middleware reference cannot be turned into something callable."""

    def __init__(self, middleware: object, detail: str = "") -> None:
        self.middleware = middleware
        self.detail = detail or f"Unable to dispatch middleware {middleware!r}"
        super().__init__(self.detail)
