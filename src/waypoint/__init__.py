"""Waypoint: HTTP routing with chained middleware dispatch.

Routes requests by path and method to middleware, and runs middleware as
a continuation chain where each link decides whether to call ``next``.

Basic usage::

    from waypoint import Request, Router

    router = Router()

    async def cat(request, response, next):
        return response.with_body(f"cat {request.get_attribute('id')}")

    router.register("GET", "/cats/{id}", cat)
    response = await router.handle(Request(target="/cats/42"))
"""

__version__ = "0.1.0"
__all__ = [
    "NO_MATCH",
    "ConfigurationError",
    "DispatchError",
    "DispatchStack",
    "Dispatcher",
    "Headers",
    "MethodMap",
    "Middleware",
    "Next",
    "Request",
    "Response",
    "Route",
    "RouteFactory",
    "RouteMatch",
    "RouteType",
    "Router",
    "Server",
    "ServerConfig",
    "WaypointError",
]

_EXPORTS: dict[str, str] = {
    "NO_MATCH": "waypoint.routing.methods",
    "MethodMap": "waypoint.routing.methods",
    "Route": "waypoint.routing.route",
    "RouteMatch": "waypoint.routing.route",
    "RouteType": "waypoint.routing.route",
    "RouteFactory": "waypoint.routing.factory",
    "Router": "waypoint.routing.router",
    "Dispatcher": "waypoint.dispatching.dispatcher",
    "DispatchStack": "waypoint.dispatching.stack",
    "Middleware": "waypoint.middleware.protocol",
    "Next": "waypoint.middleware.protocol",
    "Request": "waypoint.http.request",
    "Response": "waypoint.http.response",
    "Headers": "waypoint.http.headers",
    "Server": "waypoint.server",
    "ServerConfig": "waypoint.config",
    "WaypointError": "waypoint.errors",
    "ConfigurationError": "waypoint.errors",
    "DispatchError": "waypoint.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    module_name = _EXPORTS.get(name)
    if module_name is None:
        msg = f"module 'waypoint' has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
