"""Router with three-stage route resolution.

Routes are created lazily on first registration of a target string and
indexed by kind:

- static routes in a dict keyed by exact path;
- prefix routes in a tuple ordered longest prefix first;
- pattern routes in a tuple in registration order.

Resolution checks the stages in that order and stops at the first hit,
so a static route always outranks a prefix route, and a prefix route
always outranks a pattern route, whatever order they were registered in.

Indexes are replaced rather than mutated when a route is added, so
requests can be resolved without locking while registration continues.
"""

import logging
import threading
from collections.abc import Callable, Iterator, Mapping
from typing import Any, Self

from waypoint.dispatching.dispatcher import Dispatcher
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.protocol import MiddlewareRef, Next, end_of_chain
from waypoint.routing.factory import RouteFactory
from waypoint.routing.route import PrefixRoute, Route, RouteMatch, RouteType

logger = logging.getLogger("waypoint.routing")


class Router:
    """Routes requests to middleware by path and method.

    Usage::

        router = Router()
        router.register("GET", "/", home)
        router.register("GET,POST", "/cats/", cats)
        router.register("GET", "/cats/{id}", cat)
        router.register("*", "/static/*", static_files)
        response = await router.handle(Request(target="/cats/42"))

    A router is itself a middleware. When no route matches it answers 404
    and does not call ``next``.

    Path variables from pattern routes are set on the request as one
    attribute per variable. Pass *path_variables_attribute* to store the
    whole mapping under that single attribute name instead.
    """

    __slots__ = (
        "_dispatcher",
        "_factory",
        "_lock",
        "_patterns",
        "_prefixes",
        "_routes",
        "_static",
        "path_variables_attribute",
    )

    def __init__(
        self,
        dispatcher: Dispatcher | None = None,
        *,
        path_variables_attribute: str | None = None,
        factory: RouteFactory | None = None,
    ) -> None:
        self._dispatcher = dispatcher or Dispatcher()
        self._factory = factory or RouteFactory(self._dispatcher)
        self.path_variables_attribute = path_variables_attribute
        self._lock = threading.Lock()
        # Raw target -> route, in registration order
        self._routes: dict[str, Route] = {}
        self._static: dict[str, Route] = {}
        self._prefixes: tuple[PrefixRoute, ...] = ()
        self._patterns: tuple[Route, ...] = ()

    # -- Registration --

    def register(self, method: str, target: str, middleware: MiddlewareRef) -> Self:
        """Register *middleware* for *method* on *target*.

        *method* may be a single method, a comma-separated list, or ``*``.
        Registering the same target again reuses its route, adding or
        replacing method entries.

        Raises ``ConfigurationError`` if *target* is a malformed pattern.
        """
        with self._lock:
            route = self._route_for_target(target)
            route.method_map.register(method, middleware)
        logger.debug("Registered %s %s -> %r", method, target, middleware)
        return self

    def route(self, target: str, methods: str = "GET") -> Callable[[Any], Any]:
        """Decorator form of ``register``::

            @router.route("/cats/{id}", methods="GET,HEAD")
            async def cat(request, response, next):
                ...
        """

        def decorator(middleware: Any) -> Any:
            self.register(methods, target, middleware)
            return middleware

        return decorator

    def _route_for_target(self, target: str) -> Route:
        """Return the route for *target*, creating it on first use. Caller holds the lock."""
        route = self._routes.get(target)
        if route is not None:
            return route

        route = self._factory.create(target)
        self._index(route)
        self._routes = {**self._routes, target: route}
        logger.debug("Created %s route for %r", route.type.value, target)
        return route

    def _index(self, route: Route) -> None:
        """Publish new indexes that include *route*. Caller holds the lock."""
        if route.type is RouteType.STATIC:
            self._static = {**self._static, route.target: route}
        elif isinstance(route, PrefixRoute):
            # Stable sort keeps registration order among equal lengths
            prefixes = sorted((*self._prefixes, route), key=lambda r: len(r.prefix), reverse=True)
            self._prefixes = tuple(prefixes)
        else:
            self._patterns = (*self._patterns, route)

    # -- Introspection --

    @property
    def routes(self) -> tuple[Route, ...]:
        """All routes, in registration order."""
        return tuple(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, target: object) -> bool:
        return target in self._routes

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)

    # -- Resolution --

    def resolve(self, path: str) -> RouteMatch | None:
        """Find the route for *path*.

        1. exact static match;
        2. longest matching prefix;
        3. first pattern, in registration order, that matches.

        Returns ``None`` when nothing matches.
        """
        route = self._static.get(path)
        if route is not None:
            return RouteMatch(route=route)

        for prefix_route in self._prefixes:
            if path.startswith(prefix_route.prefix):
                return RouteMatch(route=prefix_route)

        for pattern_route in self._patterns:
            match = pattern_route.match(path)
            if match is not None:
                return match

        return None

    # -- Dispatch --

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        """Route the request; answer 404 without calling *next* on a miss."""
        path = request.path
        match = self.resolve(path)
        if match is None:
            logger.debug("404 %s %s: no route", request.method, path)
            return response.with_status(404)

        if match.route.type is RouteType.PATTERN:
            request = self._with_path_variables(request, match.path_variables)
        return await match.route(request, response, next)

    async def handle(self, request: Request, response: Response | None = None) -> Response:
        """Route *request* as the last stop in the pipeline."""
        return await self(request, response or Response(), end_of_chain)

    def _with_path_variables(self, request: Request, variables: Mapping[str, str]) -> Request:
        if self.path_variables_attribute:
            return request.with_attribute(self.path_variables_attribute, dict(variables))
        if not variables:
            return request
        return request.with_attributes(variables)
