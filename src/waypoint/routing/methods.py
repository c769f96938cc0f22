"""MethodMap: per-route mapping from HTTP method to middleware."""

import enum
from collections.abc import Iterator
from typing import Any, Final, Self

from waypoint.dispatching.dispatcher import Dispatcher
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.protocol import MiddlewareRef, Next


class _NoMatch(enum.Enum):
    NO_MATCH = "NO_MATCH"

    def __repr__(self) -> str:
        return "NO_MATCH"

    def __bool__(self) -> bool:
        return False


NO_MATCH: Final = _NoMatch.NO_MATCH
"""Returned by ``MethodMap.get_middleware`` when no entry applies."""

ANY_METHOD = "*"


class MethodMap:
    """Maps HTTP methods to middleware, with a ``*`` fallback.

    Lookup order for a request method:

    1. an entry registered for exactly that method;
    2. for ``HEAD``, the ``GET`` entry;
    3. the ``*`` entry;
    4. otherwise ``NO_MATCH``.

    Called as middleware, a map answers ``NO_MATCH`` itself: ``OPTIONS``
    gets 200 and anything else gets 405, both with an ``Allow`` header.
    """

    __slots__ = ("_dispatcher", "_map")

    def __init__(self, dispatcher: Dispatcher | None = None) -> None:
        self._dispatcher = dispatcher or Dispatcher()
        self._map: dict[str, Any] = {}

    def register(self, method_spec: str, middleware: MiddlewareRef | None) -> Self:
        """Map each method in the comma-separated *method_spec* to *middleware*.

        ``"GET"``, ``"GET,POST"`` and ``"*"`` are all valid. Passing
        ``None`` as *middleware* removes the listed methods.
        """
        updated = dict(self._map)
        for token in method_spec.split(","):
            method = token.strip()
            if not method:
                continue
            if middleware is None:
                updated.pop(method, None)
            else:
                updated[method] = middleware
        # Publish a fresh dict so concurrent lookups never see a partial update
        self._map = updated
        return self

    def get_middleware(self, method: str) -> Any:
        """Return the middleware for *method*, or ``NO_MATCH``. Never raises."""
        entries = self._map
        if method in entries:
            return entries[method]
        if method == "HEAD" and "GET" in entries:
            return entries["GET"]
        if ANY_METHOD in entries:
            return entries[ANY_METHOD]
        return NO_MATCH

    def allowed_methods(self) -> tuple[str, ...]:
        """Methods this map answers, for an ``Allow`` header."""
        methods = [m for m in self._map if m != ANY_METHOD]
        if "GET" in methods and "HEAD" not in methods:
            methods.append("HEAD")
        if "OPTIONS" not in methods:
            methods.append("OPTIONS")
        return tuple(methods)

    def __contains__(self, method: object) -> bool:
        return method in self._map

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._map))

    def __len__(self) -> int:
        return len(self._map)

    def __repr__(self) -> str:
        return f"MethodMap({list(self._map)!r})"

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        """Dispatch the middleware registered for the request's method."""
        middleware = self.get_middleware(request.method)
        if middleware is not NO_MATCH:
            return await self._dispatcher.dispatch(middleware, request, response, next)

        status = 200 if request.method == "OPTIONS" else 405
        allow = ", ".join(self.allowed_methods())
        return response.with_status(status).without_header("Allow").with_header("Allow", allow)
