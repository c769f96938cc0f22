"""DispatchStack: an ordered, continuation-chained sequence of middleware."""

from collections.abc import Iterable, Iterator
from typing import Any, Self

from waypoint.dispatching.dispatcher import Dispatcher
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.protocol import MiddlewareRef, Next


class DispatchStack:
    """Runs middleware in the order they were added.

    Each middleware receives a ``next`` that dispatches the middleware
    after it. The last one receives the ``next`` given to the stack.
    A middleware that returns without awaiting its ``next`` ends the
    chain, and the stack's own ``next`` is never called.

    Usage::

        stack = DispatchStack()
        stack.add(timing).add(auth).add(router)
        response = await stack(request, response, next)

    A stack is itself a middleware, so stacks nest.
    """

    __slots__ = ("_dispatcher", "_middleware")

    def __init__(self, middleware: Iterable[Any] = (), *, dispatcher: Dispatcher | None = None) -> None:
        self._dispatcher = dispatcher or Dispatcher()
        self._middleware: list[Any] = list(middleware)

    def add(self, middleware: MiddlewareRef) -> Self:
        """Append *middleware* to the end of the stack."""
        self._middleware.append(middleware)
        return self

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self) -> Iterator[Any]:
        return iter(tuple(self._middleware))

    def __repr__(self) -> str:
        return f"DispatchStack({self._middleware!r})"

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        """Dispatch the stack. An empty stack calls *next* directly."""
        chain: Next = next
        for middleware in reversed(tuple(self._middleware)):
            chain = self._link(middleware, chain)
        return await chain(request, response)

    def _link(self, middleware: Any, following: Next) -> Next:
        dispatcher = self._dispatcher

        async def link(request: Request, response: Response) -> Response:
            return await dispatcher.dispatch(middleware, request, response, following)

        return link
