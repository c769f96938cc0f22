"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, response: Response, next: Next) -> Response: ...

No base class required. The dispatcher checks the shape, not the lineage.

Calling ``next`` hands the request and response to everything after this
middleware and returns what they produced. Not calling it ends the chain:
whatever this middleware returns is the final response.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from waypoint.http.request import Request
from waypoint.http.response import Response

# The rest of the pipeline
type Next = Callable[[Request, Response], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for waypoint middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, response: Response, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request, response)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class Teapot:
            async def __call__(self, request: Request, response: Response, next: Next) -> Response:
                return response.with_status(418)
    """

    async def __call__(self, request: Request, response: Response, next: Next) -> Response: ...


# Anything the Dispatcher can turn into a middleware: an instance, a class,
# an import path, a factory callable, or a sequence of any of these.
type MiddlewareRef = Middleware | Callable[..., Any] | type | str | Sequence[Any]


async def end_of_chain(request: Request, response: Response) -> Response:
    """The ``next`` for the outermost pipeline: returns the response unchanged."""
    return response
