"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, response: Response, next: Next) -> Response
"""

from waypoint.middleware.protocol import Middleware, MiddlewareRef, Next, end_of_chain

__all__ = [
    "Middleware",
    "MiddlewareRef",
    "Next",
    "end_of_chain",
]
