"""Server: the outermost middleware pipeline.

Holds a ``DispatchStack`` of top-level middleware (typically logging or
auth first, then one or more routers) and runs each request through it.
"""

import logging
from typing import Self

import anyio

from waypoint.config import ServerConfig
from waypoint.dispatching.dispatcher import Dispatcher
from waypoint.dispatching.stack import DispatchStack
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.protocol import MiddlewareRef, end_of_chain
from waypoint.routing.router import Router

logger = logging.getLogger("waypoint.server")


class Server:
    """Runs requests through an ordered stack of middleware.

    Usage::

        server = Server()
        router = server.create_router()
        router.register("GET", "/", home)
        server.add(request_logger).add(router)

        response = await server.handle(Request(target="/"))

    Exceptions raised by middleware are logged and answered with a 500
    response, unless ``config.propagate_errors`` is set.
    """

    __slots__ = ("_stack", "config", "dispatcher")

    def __init__(self, config: ServerConfig | None = None, dispatcher: Dispatcher | None = None) -> None:
        self.config = config or ServerConfig()
        self.dispatcher = dispatcher or Dispatcher()
        self._stack = DispatchStack(dispatcher=self.dispatcher)

    def add(self, middleware: MiddlewareRef) -> Self:
        """Append *middleware* to the server's stack."""
        self._stack.add(middleware)
        return self

    def create_router(self) -> Router:
        """A new Router sharing this server's dispatcher and configuration.

        The router is not added to the stack; call ``add()`` with it.
        """
        return Router(
            self.dispatcher,
            path_variables_attribute=self.config.path_variables_attribute,
        )

    @property
    def stack(self) -> DispatchStack:
        return self._stack

    async def handle(self, request: Request, response: Response | None = None) -> Response:
        """Run *request* through the stack and return the final response."""
        if response is None:
            response = Response(status=self.config.default_status)
        try:
            return await self._stack(request, response, end_of_chain)
        except Exception:
            if self.config.propagate_errors:
                raise
            logger.exception("500 %s %s", request.method, request.path)
            return Response(body="Internal Server Error", status=500)

    def respond(self, request: Request, response: Response | None = None) -> Response:
        """Blocking form of ``handle`` for synchronous callers.

        Starts its own event loop, so it must not be called from inside one.
        """
        return anyio.run(self.handle, request, response)
