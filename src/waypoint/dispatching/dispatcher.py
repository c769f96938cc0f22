"""Dispatcher: resolve a middleware reference and call it.

A middleware reference may be:

- a ``Response``, returned as is;
- an import path string (``"pkg.module:Name"`` or ``"pkg.module.Name"``);
- a class, instantiated with no arguments;
- a list or tuple, run as a ``DispatchStack``;
- any callable taking ``(request, response, next)``, sync or async. If it
  returns something other than a ``Response`` (for example a freshly built
  middleware instance), that value is dispatched in turn.
"""

import functools
import importlib
import logging
from typing import Any

from waypoint._internal.invoke import invoke
from waypoint.errors import DispatchError
from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.protocol import Next

logger = logging.getLogger("waypoint.dispatch")


@functools.cache
def import_object(path: str) -> Any:
    """Import the object named by *path*.

    Accepts ``"package.module:attr"`` and ``"package.module.attr"``.
    Results are cached per path.

    Raises ``DispatchError`` if the module or attribute does not exist.
    """
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise DispatchError(path, f"Invalid middleware import path {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise DispatchError(path, f"Cannot import module {module_name!r} for {path!r}") from exc

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise DispatchError(path, f"Module {module_name!r} has no attribute {attr!r}") from exc
    return obj


class Dispatcher:
    """Normalizes middleware references into calls.

    Subclass and override ``resolve`` to plug in a different lookup,
    e.g. a dependency-injection container for string references.
    """

    __slots__ = ()

    def resolve(self, middleware: Any) -> Any:
        """Turn a reference into something callable, without calling it."""
        if isinstance(middleware, str):
            middleware = import_object(middleware)
        if isinstance(middleware, type):
            return middleware()
        if isinstance(middleware, (list, tuple)):
            return self.create_stack(middleware)
        return middleware

    def create_stack(self, middleware: Any = ()) -> Any:
        """Build a ``DispatchStack`` that dispatches through this dispatcher."""
        from waypoint.dispatching.stack import DispatchStack

        return DispatchStack(middleware, dispatcher=self)

    async def dispatch(
        self,
        middleware: Any,
        request: Request,
        response: Response,
        next: Next,
    ) -> Response:
        """Dispatch *middleware* and return the response it produced."""
        if isinstance(middleware, Response):
            return middleware

        resolved = self.resolve(middleware)
        if isinstance(resolved, Response):
            return resolved
        if not callable(resolved):
            raise DispatchError(middleware)

        result = await invoke(resolved, request, response, next)
        if isinstance(result, Response):
            return result
        if result is None or result is resolved:
            raise DispatchError(
                middleware,
                f"Middleware {middleware!r} returned {result!r} instead of a Response",
            )

        # Factory style: the call built the real middleware
        logger.debug("Dispatching middleware built by %r", middleware)
        return await self.dispatch(result, request, response, next)
