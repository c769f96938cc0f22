"""Invoke helpers: call sync or async middleware uniformly.

Middleware can be ``def`` or ``async def``. Any code that calls a
user-provided callable must handle both cases. This module provides a
single helper so the sync/async check lives in exactly one place.

Usage::

    from waypoint._internal.invoke import invoke

    result = await invoke(middleware, request, response, next)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns a Response directly
        def teapot(request, response, next):
            return response.with_status(418)

        # async: returns a coroutine, awaited here
        async def timing(request, response, next):
            start = time.monotonic()
            response = await next(request, response)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
