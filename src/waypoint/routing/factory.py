"""RouteFactory: classify a registration target and build its route.

Targets are classified in this order:

1. **Regex**: wrapped in a pair of matching delimiters, one of
   ``~ # ! @ % |``, optionally followed by flags: ``~^/cats/(\\d+)$~``,
   ``#^/docs/(?P<slug>[a-z-]+)$#i``.
2. **Template**: contains a ``{variable}`` or ``{variable:converter}``:
   ``/cats/{id}``. Other brace text is literal.
3. **Prefix**: ends with ``*``: ``/static/*``.
4. **Static**: anything else: ``/about``.

Regex and template targets are both pattern routes.
"""

import re

from waypoint.dispatching.dispatcher import Dispatcher
from waypoint.errors import ConfigurationError
from waypoint.routing.methods import MethodMap
from waypoint.routing.params import VARIABLE_RE
from waypoint.routing.route import (
    PrefixRoute,
    RegexRoute,
    Route,
    RouteType,
    StaticRoute,
    TemplateRoute,
)

# Characters that may open and close a regex target
REGEX_DELIMITERS = "~#!@%|"

REGEX_FLAGS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


def split_regex(target: str) -> tuple[str, str] | None:
    """Split a delimited regex target into ``(expression, flags)``.

    Returns ``None`` when *target* is not delimited.
    """
    if len(target) < 2:
        return None
    delimiter = target[0]
    if delimiter not in REGEX_DELIMITERS:
        return None

    end = target.rfind(delimiter)
    if end == 0:
        return None
    flags = target[end + 1 :]
    if any(f not in REGEX_FLAGS for f in flags):
        return None
    return target[1:end], flags


def classify(target: str) -> RouteType:
    """Return the kind of route *target* would produce."""
    if split_regex(target) is not None or VARIABLE_RE.search(target):
        return RouteType.PATTERN
    if target.endswith("*"):
        return RouteType.PREFIX
    return RouteType.STATIC


class RouteFactory:
    """Builds routes whose method maps share one dispatcher."""

    __slots__ = ("dispatcher",)

    def __init__(self, dispatcher: Dispatcher | None = None) -> None:
        self.dispatcher = dispatcher or Dispatcher()

    def create(self, target: str) -> Route:
        """Classify *target* and build the matching route.

        Raises ``ConfigurationError`` for a malformed regex or template.
        """
        method_map = MethodMap(self.dispatcher)

        regex = split_regex(target)
        if regex is not None:
            expression, flag_chars = regex
            flags = re.NOFLAG
            for f in flag_chars:
                flags |= REGEX_FLAGS[f]
            try:
                pattern = re.compile(expression, flags)
            except re.error as exc:
                msg = f"Invalid regular expression in route target {target!r}: {exc}"
                raise ConfigurationError(msg) from exc
            return RegexRoute(target, pattern, method_map)

        if VARIABLE_RE.search(target):
            return TemplateRoute(target, method_map)

        if target.endswith("*"):
            return PrefixRoute(target, method_map)

        return StaticRoute(target, method_map)
