"""Route classes and the RouteMatch result.

A route pairs a matcher, fixed at construction, with a ``MethodMap``.
Matching is pure: ``match()`` returns a new ``RouteMatch`` holding the
extracted path variables and never stores them on the route, so one route
can serve any number of concurrent requests.
"""

import enum
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import ClassVar

from waypoint.http.request import Request
from waypoint.http.response import Response
from waypoint.middleware.protocol import Next
from waypoint.routing.methods import MethodMap
from waypoint.routing.params import compile_template


class RouteType(enum.Enum):
    """How a route's target is matched."""

    STATIC = "static"
    PREFIX = "prefix"
    PATTERN = "pattern"


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: "Route"
    path_variables: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


class Route:
    """Base route. Subclasses provide ``type`` and ``match()``."""

    __slots__ = ("method_map", "target")

    type: ClassVar[RouteType]

    def __init__(self, target: str, method_map: MethodMap | None = None) -> None:
        self.target = target
        self.method_map = method_map if method_map is not None else MethodMap()

    def match(self, path: str) -> RouteMatch | None:
        """Return a ``RouteMatch`` if *path* matches, else ``None``."""
        raise NotImplementedError

    def _matched(self, variables: dict[str, str] | None = None) -> RouteMatch:
        return RouteMatch(route=self, path_variables=MappingProxyType(variables or {}))

    async def __call__(self, request: Request, response: Response, next: Next) -> Response:
        """Dispatch through this route's method map."""
        return await self.method_map(request, response, next)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.target!r})"


class StaticRoute(Route):
    """Matches exactly one literal path."""

    __slots__ = ()

    type = RouteType.STATIC

    def match(self, path: str) -> RouteMatch | None:
        if path == self.target:
            return self._matched()
        return None


class PrefixRoute(Route):
    """Matches any path starting with the target minus its trailing ``*``."""

    __slots__ = ("prefix",)

    type = RouteType.PREFIX

    def __init__(self, target: str, method_map: MethodMap | None = None) -> None:
        super().__init__(target, method_map)
        self.prefix = target.removesuffix("*")

    def match(self, path: str) -> RouteMatch | None:
        if path.startswith(self.prefix):
            return self._matched()
        return None


class TemplateRoute(Route):
    """Matches a URI template such as ``/cats/{id}``.

    Each ``{name}`` matches one or more characters other than ``/``;
    ``{name:int}``, ``{name:float}`` and ``{name:path}`` narrow or widen
    that. A repeated name must match the same text each time, and brace
    text that is not a variable is literal. The whole path must match.
    """

    __slots__ = ("pattern", "variable_names")

    type = RouteType.PATTERN

    def __init__(self, target: str, method_map: MethodMap | None = None) -> None:
        super().__init__(target, method_map)
        self.pattern, self.variable_names = compile_template(target)

    def match(self, path: str) -> RouteMatch | None:
        m = self.pattern.fullmatch(path)
        if m is None:
            return None
        return self._matched(m.groupdict())


class RegexRoute(Route):
    """Matches a delimited regular expression such as ``~^/cats/(\\d+)$~``.

    The expression is searched for, not anchored, so use ``^`` and ``$``
    to pin it. Named groups become variables under their name, unnamed
    groups under their position (``"1"``, ``"2"``, ...). Groups that did
    not take part in the match are left out.
    """

    __slots__ = ("pattern",)

    type = RouteType.PATTERN

    def __init__(self, target: str, pattern: re.Pattern[str], method_map: MethodMap | None = None) -> None:
        super().__init__(target, method_map)
        self.pattern = pattern

    def match(self, path: str) -> RouteMatch | None:
        m = self.pattern.search(path)
        if m is None:
            return None

        names = {index: name for name, index in self.pattern.groupindex.items()}
        variables: dict[str, str] = {}
        for index, value in enumerate(m.groups(), start=1):
            if value is not None:
                variables[names.get(index, str(index))] = value
        return self._matched(variables)
