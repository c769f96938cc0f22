"""Routing: classified route table with static, prefix, and pattern lookup.

Static routes are found by exact path, prefix routes by the longest
matching prefix, and pattern routes by trying each in registration order.
"""

from waypoint.routing.factory import RouteFactory, classify
from waypoint.routing.methods import NO_MATCH, MethodMap
from waypoint.routing.route import (
    PrefixRoute,
    RegexRoute,
    Route,
    RouteMatch,
    RouteType,
    StaticRoute,
    TemplateRoute,
)
from waypoint.routing.router import Router

__all__ = [
    "NO_MATCH",
    "MethodMap",
    "PrefixRoute",
    "RegexRoute",
    "Route",
    "RouteFactory",
    "RouteMatch",
    "RouteType",
    "Router",
    "StaticRoute",
    "TemplateRoute",
    "classify",
]
