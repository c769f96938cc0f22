"""Immutable HTTP request.

Frozen metadata plus a mapping of derived attributes. Routers and
middleware never change a request in place; they build a new one with
``.with_attribute()`` and pass that down the chain.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any
from urllib.parse import urlsplit

from waypoint.http.headers import Headers


def _freeze(attributes: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(attributes))


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``target`` is the request target as received (path plus optional
    query string and fragment). ``attributes`` holds values derived while
    handling the request, such as path variables set by a ``Router``.
    """

    method: str = "GET"
    target: str = "/"
    headers: Headers = field(default_factory=Headers)
    attributes: Mapping[str, Any] = field(default_factory=lambda: _freeze({}))

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))
        if not isinstance(self.attributes, MappingProxyType):
            object.__setattr__(self, "attributes", _freeze(self.attributes))

    # -- Computed properties --

    @property
    def path(self) -> str:
        """The path component of the target.

        Query and fragment are stripped, and so are the scheme and authority
        of an absolute-form target (``http://host/cats?x=1`` -> ``/cats``).
        """
        return urlsplit(self.target).path or "/"

    @property
    def query_string(self) -> str:
        """The raw query string, without the leading ``?``."""
        return urlsplit(self.target).query

    # -- Attributes --

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return a derived attribute, or *default* if it was never set."""
        return self.attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> "Request":
        """Return a new Request with one attribute set."""
        return replace(self, attributes=_freeze({**self.attributes, name: value}))

    def with_attributes(self, attributes: Mapping[str, Any]) -> "Request":
        """Return a new Request with several attributes set."""
        return replace(self, attributes=_freeze({**self.attributes, **attributes}))

    def without_attribute(self, name: str) -> "Request":
        """Return a new Request with one attribute removed."""
        remaining = {k: v for k, v in self.attributes.items() if k != name}
        return replace(self, attributes=_freeze(remaining))

    # -- Other transformations --

    def with_method(self, method: str) -> "Request":
        """Return a new Request with a different method."""
        return replace(self, method=method)

    def with_target(self, target: str) -> "Request":
        """Return a new Request with a different request target."""
        return replace(self, target=target)

    def with_header(self, name: str, value: str) -> "Request":
        """Return a new Request with an additional header."""
        return replace(self, headers=Headers((*self.headers.raw, (name, value))))
