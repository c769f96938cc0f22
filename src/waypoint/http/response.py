"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. Immutable by convention,
built incrementally by design.
"""

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    Construct with a body, then chain ``.with_*()`` calls to set
    status and headers. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    # -- Constructors --

    @classmethod
    def text(cls, content: str, status: int = 200) -> "Response":
        """A ``text/plain`` response."""
        return cls(body=content, status=status, headers=(("Content-Type", "text/plain; charset=utf-8"),))

    @classmethod
    def json(cls, data: Any, status: int = 200) -> "Response":
        """A JSON response."""
        return cls(
            body=json_module.dumps(data),
            status=status,
            headers=(("Content-Type", "application/json"),),
        )

    # -- Chainable transformations --

    def with_status(self, status: int) -> "Response":
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        """Return a new Response with additional headers."""
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def without_header(self, name: str) -> "Response":
        """Return a new Response with every value of *name* removed."""
        lower = name.lower()
        return replace(self, headers=tuple((k, v) for k, v in self.headers if k.lower() != lower))

    def with_body(self, body: str | bytes) -> "Response":
        """Return a new Response with a different body."""
        return replace(self, body=body)

    # -- Header access --

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of header *name* (case-insensitive), or *default*."""
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return default

    def header_list(self, name: str) -> list[str]:
        """Every value of header *name*, in order."""
        lower = name.lower()
        return [value for key, value in self.headers if key.lower() == lower]

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text_body(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body
