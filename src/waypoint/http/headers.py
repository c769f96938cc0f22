"""Immutable, case-insensitive HTTP headers.

Implements ``Mapping[str, str]``. Stores ``(name, value)`` string pairs in
the order they were given; lookups ignore case.
"""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    ``get_list`` returns all values for a header (e.g. multiple ``Set-Cookie``).
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        pairs = tuple(raw.items()) if isinstance(raw, Mapping) else tuple(raw)
        object.__setattr__(self, "_raw", pairs)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Headers is immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower()
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower()
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Headers):
            return self._raw == other._raw
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._raw)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*, in the order they were given."""
        key_lower = key.lower()
        return [value for name, value in self._raw if name.lower() == key_lower]

    @property
    def raw(self) -> tuple[tuple[str, str], ...]:
        """Access the raw ``(name, value)`` pairs."""
        return self._raw
