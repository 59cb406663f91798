"""Opt-in markers deciding which arguments are bound from the request."""

from __future__ import annotations

import threading
from typing import Any, TypeVar

T = TypeVar("T", bound=type)


class FromRequest:
    """Zero-data marker: bind this argument from the request.

    Attach it to a handler parameter with ``Annotated[Dto, FromRequest()]``
    or pass it in :attr:`ArgumentMetadata.attributes`.
    """

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FromRequest)

    def __hash__(self) -> int:
        return hash(FromRequest)

    def __repr__(self) -> str:
        return "FromRequest()"


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class MarkerRegistry:
    """Set of target types that opted in to request binding.

    Populated while modules are imported; lookups never take the lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._types: dict[str, type] = {}

    def mark(self, cls: T) -> T:
        """Register *cls* as a type-level opt-in and return it."""
        if not isinstance(cls, type):
            raise TypeError(f"Only classes can be marked, got {cls!r}")
        with self._lock:
            self._types = {**self._types, qualified_name(cls): cls}
        return cls

    def unmark(self, cls: type) -> None:
        with self._lock:
            types = dict(self._types)
            types.pop(qualified_name(cls), None)
            self._types = types

    def is_marked(self, cls: Any) -> bool:
        if not isinstance(cls, type):
            return False
        return self._types.get(qualified_name(cls)) is cls

    def lookup(self, name: str) -> type | None:
        """Return a registered type by qualified or bare class name."""
        types = self._types
        if name in types:
            return types[name]
        matches = [cls for cls in types.values() if cls.__qualname__ == name]
        if len(matches) == 1:
            return matches[0]
        return None

    def __contains__(self, cls: object) -> bool:
        return self.is_marked(cls)

    def __len__(self) -> int:
        return len(self._types)


default_registry = MarkerRegistry()


def from_request(cls: T) -> T:
    """Class decorator marking *cls* for automatic request binding."""
    return default_registry.mark(cls)


__all__ = [
    "FromRequest",
    "MarkerRegistry",
    "default_registry",
    "from_request",
    "qualified_name",
]
