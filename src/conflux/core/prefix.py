"""Namespace prefixes for raw configuration shapes."""

from __future__ import annotations

import threading
from typing import Callable, Dict, Optional, TypeVar

from .types import Shape

T = TypeVar("T")


class PrefixRegistry:
    """Explicit mapping from raw shape identifiers to namespace prefixes.

    A shape with no registered prefix is resolved against the whole backing
    store.
    """

    def __init__(self, prefixes: Optional[Dict[Shape, str]] = None):
        self._lock = threading.Lock()
        self._prefixes: Dict[Shape, str] = dict(prefixes or {})

    def register(self, shape: Shape, prefix: str) -> None:
        if not prefix:
            raise ValueError("Prefix must be a non-empty string")
        with self._lock:
            self._prefixes[shape] = prefix

    def unregister(self, shape: Shape) -> None:
        with self._lock:
            self._prefixes.pop(shape, None)

    def resolve(self, shape: Shape) -> Optional[str]:
        with self._lock:
            return self._prefixes.get(shape)


default_registry = PrefixRegistry()


def resolve_prefix(shape: Shape, registry: Optional[PrefixRegistry] = None) -> Optional[str]:
    return (registry or default_registry).resolve(shape)


def config_prefix(
    prefix: str, registry: Optional[PrefixRegistry] = None
) -> Callable[[T], T]:
    """Class decorator registering ``prefix`` for the decorated raw shape.

    Example::

        @config_prefix("database")
        @dataclass(frozen=True)
        class RawDatabase:
            host: str
            port: int = 5432
    """

    def decorate(cls: T) -> T:
        (registry or default_registry).register(cls, prefix)
        return cls

    return decorate
