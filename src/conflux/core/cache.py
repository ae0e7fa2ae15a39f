"""Caching, change detection and notification shared by all providers."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

from .events import ConfigChangedEvent, ConfigEventManager
from .types import Shape, shape_name

logger = logging.getLogger(__name__)

_EMPTY = object()


class CachedSlot:
    """Single mutable cell holding at most one value.

    Each read and each write is atomic. Nothing spans a read and a write, so
    check-then-populate sequences built on top may race; callers accept that.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: Any = _EMPTY

    def get(self) -> Tuple[bool, Any]:
        """Return ``(True, value)`` when populated, ``(False, None)`` otherwise."""
        with self._lock:
            value = self._value
        if value is _EMPTY:
            return False, None
        return True, value

    def set(self, value: Any) -> None:
        with self._lock:
            self._value = value

    def is_empty(self) -> bool:
        with self._lock:
            return self._value is _EMPTY


class CachingConfigProvider(ABC):
    """Base for providers that cache the result of ``probe()``.

    Subclasses implement ``probe()`` and decide which change events cascade
    into a refresh of their own value.

    Concurrency: two concurrent first calls to ``get_data()`` may both probe
    and both store; ``refresh()`` holds no lock across its read, compare and
    update, so concurrent refreshes can publish the same change twice.
    """

    def __init__(self, event_manager: ConfigEventManager, shape: Optional[Shape] = None):
        self.shape = shape
        self._event_manager = event_manager
        self._cached = CachedSlot()

    @abstractmethod
    def probe(self) -> Any:
        """Compute a fresh value without touching the cache."""

    @abstractmethod
    def on_config_changed(self, event: ConfigChangedEvent) -> None:
        ...

    def describe(self) -> str:
        return shape_name(self.shape)

    @property
    def is_cached(self) -> bool:
        return not self._cached.is_empty()

    def get_data(self) -> Any:
        found, value = self._cached.get()
        if found:
            return value

        result = self.probe()
        self._cached.set(result)
        logger.info("Cached public config %s: %r", self.describe(), result)
        return result

    def refresh(self) -> None:
        current = self.get_data()
        latest = self.probe()
        if current != latest:
            self._cached.set(latest)
            logger.info(
                "Configuration change detected for %s, firing an event about that, "
                "previous: %r, current: %r",
                self.describe(), current, latest,
            )
            self._event_manager.publish(self._change_event(current, latest))

    def on_refresh_event(self) -> None:
        self.refresh()

    def _cascade_refresh(self, event: ConfigChangedEvent) -> None:
        """Refresh in reaction to ``event``, unless a refresh broadcast is running."""
        if self._event_manager.refresh_in_progress():
            logger.debug("%r skips cascade from %r during refresh broadcast", self, event.origin)
            return
        self.refresh()

    def _change_event(self, previous: Any, current: Any) -> ConfigChangedEvent:
        return ConfigChangedEvent(
            previous=previous, current=current, origin=self, shape=self.shape
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.describe()})"
