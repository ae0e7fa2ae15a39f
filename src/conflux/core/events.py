"""Change events, refresh signals and the in-process event bus."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Tuple

from .errors import EventDeliveryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigChangedEvent:
    """Immutable record of one provider's transition from one value to another.

    Attributes:
        previous: Value cached before the change.
        current: Value cached after the change.
        origin: Provider that detected the change.
        shape: Public shape identifier of the origin provider.
        raw_shape: Raw shape the origin provider binds, None for composites.
    """

    previous: Any
    current: Any
    origin: Any = field(default=None, compare=False, repr=False)
    shape: Any = None
    raw_shape: Any = None


@dataclass(frozen=True)
class RefreshConfigsEvent:
    """Asks every subscribed provider to refresh its value."""


class ConfigChangedEventAware(Protocol):
    """Subscriber contract for configuration events."""

    def on_config_changed(self, event: ConfigChangedEvent) -> None:
        ...

    def on_refresh_event(self) -> None:
        ...


class ConfigEventManager(Protocol):
    """Publish/subscribe channel used by providers."""

    def publish(self, event: ConfigChangedEvent) -> None:
        ...

    def broadcast_refresh(self, event: Optional[RefreshConfigsEvent] = None) -> None:
        ...

    def refresh_in_progress(self) -> bool:
        ...

    def subscribe(self, listener: ConfigChangedEventAware) -> None:
        ...

    def unsubscribe(self, listener: ConfigChangedEventAware) -> None:
        ...


class EventBus:
    """Synchronous fan-out event manager.

    Every subscriber receives every event on the publishing thread. Delivery
    iterates over a snapshot of the subscriber list, so listeners may
    subscribe or unsubscribe while an event is in flight. Delivery order is
    subscription order, but callers shouldn't rely on it.

    When subscribers raise, the remaining subscribers still receive the event
    and an ``EventDeliveryError`` is raised to the publisher afterwards.

    While a refresh broadcast runs, ``refresh_in_progress()`` is true on the
    broadcasting thread. Providers use it to skip cascading refreshes, since
    the broadcast reaches each of them anyway.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: List[ConfigChangedEventAware] = []
        self._local = threading.local()

    def subscribe(self, listener: ConfigChangedEventAware) -> None:
        with self._lock:
            if not any(existing is listener for existing in self._listeners):
                self._listeners.append(listener)

    def unsubscribe(self, listener: ConfigChangedEventAware) -> None:
        with self._lock:
            self._listeners = [
                existing for existing in self._listeners if existing is not listener
            ]

    def listeners(self) -> List[ConfigChangedEventAware]:
        with self._lock:
            return list(self._listeners)

    def refresh_in_progress(self) -> bool:
        return getattr(self._local, "depth", 0) > 0

    def publish(self, event: ConfigChangedEvent) -> None:
        listeners = self.listeners()
        logger.debug("Publishing %s to %d listener(s)", event, len(listeners))
        self._deliver(event, listeners, lambda listener: listener.on_config_changed(event))

    def broadcast_refresh(self, event: Optional[RefreshConfigsEvent] = None) -> None:
        event = event or RefreshConfigsEvent()
        listeners = self.listeners()
        logger.debug("Broadcasting refresh signal to %d listener(s)", len(listeners))
        self._local.depth = getattr(self._local, "depth", 0) + 1
        try:
            self._deliver(event, listeners, lambda listener: listener.on_refresh_event())
        finally:
            self._local.depth -= 1

    def _deliver(self, event: Any, listeners: List[ConfigChangedEventAware], call) -> None:
        failures: List[Tuple[Any, BaseException]] = []
        for listener in listeners:
            try:
                call(listener)
            except Exception as e:
                logger.error("Listener %r failed handling %s: %s", listener, type(event).__name__, e)
                failures.append((listener, e))
        if failures:
            raise EventDeliveryError(event, failures) from failures[0][1]
