"""Configuration providers backed by a raw accessor."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

from .accessor import RawAccessor
from .cache import CachingConfigProvider
from .events import ConfigChangedEvent, ConfigEventManager
from .types import Shape, shape_name

logger = logging.getLogger(__name__)


class ConfigProvider(Protocol):
    """Unit of cached, typed configuration."""

    shape: Optional[Shape]

    def get_data(self) -> Any:
        """Return the cached value, populating the cache on first access."""
        ...

    def probe(self) -> Any:
        """Compute an up-to-date value without touching the cache."""
        ...

    def refresh(self) -> None:
        """Re-probe and, on change, update the cache and publish an event."""
        ...


class Raw2PublicConfigProvider(CachingConfigProvider):
    """Provider that binds a raw shape and maps it to a public value.

    Args:
        raw_shape: Shape requested from the accessor.
        builder: Maps the raw value to the public value.
        accessor: Resolves raw values from the backing store.
        event_manager: Channel for change events.
        prefix: Namespace prefix passed to the accessor, None for the whole store.
        shape: Public shape identifier used for composite lookups.
    """

    def __init__(
        self,
        raw_shape: Shape,
        builder: Callable[[Any], Any],
        accessor: RawAccessor,
        event_manager: ConfigEventManager,
        prefix: Optional[str] = None,
        shape: Optional[Shape] = None,
    ):
        super().__init__(event_manager, shape=shape)
        self.raw_shape = raw_shape
        self.prefix = prefix
        self._builder = builder
        self._accessor = accessor

    def probe(self) -> Any:
        raw = self._accessor.probe_raw(self.raw_shape, self.prefix)
        return self._builder(raw)

    def on_config_changed(self, event: ConfigChangedEvent) -> None:
        if event.origin is self:
            return
        # siblings wrapping the same raw shape, or an upstream provider whose
        # public value is this provider's raw shape
        if event.raw_shape == self.raw_shape or event.shape == self.raw_shape:
            logger.debug("%r refreshing after change in %r", self, event.origin)
            self._cascade_refresh(event)

    def describe(self) -> str:
        described = f"{shape_name(self.shape)} from raw {shape_name(self.raw_shape)}"
        if self.prefix:
            described += f" under '{self.prefix}'"
        return described

    def _change_event(self, previous: Any, current: Any) -> ConfigChangedEvent:
        return ConfigChangedEvent(
            previous=previous,
            current=current,
            origin=self,
            shape=self.shape,
            raw_shape=self.raw_shape,
        )


class DelegatingConfigProvider:
    """Forwards every call to another provider.

    Lets an application declare one class per provider instead of wiring
    large builder functions inline::

        class DatabaseConfigProvider(DelegatingConfigProvider):
            def __init__(self, factory):
                super().__init__(factory.build(RawDatabase, to_database_config))
    """

    def __init__(self, delegate: ConfigProvider):
        self._delegate = delegate

    @property
    def delegate(self) -> ConfigProvider:
        return self._delegate

    @property
    def shape(self) -> Optional[Shape]:
        return self._delegate.shape

    def get_data(self) -> Any:
        return self._delegate.get_data()

    def probe(self) -> Any:
        return self._delegate.probe()

    def refresh(self) -> None:
        self._delegate.refresh()
