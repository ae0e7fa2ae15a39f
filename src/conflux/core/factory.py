"""Wiring of providers to an accessor and an event manager."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from .accessor import RawAccessor
from .composite import CompositeConfigProvider, Member, ProviderLookup
from .events import ConfigEventManager, EventBus
from .prefix import PrefixRegistry, default_registry
from .provider import Raw2PublicConfigProvider
from .types import Shape

logger = logging.getLogger(__name__)


def _identity(raw: Any) -> Any:
    return raw


class ConfigProviderFactory:
    """Builds providers and subscribes them to a shared event manager.

    Args:
        accessor: Resolves raw values for leaf providers.
        event_manager: Channel every built provider publishes to and listens on.
            A private ``EventBus`` is created when omitted.
        prefixes: Registry consulted when no explicit prefix is given.
    """

    def __init__(
        self,
        accessor: RawAccessor,
        event_manager: Optional[ConfigEventManager] = None,
        prefixes: Optional[PrefixRegistry] = None,
    ):
        self.accessor = accessor
        self.event_manager: ConfigEventManager = event_manager or EventBus()
        self.prefixes = prefixes or default_registry

    def build(
        self,
        raw_shape: Shape,
        builder: Optional[Callable[[Any], Any]] = None,
        *,
        prefix: Optional[str] = None,
        shape: Optional[Shape] = None,
    ) -> Raw2PublicConfigProvider:
        """Build a provider mapping ``raw_shape`` to a public value.

        Without a builder the raw value is served as is, and the public shape
        defaults to ``raw_shape``.
        """
        if builder is None:
            builder = _identity
            if shape is None:
                shape = raw_shape
        if prefix is None:
            prefix = self.prefixes.resolve(raw_shape)
        provider = Raw2PublicConfigProvider(
            raw_shape=raw_shape,
            builder=builder,
            accessor=self.accessor,
            event_manager=self.event_manager,
            prefix=prefix,
            shape=shape,
        )
        self.event_manager.subscribe(provider)
        logger.debug("Built %r", provider)
        return provider

    def build_composite(
        self,
        members: Iterable[Member],
        builder: Callable[[ProviderLookup], Any],
        *,
        shape: Optional[Shape] = None,
    ) -> CompositeConfigProvider:
        provider = CompositeConfigProvider(
            members, builder, self.event_manager, shape=shape
        )
        self.event_manager.subscribe(provider)
        logger.debug("Built %r", provider)
        return provider

    def refresh_all(self) -> None:
        """Ask every subscribed provider to refresh."""
        self.event_manager.broadcast_refresh()
