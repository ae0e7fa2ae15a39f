"""Providers composed from other providers."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .cache import CachingConfigProvider
from .errors import NoProviderForShape
from .events import ConfigChangedEvent, ConfigEventManager
from .provider import ConfigProvider, DelegatingConfigProvider
from .types import Shape, shape_name

logger = logging.getLogger(__name__)

Member = Union[ConfigProvider, Tuple[Shape, ConfigProvider]]


def _unwrap(provider: Any) -> Any:
    while isinstance(provider, DelegatingConfigProvider):
        provider = provider.delegate
    return provider


class ProviderLookup:
    """Lookup-by-shape facade handed to composite builders.

    Members are scanned in registration order and the first one registered
    under the requested shape is probed. Values are always fresh.
    """

    def __init__(self, members: Sequence[Tuple[Shape, ConfigProvider]]):
        self._members = members

    def get(self, shape: Shape) -> Any:
        for member_shape, provider in self._members:
            if member_shape == shape:
                return provider.probe()
        raise NoProviderForShape(shape, self.shapes())

    def __getitem__(self, shape: Shape) -> Any:
        return self.get(shape)

    def __contains__(self, shape: Shape) -> bool:
        return any(member_shape == shape for member_shape, _ in self._members)

    def shapes(self) -> List[Shape]:
        return [member_shape for member_shape, _ in self._members]


class CompositeConfigProvider(CachingConfigProvider):
    """Provider whose value is built from several other providers.

    Args:
        members: Providers with a ``shape``, or explicit ``(shape, provider)``
            pairs, in lookup precedence order.
        builder: Receives a ``ProviderLookup`` and returns the public value.
        event_manager: Channel for change events.
        shape: Public shape identifier of the composite itself.

    Raises:
        ValueError: If a member has no shape identifier.
    """

    def __init__(
        self,
        members: Iterable[Member],
        builder: Callable[[ProviderLookup], Any],
        event_manager: ConfigEventManager,
        shape: Optional[Shape] = None,
    ):
        super().__init__(event_manager, shape=shape)
        self._members = self._normalize(members)
        self._builder = builder

    @staticmethod
    def _normalize(members: Iterable[Member]) -> List[Tuple[Shape, ConfigProvider]]:
        normalized: List[Tuple[Shape, ConfigProvider]] = []
        for member in members:
            if isinstance(member, tuple):
                member_shape, provider = member
            else:
                member_shape, provider = getattr(member, "shape", None), member
            if member_shape is None:
                raise ValueError(
                    f"Config provider {provider!r} has no shape identifier; "
                    "register it as a (shape, provider) pair"
                )
            normalized.append((member_shape, provider))
        return normalized

    @property
    def members(self) -> List[Tuple[Shape, ConfigProvider]]:
        return list(self._members)

    def probe(self) -> Any:
        return self._builder(ProviderLookup(self._members))

    def on_config_changed(self, event: ConfigChangedEvent) -> None:
        for _, provider in self._members:
            if event.origin is provider or event.origin is _unwrap(provider):
                logger.debug("%r refreshing after change in member %r", self, event.origin)
                self._cascade_refresh(event)
                return

    def describe(self) -> str:
        members = ", ".join(shape_name(s) for s, _ in self._members)
        return f"{shape_name(self.shape)} composed of [{members}]"
