"""Raw accessors resolving raw configuration shapes from a backing store."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple, Union

from .binder import bind
from .merge import merge_sources
from .source import RegisteredSource, Source
from .types import ProvenanceRecord, Shape

logger = logging.getLogger(__name__)


class RawAccessor(Protocol):
    """Resolves a raw value of the requested shape, optionally under a prefix.

    Implementations are synchronous and may raise ``SourceUnavailable`` or
    ``NotFound``; callers don't retry.
    """

    def probe_raw(self, raw_shape: Shape, prefix: Optional[str] = None) -> Any:
        ...


class SourceAccessor:
    """Accessor reading flat properties from an ordered list of sources.

    Sources are re-read and merged on every call, later sources overriding
    earlier ones, so each ``probe_raw`` reflects the current backing store.
    """

    def __init__(self, sources: Iterable[Union[Source, RegisteredSource]]):
        self.registered_sources: List[RegisteredSource] = [
            s if isinstance(s, RegisteredSource) else RegisteredSource(source=s)
            for s in sources
        ]

    def properties(self) -> Tuple[Dict[str, Any], Dict[str, ProvenanceRecord]]:
        """Merged flat properties and their provenance."""
        return merge_sources(self.registered_sources)

    def probe_raw(self, raw_shape: Shape, prefix: Optional[str] = None) -> Any:
        effective, _ = self.properties()
        logger.debug(
            "Binding %r under prefix %r from %d properties", raw_shape, prefix, len(effective)
        )
        return bind(raw_shape, effective, prefix)


class StaticAccessor:
    """Accessor over an in-memory property mapping.

    The mapping is read on every call, so mutating it is how a test or an
    embedding application simulates a changing backing store.
    """

    def __init__(self, properties: Optional[Dict[str, Any]] = None):
        self.properties: Dict[str, Any] = properties if properties is not None else {}

    def probe_raw(self, raw_shape: Shape, prefix: Optional[str] = None) -> Any:
        return bind(raw_shape, dict(self.properties), prefix)
