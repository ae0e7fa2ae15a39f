"""Type definitions shared across the Conflux package."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Hashable

# A shape identifier is any hashable token supplied at registration time:
# a class, a string, an enum member.
Shape = Hashable


def shape_name(shape: Any) -> str:
    """Render a shape identifier for logs and error messages."""
    if shape is None:
        return "<unnamed>"
    if isinstance(shape, type):
        return f"{shape.__module__}.{shape.__qualname__}"
    return str(shape)


@dataclass(frozen=True)
class ProvenanceRecord:
    """Record tracking the source of a raw property value.

    Attributes:
        key: Flat property key.
        source_id: ID of the source this value came from.
        source_key: Original key in the source.
        timestamp_loaded: When this value was loaded.
    """

    key: str
    source_id: str
    source_key: str
    timestamp_loaded: datetime
