"""Source protocol and registration for raw configuration sources."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from .filters import Filter

_INDEX_SEGMENT = re.compile(r"\.(\d+)(?=\.|$)")


class Source(Protocol):
    """Read-only backing store of flat, dot-separated raw properties.

    Sources raise ``SourceUnavailable`` when the store can't be read; a store
    that doesn't exist yet loads as empty.
    """

    id: str
    name: str
    extension: Optional[str]

    def load(
        self,
        filter: Optional[Filter] = None,
        depth: Optional[int] = None
    ) -> Dict[str, Any]:
        """Load all properties from the source.

        Args:
            filter: Optional filter to apply to keys.
            depth: Optional depth limit for hierarchical sources.

        Returns:
            Dictionary of flat property keys to values.
        """
        ...


@dataclass
class RegisteredSource:
    """A source registered with an Environment or accessor.

    Attributes:
        source: The source instance.
        filter: Optional filter to apply to source keys.
        depth: Optional depth limit for hierarchical sources.
    """

    source: Source
    filter: Optional[Filter] = None
    depth: Optional[int] = None


def normalize_variable_name(name: str) -> str:
    """Map an environment-variable style name to a property key.

    ``APP__DB__HOST`` becomes ``app.db.host`` and numeric segments become
    list indices, so ``SERVERS__0__HOST`` becomes ``servers[0].host``.
    """
    key = name.strip().lower().replace("__", ".")
    return _INDEX_SEGMENT.sub(r"[\1]", key)
