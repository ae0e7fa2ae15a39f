"""Merging logic for multiple raw configuration sources."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from .filters import should_include_key
from .source import RegisteredSource
from .types import ProvenanceRecord

logger = logging.getLogger(__name__)


def merge_sources(
    registered_sources: List[RegisteredSource],
) -> Tuple[Dict[str, Any], Dict[str, ProvenanceRecord]]:
    """Merge multiple sources into a single flat property map.

    Sources are merged in order with later sources overriding
    earlier ones for the same keys.

    Args:
        registered_sources: List of registered sources to merge.

    Returns:
        Tuple of (effective, provenance) where:
        - effective is the merged property dictionary
        - provenance tracks which source each key came from
    """
    effective: Dict[str, Any] = {}
    provenance: Dict[str, ProvenanceRecord] = {}
    loaded_at = datetime.now(timezone.utc)

    for rs in registered_sources:
        payload = rs.source.load(filter=rs.filter, depth=rs.depth)
        logger.debug("Loaded %d properties from %s", len(payload), rs.source.name)
        for key, value in payload.items():
            if not should_include_key(key, rs.filter):
                continue
            # last source wins
            effective[key] = value
            provenance[key] = ProvenanceRecord(
                key=key,
                source_id=rs.source.id,
                source_key=key,
                timestamp_loaded=loaded_at,
            )

    return effective, provenance
