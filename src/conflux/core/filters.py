"""Key filtering and flattening of hierarchical raw data."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Pattern, Tuple


@dataclass(frozen=True)
class Filter:
    """Filter for including configuration keys from a source.

    Attributes:
        include_regex: Only keys matching this pattern are kept.
        hierarchical_spec: Nested ``{"a": {"b": True}}`` spec of kept subtrees.
        depth: Maximum nesting depth flattened by hierarchical sources.
    """

    include_regex: Optional[Pattern[str]] = None
    hierarchical_spec: Optional[Dict[str, Any]] = None
    depth: Optional[int] = None

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> Optional["Filter"]:
        """Create a Filter from a dictionary, None if ``d`` is empty."""
        if not d:
            return None
        regex = d.get("include_regex")
        compiled: Optional[Pattern[str]] = (
            re.compile(regex) if isinstance(regex, str) else None
        )
        return Filter(
            include_regex=compiled,
            hierarchical_spec=d.get("hierarchical_spec"),
            depth=d.get("depth"),
        )


def should_include_key(flat_key: str, flt: Optional[Filter]) -> bool:
    if flt is None:
        return True
    if flt.include_regex and not flt.include_regex.search(flat_key):
        return False
    return True


def iter_hierarchical(
    data: Dict[str, Any],
    parent: str = "",
    depth: Optional[int] = None,
) -> Iterator[Tuple[str, Any]]:
    """Flatten nested data into dotted keys.

    Mappings nest with ``.``, lists with ``[i]``: ``{"a": {"b": [1, 2]}}``
    yields ``("a.b[0]", 1)`` and ``("a.b[1]", 2)``. Once ``depth`` is
    exhausted the remaining subtree is emitted as a single value.
    """
    if depth is not None and depth < 0:
        return

    for key, value in data.items():
        full_key = str(key) if not parent else f"{parent}.{key}"
        yield from _iter_value(full_key, value, depth)


def _iter_value(key: str, value: Any, depth: Optional[int]) -> Iterator[Tuple[str, Any]]:
    can_descend = depth is None or depth > 0
    next_depth = None if depth is None else depth - 1
    if isinstance(value, dict) and can_descend:
        yield from iter_hierarchical(value, key, next_depth)
    elif isinstance(value, list) and can_descend:
        for i, item in enumerate(value):
            yield from _iter_value(f"{key}[{i}]", item, next_depth)
    else:
        yield key, value


def filter_hierarchical(
    data: Dict[str, Any],
    spec: Optional[Dict[str, Any]],
    depth: Optional[int],
) -> Dict[str, Any]:
    """Flatten ``data`` keeping only the subtrees enabled in ``spec``."""
    flattened = dict(iter_hierarchical(data, depth=depth))
    if spec is None:
        return flattened

    def include_path(path: str) -> bool:
        node: Any = spec
        for part in path.split("."):
            part = part.split("[", 1)[0]
            if not isinstance(node, dict) or part not in node:
                return False
            node = node[part]
            if node is True:
                return True
        return node is True

    return {k: v for k, v in flattened.items() if include_path(k)}
