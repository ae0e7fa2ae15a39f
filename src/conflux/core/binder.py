"""Binding of flat dotted properties to typed raw configuration shapes.

Flat keys are folded into a nested tree first (``a.b`` nests mappings,
``key[i]`` builds lists), then pydantic validates the sub-tree under the
prefix against the raw shape. Any type pydantic accepts works as a shape:
dataclasses, pydantic models, ``int``, ``Dict[str, int]`` and so on.
"""

from __future__ import annotations

import copy
import dataclasses
import re
import typing
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, PydanticUserError, TypeAdapter, ValidationError

from .errors import BindingError, NotFound
from .types import shape_name

Token = Union[str, int]

_TOKEN = re.compile(r"([^.\[\]]+)|\[(\d+)\]")
_ABSENT = object()


def split_key(key: str) -> List[Token]:
    """``servers[0].host`` -> ``["servers", 0, "host"]``."""
    return [int(index) if index else name for name, index in _TOKEN.findall(key)]


def format_key(tokens: Sequence[Any]) -> str:
    key = ""
    for token in tokens:
        if isinstance(token, int):
            key += f"[{token}]"
        else:
            key = f"{key}.{token}" if key else str(token)
    return key


def unflatten(properties: Mapping[str, Any]) -> Dict[str, Any]:
    """Fold flat dotted keys into nested dicts and ``[i]`` segments into lists.

    A list ends at its first missing index. When a key holds a value and
    also has children, the children win.
    """
    root: Dict[Token, Any] = {}
    for key, value in properties.items():
        tokens = split_key(key)
        if not tokens:
            continue
        node = root
        for token in tokens[:-1]:
            child = node.get(token)
            if not isinstance(child, dict):
                child = node[token] = {}
            node = child
        if isinstance(node.get(tokens[-1]), dict):
            continue
        node[tokens[-1]] = copy.deepcopy(value) if isinstance(value, dict) else value
    return _listify(root)


def _listify(node: Any) -> Any:
    if not isinstance(node, dict):
        return node
    if node and all(isinstance(k, int) for k in node):
        items: List[Any] = []
        while len(items) in node:
            items.append(_listify(node[len(items)]))
        return items
    return {k: _listify(v) for k, v in node.items() if not isinstance(k, int)}


def _descend(tree: Any, tokens: Sequence[Token]) -> Any:
    node = tree
    for token in tokens:
        if isinstance(token, int):
            if not isinstance(node, list) or token >= len(node):
                return _ABSENT
        elif not isinstance(node, dict) or token not in node:
            return _ABSENT
        node = node[token]
    return node


def _has_fields(shape: Any) -> bool:
    if dataclasses.is_dataclass(shape):
        return True
    return isinstance(shape, type) and issubclass(shape, BaseModel)


@lru_cache(maxsize=None)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def _unresolved(shape: Any, error: Exception) -> BindingError:
    detail = str(error)
    if _has_fields(shape):
        # get_type_hints names the first annotation it can't evaluate
        try:
            typing.get_type_hints(shape)
        except NameError as e:
            detail = str(e)
    return BindingError(
        f"Can't resolve the annotations of {shape_name(shape)}: {detail}. "
        "Raw shapes and the types they reference must be importable module-level names"
    )


def bind(shape: Any, properties: Mapping[str, Any], prefix: Optional[str] = None) -> Any:
    """Build an instance of ``shape`` from flat ``properties``.

    A shape with fields binds against the sub-tree under ``prefix`` (an empty
    one when nothing is stored there, so all-default shapes still bind).
    Other shapes validate the single value or sub-tree under ``prefix``.

    Raises:
        NotFound: If a mandatory property has no value.
        BindingError: If a value doesn't validate against the declared type,
            or the shape's annotations can't be resolved.
    """
    tokens = split_key(prefix or "")
    value = _descend(unflatten(properties), tokens)
    if value is _ABSENT:
        if not _has_fields(shape):
            key = prefix or ""
            raise NotFound(key, f"No value found for {shape_name(shape)} under '{key}'")
        value = {}

    try:
        return _adapter(shape).validate_python(value)
    except ValidationError as e:
        raise _translate(e, shape, tokens) from e
    except (NameError, PydanticUserError) as e:
        raise _unresolved(shape, e) from e


def _translate(error: ValidationError, shape: Any, prefix: List[Token]) -> Exception:
    details = error.errors()
    for detail in details:
        if detail["type"] == "missing":
            key = format_key([*prefix, *detail["loc"]])
            return NotFound(key, f"No value for mandatory property '{key}' of {shape_name(shape)}")
    problems = "; ".join(
        f"'{format_key([*prefix, *d['loc']]) or '<root>'}': {d['msg']} (got {d.get('input')!r})"
        for d in details
    )
    return BindingError(f"Can't bind {shape_name(shape)}: {problems}")
