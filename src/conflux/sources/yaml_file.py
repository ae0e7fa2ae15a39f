from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core.errors import SourceUnavailable
from ..core.filters import Filter, filter_hierarchical, iter_hierarchical, should_include_key


class YamlFileSource:
    def __init__(self, path: Path, name: Optional[str] = None):
        self.path = Path(path)
        self.name = name or f"yaml:{self.path.name}"
        self.id = str(self.path.resolve())
        self.extension = ".yaml"

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise SourceUnavailable(f"Can't read YAML file {self.path}: {e}") from e
        if not isinstance(data, dict):
            return {}
        return data

    def load(self, filter: Optional[Filter] = None, depth: Optional[int] = None) -> Dict[str, Any]:
        data = self._read()
        if filter and (filter.hierarchical_spec is not None or filter.depth is not None):
            flattened = filter_hierarchical(data, filter.hierarchical_spec, filter.depth)
        else:
            flattened = dict(iter_hierarchical(data, depth=depth))
        if filter:
            return {k: v for k, v in flattened.items() if should_include_key(k, filter)}
        return flattened
