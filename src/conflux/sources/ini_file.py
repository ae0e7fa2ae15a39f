from __future__ import annotations

import configparser
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.errors import SourceUnavailable
from ..core.filters import Filter, should_include_key


class IniFileSource:
    """Raw configuration source for INI files, keyed ``section.option``."""

    def __init__(self, path: Path, name: Optional[str] = None):
        self.path = Path(path)
        self.name = name or f"ini:{self.path.name}"
        self.id = str(self.path.resolve())
        self.extension = ".ini"

    def _flatten(self, parser: configparser.ConfigParser) -> Dict[str, Any]:
        flat: Dict[str, Any] = {}
        for key, value in parser.defaults().items():
            flat[key] = value
        # DEFAULT options are inherited by every section
        for section in parser.sections():
            for key, value in parser.items(section):
                flat[f"{section}.{key}"] = value
        return flat

    def load(self, filter: Optional[Filter] = None, depth: Optional[int] = None) -> Dict[str, Any]:
        parser = configparser.ConfigParser(interpolation=None)
        if self.path.exists():
            try:
                parser.read(self.path, encoding="utf-8")
            except (OSError, configparser.Error) as e:
                raise SourceUnavailable(f"Can't read INI file {self.path}: {e}") from e
        flat = self._flatten(parser)
        if filter:
            return {k: v for k, v in flat.items() if should_include_key(k, filter)}
        return flat
