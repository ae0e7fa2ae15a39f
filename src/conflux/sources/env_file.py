"""Environment file (.env) raw configuration source."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from ..core.errors import SourceUnavailable
from ..core.filters import Filter, should_include_key
from ..core.source import normalize_variable_name
from ..dotenv import DotEnv


class EnvFileSource:
    """Raw configuration source for .env files.

    Variable names map to property keys with ``__`` as the nesting
    separator: ``DATABASE__HOST=db`` is served as ``database.host``.
    """

    def __init__(self, path: Path, name: Optional[str] = None):
        """Initialize EnvFileSource.

        Args:
            path: Path to the .env file.
            name: Optional custom name for this source.
        """
        self.path = Path(path)
        self.name = name or f"env:{self.path.name}"
        self.id = str(self.path.resolve())
        self.extension = ".env"

    def load(
        self,
        filter: Optional[Filter] = None,
        depth: Optional[int] = None
    ) -> Dict[str, Any]:
        """Load properties from the env file.

        Args:
            filter: Optional filter to apply to keys.
            depth: Not used for env files (flat structure).

        Returns:
            Dictionary of property values.

        Raises:
            SourceUnavailable: If the file exists but can't be read.
        """
        try:
            raw = DotEnv(self.path).values()
        except OSError as e:
            raise SourceUnavailable(f"Can't read env file {self.path}: {e}") from e
        values = {normalize_variable_name(k): v for k, v in raw.items()}
        if filter:
            return {k: v for k, v in values.items() if should_include_key(k, filter)}
        return values
