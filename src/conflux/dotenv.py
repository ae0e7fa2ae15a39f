"""Read-only parsing of .env files"""

import os
import re
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple, Union

_LINE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)$")
_BRACED = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")
_SIMPLE = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")


class DotEnv:
    """Parse KEY=VALUE lines from a .env file without touching ``os.environ``.

    ``${VAR}`` and ``$VAR`` references expand against keys defined earlier in
    the same file first, then the process environment.
    """

    def __init__(
        self,
        dotenv_path: Union[str, Path],
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.dotenv_path = Path(dotenv_path)
        self._environ = os.environ if environ is None else environ

    def _parse_line(self, line: str, known: Dict[str, str]) -> Optional[Tuple[str, str]]:
        """Parse a single line from .env file.

        Args:
            line: Line to parse
            known: Values parsed so far, used for variable expansion

        Returns:
            Tuple of (key, value) or None if line should be ignored
        """
        line = line.strip()

        # Skip empty lines and comments
        if not line or line.startswith("#"):
            return None

        match = _LINE.match(line)
        if not match:
            return None

        key, value = match.groups()

        if value.startswith('"') and value.endswith('"') and len(value) >= 2:
            value = value[1:-1]
            value = (
                value.replace('\\"', '"')
                .replace("\\n", "\n")
                .replace("\\r", "\r")
                .replace("\\t", "\t")
            )
        elif value.startswith("'") and value.endswith("'") and len(value) >= 2:
            # single quotes are literal, no expansion
            return key, value[1:-1]
        else:
            value = value.split(" #", 1)[0].rstrip()

        return key, self._expand_variables(value, known)

    def _expand_variables(self, value: str, known: Dict[str, str]) -> str:
        def lookup(match: "re.Match[str]") -> str:
            name = match.group(1)
            if name in known:
                return known[name]
            return self._environ.get(name, "")

        value = _BRACED.sub(lookup, value)
        return _SIMPLE.sub(lookup, value)

    def values(self) -> Dict[str, str]:
        """Return the parsed key/value pairs, empty if the file doesn't exist.

        Raises:
            OSError: If the file exists but can't be read.
        """
        if not self.dotenv_path.exists():
            return {}

        parsed: Dict[str, str] = {}
        with open(self.dotenv_path, "r", encoding="utf-8") as f:
            for line in f:
                result = self._parse_line(line, parsed)
                if result is not None:
                    key, value = result
                    parsed[key] = value
        return parsed
