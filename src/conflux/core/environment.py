"""Environment management for raw configuration sources."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from .accessor import SourceAccessor
from .config_loader import ConfigLoader
from .events import ConfigEventManager
from .factory import ConfigProviderFactory
from .filters import Filter
from .prefix import PrefixRegistry
from .source import RegisteredSource, Source

logger = logging.getLogger(__name__)


class Environment:
    """Named, ordered collection of raw configuration sources.

    Sources declared for the environment in conflux.yaml are registered
    first, then any explicitly provided ones; later sources override earlier
    ones.
    """

    def __init__(
        self,
        name: str,
        sources: Optional[List[Union[str, Path]]] = None,
        config_path: Optional[Union[str, Path]] = None,
    ):
        """Initialize an Environment.

        Args:
            name: Name of the environment (e.g., "production", "development").
            sources: Optional list of paths or URIs to register after the
                ones declared in conflux.yaml.
            config_path: Optional path to conflux.yaml. If not provided,
                searches the current and parent directories.

        Raises:
            ValueError: If conflux.yaml exists but is invalid.
        """
        self.name = name
        self._registered: List[RegisteredSource] = []
        self._config_loader = ConfigLoader(config_path)

        self._load_from_config_file()

        if sources:
            self.register_sources(*sources)

    def _load_from_config_file(self) -> None:
        for source_config in self._config_loader.get_sources(self.name):
            try:
                parsed = self._config_loader.parse_source(source_config)
                self.register_source(
                    parsed["path_or_uri"],
                    filter=parsed.get("filter"),
                    depth=parsed.get("depth"),
                    name=parsed.get("name"),
                )
            except ValueError as e:
                logger.warning(
                    "Skipping source %r of environment %s: %s", source_config, self.name, e
                )

    @property
    def config_file_path(self) -> Optional[Path]:
        """Path of the conflux.yaml in use, if any."""
        return self._config_loader.config_path

    @property
    def registered_sources(self) -> List[RegisteredSource]:
        return list(self._registered)

    def register_sources(self, *paths_or_uris: Union[str, Path]) -> None:
        for item in paths_or_uris:
            self.register_source(item)

    def register_source(
        self,
        path_or_uri: Union[str, Path],
        *,
        filter: Optional[Filter] = None,
        depth: Optional[int] = None,
        name: Optional[str] = None,
    ) -> None:
        """Register a single raw configuration source.

        Args:
            path_or_uri: File path or URI of the source.
            filter: Optional filter to apply to source keys.
            depth: Optional depth limit for hierarchical sources.
            name: Optional custom name for the source.

        Raises:
            ValueError: If the source type is not supported.
        """
        src = self._create_source(path_or_uri, name=name)
        self._registered.append(RegisteredSource(source=src, filter=filter, depth=depth))

    def add_source(self, source: Source, *, filter: Optional[Filter] = None) -> None:
        """Register a ready-made source instance."""
        self._registered.append(RegisteredSource(source=source, filter=filter))

    def _create_source(
        self,
        path_or_uri: Union[str, Path],
        name: Optional[str]
    ) -> Source:
        s = str(path_or_uri)
        # Lazy imports keep optional clients out of module load time
        if s.startswith(("redis://", "rediss://")):
            from ..sources.redis_kv import RedisKeyValueSource
            return RedisKeyValueSource(s, name=name)
        if s.startswith("github://"):
            from ..sources.github_env import GitHubEnvSource
            return GitHubEnvSource(s, name=name)
        p = Path(s)
        suffix = p.suffix.lower()
        if suffix == ".ini":
            from ..sources.ini_file import IniFileSource
            return IniFileSource(p, name=name)
        if suffix in {".yaml", ".yml"}:
            from ..sources.yaml_file import YamlFileSource
            return YamlFileSource(p, name=name)
        if suffix == ".json":
            from ..sources.json_file import JsonFileSource
            return JsonFileSource(p, name=name)
        if suffix == ".env" or p.name.startswith(".env") or (suffix == "" and p.exists()):
            from ..sources.env_file import EnvFileSource
            return EnvFileSource(p, name=name)
        raise ValueError(f"Unsupported source type: {path_or_uri}")

    def accessor(self) -> SourceAccessor:
        """Accessor reading this environment's sources in registration order."""
        return SourceAccessor(self._registered)

    def provider_factory(
        self,
        event_manager: Optional[ConfigEventManager] = None,
        prefixes: Optional[PrefixRegistry] = None,
    ) -> ConfigProviderFactory:
        return ConfigProviderFactory(self.accessor(), event_manager, prefixes)
