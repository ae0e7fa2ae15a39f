"""Configuration loader for conflux.yaml files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .filters import Filter

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "conflux.yaml"


class ConfigLoader:
    """Handles loading and parsing of conflux.yaml configuration files.

    Expected layout::

        environments:
          production:
            sources:
              - path: config/base.yaml
              - path: .env
                filter:
                  include_regex: "^app\\."
              - uri: redis://localhost:6379/0
                name: live-overrides
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize config loader.

        Args:
            config_path: Path to conflux.yaml file. If None, looks in current
                directory and parent directories.
        """
        self.config_path = self._find_config_file(config_path)
        self._config: Optional[Dict[str, Any]] = None

    def _find_config_file(
        self, config_path: Optional[Union[str, Path]] = None
    ) -> Optional[Path]:
        if config_path is not None:
            path = Path(config_path)
            if path.exists():
                return path
            logger.warning("Config file %s does not exist", path)
            return None

        current = Path.cwd()
        for directory in (current, *current.parents):
            candidate = directory / CONFIG_FILE_NAME
            if candidate.exists():
                return candidate
        return None

    def load(self) -> Dict[str, Any]:
        """Load the configuration file.

        Returns:
            Parsed configuration dictionary, or empty dict if no config file.

        Raises:
            ValueError: If the config file is invalid YAML or can't be read.
        """
        if self.config_path is None:
            return {}

        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE_NAME} at {self.config_path}: {e}") from e
        except OSError as e:
            raise ValueError(f"Can't read {CONFIG_FILE_NAME} at {self.config_path}: {e}") from e
        if not isinstance(loaded, dict):
            raise ValueError(f"{self.config_path} must contain a mapping at the top level")
        self._config = loaded
        return self._config

    def get_environment_config(
        self, environment_name: str
    ) -> Optional[Dict[str, Any]]:
        config = self.load()
        environments = config.get("environments") or {}
        return environments.get(environment_name)

    def get_sources(self, environment_name: str) -> List[Dict[str, Any]]:
        env_config = self.get_environment_config(environment_name)
        if env_config is None:
            return []
        return env_config.get("sources") or []

    def parse_source(self, source_config: Dict[str, Any]) -> Dict[str, Any]:
        """Parse a source configuration into components.

        Args:
            source_config: Raw source configuration from YAML.

        Returns:
            Dictionary with ``path_or_uri`` and optional ``filter``, ``depth``
            and ``name`` entries.

        Raises:
            ValueError: If the entry has neither ``path`` nor ``uri``.
        """
        result: Dict[str, Any] = {}

        if "path" in source_config:
            path = Path(source_config["path"])
            if not path.is_absolute() and self.config_path is not None:
                path = self.config_path.parent / path
            result["path_or_uri"] = path
        elif "uri" in source_config:
            result["path_or_uri"] = source_config["uri"]
        else:
            raise ValueError("Source must have either 'path' or 'uri'")

        filter_config = source_config.get("filter")
        if filter_config:
            result["filter"] = Filter.from_dict(filter_config)

        # depth can be in filter or at source level
        if "depth" in source_config:
            result["depth"] = source_config["depth"]
        elif filter_config and "depth" in filter_config:
            result["depth"] = filter_config["depth"]

        if "name" in source_config:
            result["name"] = source_config["name"]

        return result
