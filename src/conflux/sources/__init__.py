"""Raw configuration source implementations.

This package contains read-only sources backed by files (env, yaml, json,
ini) and remote stores (redis, github). Sources with third-party
dependencies are imported lazily by ``Environment``.
"""

from .env_file import EnvFileSource
from .ini_file import IniFileSource
from .json_file import JsonFileSource
from .yaml_file import YamlFileSource

__all__ = [
    "EnvFileSource",
    "IniFileSource",
    "JsonFileSource",
    "YamlFileSource",
]
