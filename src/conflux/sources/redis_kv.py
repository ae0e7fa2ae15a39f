from __future__ import annotations

from typing import Any, Dict, Optional

import redis

from ..core.errors import SourceUnavailable
from ..core.filters import Filter, should_include_key


class RedisKeyValueSource:
    """Raw properties stored as plain Redis string keys.

    With ``prefix="app:"`` the Redis key ``app:database.host`` is served as
    ``database.host``.
    """

    def __init__(
        self,
        uri: str,
        name: Optional[str] = None,
        prefix: str = "",
        client: Optional["redis.Redis"] = None,
    ):
        self.uri = uri
        self.client = client if client is not None else redis.Redis.from_url(uri, decode_responses=True)
        self.name = name or f"redis:{uri}"
        self.id = uri
        self.extension = None
        self.prefix = prefix

    def _prefixed(self, key: str) -> str:
        return f"{self.prefix}{key}" if self.prefix else key

    def _unprefixed(self, key: str) -> str:
        if self.prefix and key.startswith(self.prefix):
            return key[len(self.prefix) :]
        return key

    def load(self, filter: Optional[Filter] = None, depth: Optional[int] = None) -> Dict[str, Any]:
        try:
            keys = list(self.client.scan_iter(match=self._prefixed("*")))
            values = self.client.mget(keys) if keys else []
        except redis.RedisError as e:
            raise SourceUnavailable(f"Can't read from {self.name}: {e}") from e
        kv: Dict[str, Any] = {}
        for k, v in zip(keys, values):
            if v is None:
                # expired between SCAN and MGET
                continue
            kv[self._unprefixed(k)] = v
        if filter:
            return {k: v for k, v in kv.items() if should_include_key(k, filter)}
        return kv
