from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..core.errors import SourceUnavailable
from ..core.filters import Filter, should_include_key
from ..core.source import normalize_variable_name

PAGE_SIZE = 100


@dataclass
class _GitHubContext:
    owner: str
    repo: str
    environment: str
    token: str


class GitHubEnvSource:
    """GitHub environment variables as a read-only raw configuration source.

    URI format: github://owner/repo#environment
    Token: from env var GITHUB_TOKEN unless provided explicitly via `token` arg.
    Variable names are normalized like .env keys (``DB__HOST`` -> ``db.host``).
    """

    def __init__(
        self,
        uri: str,
        name: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.uri = uri
        self.ctx = self._parse_uri(uri, token)
        self.name = name or f"github:{self.ctx.owner}/{self.ctx.repo}#{self.ctx.environment}"
        self.id = f"{self.ctx.owner}/{self.ctx.repo}#{self.ctx.environment}"
        self.extension = None
        self._client = httpx.Client(
            base_url="https://api.github.com",
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {self.ctx.token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=20.0,
            transport=transport,
        )

    def _parse_uri(self, uri: str, token: Optional[str]) -> _GitHubContext:
        if not uri.startswith("github://"):
            raise ValueError("GitHubEnvSource requires URI starting with github://")
        rest = uri[len("github://") :]
        if "#" in rest:
            path, env = rest.split("#", 1)
        else:
            raise ValueError("GitHub URI must include #environment suffix, e.g., github://owner/repo#production")
        if "/" not in path:
            raise ValueError("GitHub URI path must be owner/repo")
        owner, repo = path.split("/", 1)
        token_val = token or os.getenv("GITHUB_TOKEN")
        if not token_val:
            raise ValueError("GITHUB_TOKEN not set and token not provided for GitHubEnvSource")
        return _GitHubContext(owner=owner, repo=repo, environment=env, token=token_val)

    def _list_env_variables(self) -> Dict[str, str]:
        vars_all: Dict[str, str] = {}
        url = f"/repos/{self.ctx.owner}/{self.ctx.repo}/environments/{self.ctx.environment}/variables"
        page = 1
        while True:
            resp = self._client.get(url, params={"per_page": PAGE_SIZE, "page": page})
            resp.raise_for_status()
            data = resp.json()
            variables = data.get("variables", [])
            for v in variables:
                vars_all[v["name"]] = v.get("value")
            if len(variables) < PAGE_SIZE:
                break
            page += 1
        return vars_all

    def load(self, filter: Optional[Filter] = None, depth: Optional[int] = None) -> Dict[str, Any]:
        try:
            raw = self._list_env_variables()
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"Can't list variables of {self.name}: {e}") from e
        kv = {normalize_variable_name(k): v for k, v in raw.items()}
        if filter:
            return {k: v for k, v in kv.items() if should_include_key(k, filter)}
        return kv

    def close(self) -> None:
        self._client.close()
