"""Shared fakes and fixtures for the Conflux test suite."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from conflux.core.accessor import StaticAccessor
from conflux.core.events import ConfigChangedEvent, EventBus, RefreshConfigsEvent
from conflux.core.factory import ConfigProviderFactory
from conflux.core.prefix import PrefixRegistry


class RecordingEventManager(EventBus):
    """Event bus remembering everything fired through it."""

    def __init__(self) -> None:
        super().__init__()
        self.fired: List[Any] = []

    def publish(self, event: ConfigChangedEvent) -> None:
        self.fired.append(event)
        super().publish(event)

    def broadcast_refresh(self, event: Optional[RefreshConfigsEvent] = None) -> None:
        event = event or RefreshConfigsEvent()
        self.fired.append(event)
        super().broadcast_refresh(event)

    def changes(self) -> List[ConfigChangedEvent]:
        return [e for e in self.fired if isinstance(e, ConfigChangedEvent)]


class CountingAccessor(StaticAccessor):
    """In-memory accessor counting how often the backing store is read."""

    def __init__(self, properties: Optional[Dict[str, Any]] = None):
        super().__init__(properties)
        self.calls = 0

    def probe_raw(self, raw_shape, prefix=None):
        self.calls += 1
        return super().probe_raw(raw_shape, prefix)


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep conflux.yaml discovery away from the real working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)


@pytest.fixture
def event_manager() -> RecordingEventManager:
    return RecordingEventManager()


@pytest.fixture
def accessor() -> CountingAccessor:
    return CountingAccessor()


@pytest.fixture
def prefixes() -> PrefixRegistry:
    return PrefixRegistry()


@pytest.fixture
def factory(accessor, event_manager, prefixes) -> ConfigProviderFactory:
    return ConfigProviderFactory(accessor, event_manager, prefixes)
