"""Tests for the cached slot and the caching provider base."""

from __future__ import annotations

from conflux.core.cache import CachedSlot, CachingConfigProvider


class Counter(CachingConfigProvider):
    def __init__(self, event_manager, values):
        super().__init__(event_manager, shape="counter")
        self.values = list(values)

    def probe(self):
        return self.values[0]

    def on_config_changed(self, event):
        pass


class TestCachedSlot:
    def test_starts_empty(self):
        slot = CachedSlot()
        assert slot.is_empty()
        assert slot.get() == (False, None)

    def test_none_is_a_cacheable_value(self):
        """Test that a stored None is distinguishable from an empty slot."""
        slot = CachedSlot()
        slot.set(None)
        assert not slot.is_empty()
        assert slot.get() == (True, None)

    def test_set_replaces(self):
        slot = CachedSlot()
        slot.set(1)
        slot.set(2)
        assert slot.get() == (True, 2)


class TestCachingConfigProvider:
    """Test suite for the shared caching behavior."""

    def test_none_value_is_cached(self, event_manager):
        provider = Counter(event_manager, [None])
        assert provider.get_data() is None
        provider.values[0] = "set"
        assert provider.get_data() is None

    def test_change_from_none_publishes(self, event_manager):
        provider = Counter(event_manager, [None])
        provider.get_data()

        provider.values[0] = 5
        provider.refresh()

        assert [(e.previous, e.current) for e in event_manager.changes()] == [(None, 5)]
        assert event_manager.changes()[0].raw_shape is None

    def test_equal_but_distinct_values_are_unchanged(self, event_manager):
        """Test that change detection uses equality, not identity."""
        provider = Counter(event_manager, [[1, 2]])
        first = provider.get_data()

        provider.values[0] = [1, 2]
        provider.refresh()

        assert provider.get_data() is first
        assert event_manager.changes() == []

    def test_on_refresh_event_refreshes(self, event_manager):
        provider = Counter(event_manager, [1])
        provider.get_data()
        provider.values[0] = 2

        provider.on_refresh_event()

        assert provider.get_data() == 2

    def test_repr_names_shape(self, event_manager):
        assert repr(Counter(event_manager, [1])) == "Counter(counter)"
