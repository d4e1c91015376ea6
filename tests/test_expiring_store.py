import pytest

from conftest import FakeClock
from relay.services.expiring_store import ExpiringStore


class TestAddIfAbsent:
    def test_first_insert_wins(self):
        store = ExpiringStore(ttl_seconds=60, max_entries=10, clock=FakeClock())
        assert store.add_if_absent("a") is True
        assert store.add_if_absent("a") is False
        assert len(store) == 1

    def test_key_is_accepted_again_after_ttl(self):
        clock = FakeClock()
        store = ExpiringStore(ttl_seconds=60, max_entries=10, clock=clock)
        store.add_if_absent("a")

        clock.advance(59.9)
        assert store.add_if_absent("a") is False

        clock.advance(0.1)
        assert store.add_if_absent("a") is True

    def test_oldest_entry_evicted_when_full(self):
        clock = FakeClock()
        store = ExpiringStore(ttl_seconds=600, max_entries=2, clock=clock)
        store.add_if_absent("a")
        clock.advance(1)
        store.add_if_absent("b")
        clock.advance(1)
        store.add_if_absent("c")

        assert len(store) == 2
        assert store.get("a") is None
        assert store.get("b") is not None
        assert store.get("c") is not None


class TestTouchIfIdle:
    def test_blocks_inside_interval(self):
        clock = FakeClock()
        store = ExpiringStore(ttl_seconds=4, max_entries=10, clock=clock)
        assert store.touch_if_idle("s", 4) is True

        clock.advance(3.999)
        assert store.touch_if_idle("s", 4) is False

    def test_rejected_touch_keeps_original_stamp(self):
        clock = FakeClock()
        store = ExpiringStore(ttl_seconds=4, max_entries=10, clock=clock)
        store.touch_if_idle("s", 4)
        first = store.get("s")

        clock.advance(2)
        store.touch_if_idle("s", 4)

        assert store.get("s") == first

    def test_allows_at_interval_boundary(self):
        clock = FakeClock()
        store = ExpiringStore(ttl_seconds=4, max_entries=10, clock=clock)
        store.touch_if_idle("s", 4)

        clock.advance(4)
        assert store.touch_if_idle("s", 4) is True
        assert store.get("s") == clock.now


class TestValidation:
    def test_rejects_non_positive_capacity(self):
        with pytest.raises(ValueError):
            ExpiringStore(ttl_seconds=1, max_entries=0)
