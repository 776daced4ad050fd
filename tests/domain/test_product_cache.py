"""Tests for the ProductCache: TTL, stale serving and snapshots."""

import threading
from datetime import timedelta

import pytest

from storefront.domain.exceptions import EntityNotFoundError, UpstreamUnavailable
from storefront.domain.model.catalog import CatalogBatch
from storefront.domain.service.product_cache import ProductCache
from tests.fakes import FakeCatalogRepository, FakeClock, FakeCommercePlatform, make_entry


def _setup(
    entries=None, snapshots=None
) -> tuple[ProductCache, FakeCommercePlatform, FakeClock]:
    if entries is None:
        entries = [make_entry("prod-1", "Widget"), make_entry("prod-2", "Gadget", "25.00")]
    platform = FakeCommercePlatform(entries)
    clock = FakeClock()
    cache = ProductCache(platform, ttl=timedelta(minutes=15), clock=clock, snapshots=snapshots)
    return cache, platform, clock


class TestTimeToLive:

    def test_worked_example(self):
        cache, platform, clock = _setup()

        first = cache.list()  # T=0
        assert platform.fetch_calls == 1

        clock.advance(minutes=10)
        assert cache.list() == first
        assert platform.fetch_calls == 1

        clock.advance(minutes=6)  # T=16
        platform.fail = True
        view = cache.list()
        assert platform.fetch_calls == 2
        assert view.stale
        assert view.entries == first.entries
        assert view.fetched_at == first.fetched_at

    def test_refresh_after_ttl_replaces_batch(self):
        cache, platform, clock = _setup()
        cache.list()
        platform.entries = [make_entry("prod-3", "Gizmo")]
        clock.advance(minutes=16)

        view = cache.list()

        assert not view.stale
        assert [e.product_id for e in view.entries] == ["prod-3"]
        assert view.fetched_at == clock.now

    def test_entries_stamped_with_fetch_time(self):
        cache, _, clock = _setup()
        view = cache.list()
        assert all(e.fetched_at == clock.now for e in view.entries)

    def test_no_cache_and_upstream_down_fails(self):
        cache, platform, _ = _setup()
        platform.fail = True
        with pytest.raises(UpstreamUnavailable):
            cache.list()

    def test_recovers_after_outage(self):
        cache, platform, clock = _setup()
        cache.list()
        clock.advance(minutes=20)
        platform.fail = True
        assert cache.list().stale
        platform.fail = False
        assert not cache.list().stale


class TestGet:

    def test_hit_does_not_refetch(self):
        cache, platform, _ = _setup()
        cache.list()
        lookup = cache.get("prod-2")
        assert lookup.entry.title == "Gadget"
        assert not lookup.stale
        assert platform.fetch_calls == 1

    def test_miss_on_fresh_batch_refetches_once(self):
        cache, platform, _ = _setup()
        cache.list()
        platform.entries.append(make_entry("prod-new", "Newcomer"))

        lookup = cache.get("prod-new")

        assert lookup.entry.title == "Newcomer"
        assert platform.fetch_calls == 2

    def test_unknown_product(self):
        cache, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Product not found"):
            cache.get("nope")

    def test_stale_hit_flagged(self):
        cache, platform, clock = _setup()
        cache.list()
        clock.advance(minutes=16)
        platform.fail = True
        lookup = cache.get("prod-1")
        assert lookup.stale
        assert lookup.entry.title == "Widget"

    def test_stale_miss_is_upstream_failure(self):
        cache, platform, clock = _setup()
        cache.list()
        clock.advance(minutes=16)
        platform.fail = True
        with pytest.raises(UpstreamUnavailable, match="not cached"):
            cache.get("nope")


class TestInvalidation:

    def test_invalidate_forces_fetch_and_drops_fallback(self):
        cache, platform, _ = _setup()
        cache.list()
        cache.invalidate()
        platform.fail = True
        with pytest.raises(UpstreamUnavailable):
            cache.list()

    def test_expire_keeps_fallback(self):
        cache, platform, _ = _setup()
        cache.list()
        cache.expire()
        platform.fail = True
        view = cache.list()
        assert view.stale
        assert platform.fetch_calls == 2

    def test_expire_then_success_is_fresh_again(self):
        cache, platform, _ = _setup()
        cache.list()
        cache.expire()
        cache.list()
        cache.list()
        assert platform.fetch_calls == 2

    def test_expire_during_fetch_is_not_lost(self):
        cache, platform, _ = _setup()
        fetch = platform.fetch_catalog

        def fetch_then_expire():
            entries = fetch()
            platform.fetch_catalog = fetch
            cache.expire()
            return entries

        platform.fetch_catalog = fetch_then_expire
        cache.list()
        cache.list()

        assert platform.fetch_calls == 2


class TestInventoryLevels:

    def test_sorted_by_title(self):
        cache, _, _ = _setup()
        levels = cache.inventory_levels()
        assert [level.title for level in levels] == ["Gadget", "Widget"]
        assert levels[0].inventory_count == 10


class TestSnapshots:

    def test_refresh_is_stored(self):
        snapshots = FakeCatalogRepository()
        cache, _, _ = _setup(snapshots=snapshots)
        cache.list()
        assert [e.product_id for e in snapshots.batch.entries] == ["prod-1", "prod-2"]

    def test_restart_serves_stored_batch_while_fresh(self):
        clock = FakeClock()
        batch = CatalogBatch(entries=(make_entry("prod-9", "Stored"),), fetched_at=clock.now)
        platform = FakeCommercePlatform([make_entry("prod-1")])
        cache = ProductCache(platform, clock=clock, snapshots=FakeCatalogRepository(batch))

        assert [e.product_id for e in cache.list().entries] == ["prod-9"]
        assert platform.fetch_calls == 0

    def test_restart_during_outage_serves_stale(self):
        clock = FakeClock()
        batch = CatalogBatch(entries=(make_entry("prod-9", "Stored"),), fetched_at=clock.now)
        clock.advance(hours=2)
        platform = FakeCommercePlatform()
        platform.fail = True
        cache = ProductCache(platform, clock=clock, snapshots=FakeCatalogRepository(batch))

        view = cache.list()

        assert view.stale
        assert [e.product_id for e in view.entries] == ["prod-9"]

    def test_snapshot_write_failure_is_not_fatal(self):
        snapshots = FakeCatalogRepository()
        snapshots.fail_store = True
        cache, _, _ = _setup(snapshots=snapshots)
        view = cache.list()
        assert len(view.entries) == 2
        assert snapshots.batch is None

    def test_unreadable_snapshot_starts_empty(self):
        snapshots = FakeCatalogRepository(CatalogBatch(entries=(), fetched_at=FakeClock().now))
        snapshots.fail_load = True
        cache, platform, _ = _setup(snapshots=snapshots)

        view = cache.list()

        assert len(view.entries) == 2
        assert platform.fetch_calls == 1

    def test_invalidate_clears_snapshot(self):
        snapshots = FakeCatalogRepository()
        cache, _, _ = _setup(snapshots=snapshots)
        cache.list()
        cache.invalidate()
        assert snapshots.batch is None


class TestSingleFlight:

    def test_concurrent_readers_share_one_refresh(self):
        cache, platform, _ = _setup()
        barrier = threading.Barrier(8)
        results = []

        def read():
            barrier.wait()
            results.append(cache.list())

        threads = [threading.Thread(target=read) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert platform.fetch_calls == 1
        assert len({id(view.entries) for view in results}) == 1
