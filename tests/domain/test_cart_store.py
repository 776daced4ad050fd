"""Tests for the CartStore domain service, including login merge.

Uses in-memory fake repositories, no file I/O.
"""

import threading

import pytest

from storefront.domain.exceptions import PersistenceFailure, ValidationError
from storefront.domain.model.cart import ProductSnapshot
from storefront.domain.model.value_objects import ActorKey, Money
from storefront.domain.service.cart_store import CartStore
from tests.fakes import FakeCartRepository

ANON = ActorKey.anonymous("anon_session1")
ACCOUNT = ActorKey.account("42")


def _setup() -> tuple[CartStore, FakeCartRepository]:
    repo = FakeCartRepository()
    return CartStore(repo), repo


def _add(store: CartStore, key: ActorKey, product_id: str, qty: int, price: str = "4.50"):
    return store.add_line(key, product_id, qty, Money.of(price), ProductSnapshot(f"Item {product_id}"))


class TestCartStoreBasics:

    def test_unknown_actor_gets_empty_cart(self):
        store, repo = _setup()
        cart = store.get(ANON)
        assert cart.is_empty
        assert cart.actor_key == ANON
        assert repo.keys() == []  # nothing persisted by a read

    def test_add_persists(self):
        store, repo = _setup()
        _add(store, ANON, "A", 2)
        assert repo.get(ANON).find_line("A").quantity.value == 2

    def test_add_twice_sums(self):
        store, _ = _setup()
        _add(store, ANON, "A", 2)
        cart = _add(store, ANON, "A", 1)
        assert cart.total_items == 3
        assert len(cart.lines) == 1

    def test_set_quantity_zero_removes(self):
        store, repo = _setup()
        _add(store, ANON, "A", 2)
        cart = store.set_quantity(ANON, "A", 0)
        assert cart.find_line("A") is None
        assert repo.get(ANON).is_empty

    def test_set_quantity_on_absent_line_rejected(self):
        store, _ = _setup()
        with pytest.raises(ValidationError, match="not in the cart"):
            store.set_quantity(ANON, "A", 3)

    def test_remove_absent_is_noop(self):
        store, repo = _setup()
        _add(store, ANON, "A", 1)
        commits = repo.commits
        store.remove_line(ANON, "B")
        assert repo.commits == commits

    def test_clear_unknown_cart_writes_nothing(self):
        store, repo = _setup()
        assert store.clear(ANON).is_empty
        assert repo.commits == 0

    def test_clear_empties_stored_cart(self):
        store, repo = _setup()
        _add(store, ANON, "A", 1)
        store.clear(ANON)
        assert repo.get(ANON).is_empty

    def test_carts_are_isolated_per_actor(self):
        store, _ = _setup()
        _add(store, ANON, "A", 1)
        _add(store, ACCOUNT, "B", 1)
        assert store.get(ANON).find_line("B") is None
        assert store.get(ACCOUNT).find_line("A") is None

    def test_failed_write_surfaces(self):
        store, repo = _setup()
        repo.fail_next_commit = True
        with pytest.raises(PersistenceFailure):
            _add(store, ANON, "A", 1)
        assert repo.get(ANON) is None


class TestMergeIntoAccount:

    def test_worked_example(self):
        store, repo = _setup()
        _add(store, ANON, "A", 2)
        _add(store, ACCOUNT, "A", 1)
        _add(store, ACCOUNT, "B", 3)

        merged = store.merge_into_account(ANON, ACCOUNT)

        assert [(line.product_id, line.quantity.value) for line in merged.lines] == [
            ("A", 3),
            ("B", 3),
        ]
        assert ANON not in repo.keys()

    def test_overlap_summed_and_anonymous_cart_deleted(self):
        store, repo = _setup()
        _add(store, ACCOUNT, "A", 1)
        _add(store, ANON, "A", 2)
        _add(store, ANON, "B", 1)

        merged = store.merge_into_account(ANON, ACCOUNT)

        assert merged.find_line("A").quantity.value == 3
        assert merged.find_line("B").quantity.value == 1
        assert repo.get(ANON) is None
        assert repo.get(ACCOUNT).total_items == 4

    def test_replay_is_noop(self):
        store, repo = _setup()
        _add(store, ANON, "A", 2)
        store.merge_into_account(ANON, ACCOUNT)
        commits = repo.commits

        again = store.merge_into_account(ANON, ACCOUNT)

        assert again.find_line("A").quantity.value == 2
        assert repo.commits == commits

    def test_empty_anonymous_cart_just_deleted(self):
        store, repo = _setup()
        _add(store, ACCOUNT, "A", 1)
        _add(store, ANON, "B", 1)
        store.clear(ANON)

        merged = store.merge_into_account(ANON, ACCOUNT)

        assert merged.total_items == 1
        assert repo.get(ANON) is None

    def test_failed_merge_leaves_both_carts(self):
        store, repo = _setup()
        _add(store, ACCOUNT, "A", 1)
        _add(store, ANON, "A", 2)
        repo.fail_next_commit = True

        with pytest.raises(PersistenceFailure):
            store.merge_into_account(ANON, ACCOUNT)

        assert repo.get(ANON).find_line("A").quantity.value == 2
        assert repo.get(ACCOUNT).find_line("A").quantity.value == 1

    def test_source_must_be_anonymous(self):
        store, _ = _setup()
        with pytest.raises(ValidationError, match="Merge source"):
            store.merge_into_account(ActorKey.account("7"), ACCOUNT)

    def test_target_must_be_account(self):
        store, _ = _setup()
        with pytest.raises(ValidationError, match="Merge target"):
            store.merge_into_account(ANON, ActorKey.anonymous("anon_other12"))


class TestConcurrency:

    def test_concurrent_adds_of_distinct_products_all_land(self):
        store, _ = _setup()
        n = 25

        def add(i):
            _add(store, ANON, f"p{i}", 1)

        threads = [threading.Thread(target=add, args=(i,)) for i in range(n)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        cart = store.get(ANON)
        assert len(cart.lines) == n
        assert cart.total_items == n

    def test_concurrent_adds_of_same_product_sum(self):
        store, _ = _setup()
        threads = [threading.Thread(target=_add, args=(store, ANON, "A", 1)) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert store.get(ANON).find_line("A").quantity.value == 20

    def test_add_racing_merge_is_not_lost(self):
        store, _ = _setup()
        _add(store, ANON, "A", 1)

        def add_to_account():
            for i in range(20):
                _add(store, ACCOUNT, f"acc{i}", 1)

        t = threading.Thread(target=add_to_account)
        t.start()
        store.merge_into_account(ANON, ACCOUNT)
        t.join()

        cart = store.get(ACCOUNT)
        assert cart.find_line("A").quantity.value == 1
        assert cart.total_items == 21
