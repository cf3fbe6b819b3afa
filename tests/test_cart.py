"""
Tests for the Cart Store
"""

import json
import pytest
from decimal import Decimal
from unittest.mock import Mock

from storefront.cart import CartLine, CartSnapshot, CartStore, CartTotals, MemorySnapshotStore
from storefront.catalog import CatalogCache
from storefront.errors import PersistenceFailed


class TestCartLine:
    """Tests for CartLine dataclass."""

    def test_to_dict(self):
        assert CartLine(product_id=1, quantity=2).to_dict() == {"product_id": 1, "quantity": 2}

    def test_from_dict_coerces_numbers(self):
        line = CartLine.from_dict({"product_id": "7", "quantity": "3"})

        assert line.product_id == 7
        assert line.quantity == 3


class TestCartSnapshot:
    """Tests for snapshot serialization."""

    def test_round_trip(self):
        snapshot = CartSnapshot(lines=[CartLine(1, 2), CartLine(3, 1)])

        restored = CartSnapshot.from_json(snapshot.to_json())

        assert restored.lines == snapshot.lines

    def test_duplicate_ids_are_consolidated(self):
        raw = json.dumps({"lines": [
            {"product_id": 1, "quantity": 1},
            {"product_id": 2, "quantity": 1},
            {"product_id": 1, "quantity": 2},
        ]})

        snapshot = CartSnapshot.from_json(raw)

        assert snapshot.lines == [CartLine(1, 3), CartLine(2, 1)]

    def test_non_positive_quantities_dropped(self):
        raw = json.dumps({"lines": [{"product_id": 1, "quantity": 0}, {"product_id": 2, "quantity": -4}]})

        assert CartSnapshot.from_json(raw).lines == []

    @pytest.mark.parametrize("raw", [
        "not json",
        "[]",
        '{"lines": "nope"}',
        '{"lines": [42]}',
        '{"lines": [{"product_id": 1}]}',
        '{"lines": [{"product_id": "x", "quantity": 1}]}',
    ])
    def test_malformed_snapshot_raises(self, raw):
        with pytest.raises((ValueError, KeyError, TypeError)):
            CartSnapshot.from_json(raw)


class TestCartStore:
    """Tests for CartStore mutations and totals."""

    def test_add_twice_then_decrement(self, cart):
        """add, add, decrement leaves quantity 1 priced at 19.99."""
        cart.add(1)
        cart.add(1)
        cart.decrement(1)

        assert cart.quantity(1) == 1
        assert len(cart) == 1
        assert cart.totals() == CartTotals(item_count=1, amount_due=Decimal("19.99"))

    def test_decrement_past_zero_empties_cart(self, cart):
        """add, decrement, decrement (on absent line) leaves the cart empty."""
        cart.add(1)
        cart.decrement(1)
        changed = cart.decrement(1)

        assert changed is False
        assert cart.lines == []
        assert cart.item_count() == 0

    def test_add_consolidates_lines(self, cart):
        for _ in range(3):
            cart.add(2)
        cart.add(3)

        assert cart.lines == [CartLine(2, 3), CartLine(3, 1)]

    def test_increment_absent_line_is_noop(self, cart, memory_storage):
        assert cart.increment(1) is False
        assert cart.lines == []
        assert memory_storage.raw is None

    def test_remove_is_idempotent(self, cart):
        cart.add(1)
        cart.add(2)

        cart.remove(1)
        once = cart.lines
        cart.remove(1)
        cart.remove(1)

        assert cart.lines == once == [CartLine(2, 1)]

    def test_add_unknown_product_is_noop(self, cart):
        assert cart.add(999) is False
        assert cart.item_count() == 0

    def test_invariants_hold_over_mixed_operations(self, cart):
        ops = [
            ("add", 1), ("add", 2), ("increment", 2), ("decrement", 1),
            ("decrement", 1), ("add", 3), ("remove", 2), ("increment", 9),
            ("add", 1), ("decrement", 3), ("add", 4), ("increment", 4),
        ]
        for op, pid in ops:
            getattr(cart, op)(pid)
            quantities = [line.quantity for line in cart.lines]
            assert all(q >= 1 for q in quantities)
            assert cart.item_count() == sum(quantities)
            assert len({line.product_id for line in cart.lines}) == len(cart.lines)

    def test_totals_sum_quantity_times_price(self, cart):
        cart.add(1)
        cart.add(1)
        cart.add(3)

        totals = cart.totals()

        assert totals.item_count == 3
        assert totals.amount_due == Decimal("207.98")

    def test_unresolvable_line_is_priced_at_zero(self, mock_source):
        """Lines loaded before the catalog contribute nothing to the total."""
        storage = MemorySnapshotStore(CartSnapshot([CartLine(1, 2)]).to_json())
        cart = CartStore(storage, CatalogCache(mock_source))

        assert cart.totals() == CartTotals(item_count=2, amount_due=Decimal("0.00"))

    def test_existing_line_can_grow_without_catalog(self, mock_source):
        storage = MemorySnapshotStore(CartSnapshot([CartLine(1, 1)]).to_json())
        cart = CartStore(storage, CatalogCache(mock_source))

        assert cart.add(1) is True
        assert cart.quantity(1) == 2


class TestCartPersistence:
    """Tests for snapshot read/write behaviour."""

    def test_every_mutation_overwrites_snapshot(self, cart, memory_storage):
        cart.add(1)
        cart.add(2)
        cart.increment(1)
        cart.remove(2)

        stored = json.loads(memory_storage.raw)
        assert stored == {"lines": [{"product_id": 1, "quantity": 2}]}

    def test_snapshot_round_trip_rebuilds_same_lines(self, cart, memory_storage, loaded_cache):
        cart.add(3)
        cart.add(1)
        cart.add(3)

        restored = CartStore(MemorySnapshotStore(memory_storage.raw), loaded_cache)

        assert restored.lines == cart.lines == [CartLine(3, 2), CartLine(1, 1)]

    def test_malformed_snapshot_starts_empty(self, loaded_cache):
        """Corrupt snapshot on startup gives an empty cart, not an error."""
        cart = CartStore(MemorySnapshotStore("{not valid json"), loaded_cache)

        assert cart.lines == []
        assert cart.item_count() == 0

    def test_unreadable_storage_starts_empty(self, loaded_cache):
        storage = Mock()
        storage.key = "cart:test"
        storage.read.side_effect = PersistenceFailed("cart:test", "timeout")

        cart = CartStore(storage, loaded_cache)

        assert cart.lines == []

    def test_write_failure_does_not_raise(self, loaded_cache):
        storage = Mock()
        storage.key = "cart:test"
        storage.read.return_value = None
        storage.write.side_effect = PersistenceFailed("cart:test", "quota exceeded")
        cart = CartStore(storage, loaded_cache)

        assert cart.add(1) is True

        assert cart.quantity(1) == 1
        storage.write.assert_called_once()


class TestCartListeners:
    """Tests for refresh notifications."""

    def test_listener_receives_totals_after_mutation(self, cart):
        received = []
        cart.subscribe(received.append)

        cart.add(1)
        cart.add(2)

        assert received[-1] == CartTotals(item_count=2, amount_due=Decimal("29.49"))
        assert len(received) == 2

    def test_noop_does_not_notify(self, cart):
        listener = Mock()
        cart.subscribe(listener)

        cart.decrement(1)
        cart.remove(1)

        listener.assert_not_called()

    def test_unsubscribe(self, cart):
        listener = Mock()
        unsubscribe = cart.subscribe(listener)
        unsubscribe()

        cart.add(1)

        listener.assert_not_called()

    def test_failing_listener_does_not_break_mutation(self, cart):
        cart.subscribe(Mock(side_effect=RuntimeError("render failed")))
        second = Mock()
        cart.subscribe(second)

        cart.add(1)

        assert cart.quantity(1) == 1
        second.assert_called_once()
