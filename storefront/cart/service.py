"""Cart store: consolidated product -> quantity mapping with a persisted snapshot."""
import json
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Protocol

from storefront.errors import PersistenceFailed
from storefront.logging import get_logger
from storefront.services.models import Product
from storefront.services.money import multiply, round_money
from .models import CartLine, CartSnapshot, CartTotals
from .storage import SnapshotStore

logger = get_logger(__name__)

CartListener = Callable[[CartTotals], None]


class ProductLookup(Protocol):
    """Resolves product ids against the full catalog."""

    def find_product(self, product_id: int) -> Optional[Product]: ...


class CartStore:
    """
    Holds at most one line per product, each with quantity >= 1.

    Features:
    - add() consolidates repeated adds into one line
    - decrement() to zero removes the line
    - increment/decrement/remove on an absent line are silent no-ops
    - every change overwrites the snapshot and notifies listeners

    Snapshot failures are logged and never raised; the in-memory lines
    stay authoritative for the session.
    """

    def __init__(self, storage: SnapshotStore, catalog: ProductLookup):
        self.storage = storage
        self.catalog = catalog
        # Insertion order of first add is the display order
        self._lines: Dict[int, int] = {}
        self._listeners: List[CartListener] = []
        self.load()

    # ==================== SNAPSHOT ====================

    def load(self) -> None:
        """Rebuild lines from the snapshot. Missing or malformed means empty."""
        self._lines = {}
        try:
            raw = self.storage.read()
        except PersistenceFailed as e:
            logger.warning(f"Cart snapshot unreadable, starting empty: {e}")
            return
        if not raw:
            return
        try:
            snapshot = CartSnapshot.from_json(raw)
        except (json.JSONDecodeError, ValueError, KeyError, TypeError) as e:
            # Corrupted data - start with an empty cart
            logger.warning(f"Corrupted cart snapshot '{self.storage.key}', starting empty: {e}")
            return
        self._lines = {line.product_id: line.quantity for line in snapshot.lines}

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(lines=self.lines)

    def _persist(self) -> None:
        try:
            self.storage.write(self.snapshot().to_json())
        except PersistenceFailed as e:
            logger.warning(f"Failed to persist cart: {e}")

    # ==================== LISTENERS ====================

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a refresh callback; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self) -> None:
        self._persist()
        totals = self.totals()
        for listener in list(self._listeners):
            try:
                listener(totals)
            except Exception:
                logger.error("Cart listener failed", exc_info=True)

    # ==================== READS ====================

    @property
    def lines(self) -> List[CartLine]:
        return [CartLine(pid, qty) for pid, qty in self._lines.items()]

    def quantity(self, product_id: int) -> int:
        return self._lines.get(int(product_id), 0)

    def __contains__(self, product_id: int) -> bool:
        return int(product_id) in self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def item_count(self) -> int:
        """Sum of all line quantities."""
        return sum(self._lines.values())

    def totals(self) -> CartTotals:
        """
        Item count and amount due.

        Prices come from the catalog's "all" entry; a line whose product
        cannot be resolved there contributes 0.
        """
        amount = Decimal("0")
        for pid, qty in self._lines.items():
            product = self.catalog.find_product(pid)
            if product is not None:
                amount += multiply(product.price, qty)
        return CartTotals(item_count=self.item_count(), amount_due=round_money(amount))

    # ==================== MUTATIONS ====================

    def add(self, product_id: int) -> bool:
        """
        Add one unit of a product.

        Returns:
            True if the cart changed. Adding a product that is neither in
            the cart nor in the catalog does nothing.
        """
        pid = int(product_id)
        if pid in self._lines:
            self._lines[pid] += 1
        elif self.catalog.find_product(pid) is not None:
            self._lines[pid] = 1
        else:
            logger.info(f"Ignoring add for unknown product {pid}")
            return False
        self._commit()
        return True

    def increment(self, product_id: int) -> bool:
        return self._change(int(product_id), 1)

    def decrement(self, product_id: int) -> bool:
        return self._change(int(product_id), -1)

    def remove(self, product_id: int) -> bool:
        """Delete a line. Removing an absent line is a no-op."""
        if self._lines.pop(int(product_id), None) is None:
            return False
        self._commit()
        return True

    def _change(self, pid: int, delta: int) -> bool:
        current = self._lines.get(pid)
        if current is None:
            return False
        new_quantity = current + delta
        if new_quantity <= 0:
            del self._lines[pid]
        else:
            self._lines[pid] = new_quantity
        self._commit()
        return True
