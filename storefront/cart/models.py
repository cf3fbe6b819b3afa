"""Cart models with Decimal-based totals."""
import json
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List


@dataclass
class CartLine:
    """Single consolidated line: one product, quantity >= 1."""
    product_id: int
    quantity: int

    def to_dict(self) -> dict:
        return {"product_id": self.product_id, "quantity": self.quantity}

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(product_id=int(data["product_id"]), quantity=int(data["quantity"]))


@dataclass(frozen=True)
class CartTotals:
    """Aggregate count and amount due."""
    item_count: int = 0
    amount_due: Decimal = Decimal("0")


@dataclass
class CartSnapshot:
    """
    Serialized form of the cart lines.

    Stored as {"lines": [{"product_id": 1, "quantity": 2}, ...]}.
    """
    lines: List[CartLine] = field(default_factory=list)

    def to_json(self) -> str:
        return json.dumps({"lines": [line.to_dict() for line in self.lines]})

    @classmethod
    def from_json(cls, raw: str) -> "CartSnapshot":
        """
        Parse a stored snapshot.

        Repeated product ids are merged and non-positive quantities dropped,
        so a snapshot never breaks the one-line-per-product rule.

        Raises:
            ValueError, KeyError, TypeError: malformed snapshot
        """
        data = json.loads(raw)
        if not isinstance(data, dict) or not isinstance(data.get("lines"), list):
            raise ValueError("snapshot must be an object with a 'lines' list")

        merged: Dict[int, int] = {}
        for item in data["lines"]:
            if not isinstance(item, dict):
                raise TypeError(f"snapshot line must be an object, got {type(item).__name__}")
            line = CartLine.from_dict(item)
            merged[line.product_id] = merged.get(line.product_id, 0) + line.quantity
        return cls(lines=[CartLine(pid, qty) for pid, qty in merged.items() if qty > 0])
