# Overview: In-progress sale cart; one line per product, prices snapshotted at add time.

# inventra/services/cart.py
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable, Iterator, Optional

from ..schemas import Product
from ..validation import to_quantity


CART_KEY = "inventra_cart"


@dataclass
class CartLine:
    product_id: str
    name: str
    sku: str
    unit: str
    unit_price: Any
    quantity: int

    @property
    def line_total(self):
        return self.unit_price * self.quantity


class Cart:
    """
    Ordered cart lines, first-added first.

    Invariants: at most one line per product id, every quantity > 0.
    The total is computed from the lines on every read.
    """

    def __init__(self, lines: Optional[Iterable[CartLine]] = None):
        self._lines: list[CartLine] = list(lines or [])

    def __iter__(self) -> Iterator[CartLine]:
        return iter(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def total(self):
        return sum(line.unit_price * line.quantity for line in self._lines)

    def get(self, product_id: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    def add(self, product: Product) -> CartLine:
        """Add one unit; an existing line is incremented, never duplicated."""
        line = self.get(product.id)
        if line is not None:
            line.quantity += 1
            return line
        line = CartLine(
            product_id=product.id,
            name=product.name,
            sku=product.sku,
            unit=product.unit,
            unit_price=product.selling_price,
            quantity=1,
        )
        self._lines.append(line)
        return line

    def set_quantity(self, product_id: str, value: Any) -> None:
        """Set a line's quantity. Unusable input is ignored; 0 removes the line."""
        quantity = to_quantity(value)
        if quantity is None:
            return
        if quantity == 0:
            self.remove(product_id)
            return
        line = self.get(product_id)
        if line is not None:
            line.quantity = quantity

    def remove(self, product_id: str) -> None:
        self._lines = [line for line in self._lines if line.product_id != product_id]

    def clear(self) -> None:
        self._lines = []

    def to_session(self) -> list[dict]:
        return [asdict(line) for line in self._lines]

    @classmethod
    def from_session(cls, data: Any) -> "Cart":
        """Rebuild from session data, dropping entries that break the invariants."""
        cart = cls()
        if not isinstance(data, list):
            return cart
        for raw in data:
            if not isinstance(raw, dict):
                continue
            try:
                line = CartLine(
                    product_id=str(raw["product_id"]),
                    name=str(raw["name"]),
                    sku=str(raw["sku"]),
                    unit=str(raw.get("unit") or "PCS"),
                    unit_price=raw["unit_price"],
                    quantity=int(raw["quantity"]),
                )
            except (KeyError, TypeError, ValueError):
                continue
            if line.quantity <= 0 or cart.get(line.product_id) is not None:
                continue
            cart._lines.append(line)
        return cart


def load_cart(storage) -> Cart:
    return Cart.from_session(storage.get(CART_KEY))


def save_cart(storage, cart: Cart) -> None:
    storage[CART_KEY] = cart.to_session()


def discard_cart(storage) -> None:
    storage.pop(CART_KEY, None)
