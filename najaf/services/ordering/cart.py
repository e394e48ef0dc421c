"""
Customer Cart

The in-progress selection of one customer session. Never persisted: it is
discarded on checkout and on role switch.

Invariant: at most one entry per product id, every quantity >= 1.
"""

from typing import Optional

from najaf.schemas import CartItem, Product


class Cart:
    """Ordered list of cart entries keyed by product id."""

    def __init__(self) -> None:
        self._items: list[CartItem] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    @property
    def items(self) -> list[CartItem]:
        """Snapshot copy of the entries, safe to store in an order."""
        return [item.model_copy() for item in self._items]

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def total(self) -> float:
        return sum(item.line_total for item in self._items)

    @property
    def count(self) -> int:
        return sum(item.quantity for item in self._items)

    def get(self, product_id: str) -> Optional[CartItem]:
        for item in self._items:
            if item.id == product_id:
                return item
        return None

    def add(self, product: Product) -> CartItem:
        """Add one unit: bump the existing entry or append a new one."""
        existing = self.get(product.id)
        if existing is not None:
            updated = existing.model_copy(update={"quantity": existing.quantity + 1})
            self._replace(updated)
            return updated
        item = CartItem.from_product(product)
        self._items.append(item)
        return item

    def remove(self, product_id: str) -> None:
        self._items = [item for item in self._items if item.id != product_id]

    def set_quantity(self, product_id: str, delta: int) -> Optional[CartItem]:
        """
        Apply a quantity delta.

        A result of zero or less leaves the entry untouched; removal is only
        ever explicit through remove().
        """
        existing = self.get(product_id)
        if existing is None:
            return None
        new_qty = existing.quantity + delta
        if new_qty <= 0:
            return existing
        updated = existing.model_copy(update={"quantity": new_qty})
        self._replace(updated)
        return updated

    def set_notes(self, product_id: str, notes: Optional[str]) -> Optional[CartItem]:
        existing = self.get(product_id)
        if existing is None:
            return None
        updated = existing.model_copy(update={"notes": notes or None})
        self._replace(updated)
        return updated

    def clear(self) -> None:
        self._items = []

    def _replace(self, updated: CartItem) -> None:
        self._items = [updated if item.id == updated.id else item for item in self._items]
