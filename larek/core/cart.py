from __future__ import annotations

from typing import Dict, Optional, Tuple, Union

from larek.core.events import CartChanged, EventBus
from larek.core.types import Product


class CartStore:
    """
    Products picked by the buyer.

    Membership is a set keyed by product id: no quantities, adding a product
    that is already in the cart changes nothing. Products without a price are
    accepted and add 0 to the total; keeping them out of the cart is up to the
    caller.
    """

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus
        self._items: Dict[str, Product] = {}  # insertion order = display order

    def add_item(self, product: Product) -> bool:
        if product.id in self._items:
            return False
        self._items[product.id] = product
        self._emit_change()
        return True

    def remove_item(self, product: Union[Product, str]) -> bool:
        product_id = product if isinstance(product, str) else product.id
        if self._items.pop(product_id, None) is None:
            return False
        self._emit_change()
        return True

    def clear(self) -> None:
        self._items.clear()
        self._emit_change()

    def get_items(self) -> Tuple[Product, ...]:
        return tuple(self._items.values())

    def get_total_price(self) -> float:
        return sum(p.price for p in self._items.values() if p.price is not None)

    def get_item_count(self) -> int:
        return len(self._items)

    def has_item(self, product_id: str) -> bool:
        return product_id in self._items

    def get_item(self, product_id: str) -> Optional[Product]:
        return self._items.get(product_id)

    def _emit_change(self) -> None:
        self._bus.emit(CartChanged(items=self.get_items(), total=self.get_total_price()))
