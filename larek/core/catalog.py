from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional, Tuple

from larek.core.events import CatalogChanged, EventBus, ProductSelected
from larek.core.types import Product

logger = logging.getLogger(__name__)


class CatalogStore:
    """Product list of the shop and the product under detailed inspection."""

    def __init__(self, bus: EventBus) -> None:
        self._bus = bus
        self._items: Tuple[Product, ...] = ()
        self._by_id: Dict[str, Product] = {}
        self._preview: Optional[Product] = None
        self._load_failed = False

    @property
    def load_failed(self) -> bool:
        return self._load_failed

    def set_items(self, products: Iterable[Product], load_failed: bool = False) -> None:
        """
        Replaces the whole catalog. An empty list is a valid catalog;
        `load_failed` tells "no products" apart from "loading did not work".
        """
        by_id: Dict[str, Product] = {}
        for p in products:
            if p.id in by_id:
                logger.warning("Duplicate product id %s in catalog, keeping the first one", p.id)
                continue
            by_id[p.id] = p

        self._by_id = by_id
        self._items = tuple(by_id.values())
        self._load_failed = load_failed
        self._bus.emit(CatalogChanged(items=self._items, load_failed=load_failed))

    def get_items(self) -> Tuple[Product, ...]:
        return self._items

    def get_product(self, product_id: str) -> Optional[Product]:
        return self._by_id.get(product_id)

    def set_preview(self, product: Optional[Product]) -> None:
        self._preview = product
        self._bus.emit(ProductSelected(product=product))

    def get_preview(self) -> Optional[Product]:
        return self._preview
