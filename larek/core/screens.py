"""Render data handed by the orchestrator to a view."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from larek.core.types import Category, Payment, Product


class ActiveView(str, Enum):
    NONE = "none"
    PREVIEW = "preview"
    CART = "cart"
    DELIVERY = "delivery"
    CONTACTS = "contacts"
    CONFIRMATION = "confirmation"


class PreviewAction(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    DISABLED = "disabled"


@dataclass(frozen=True)
class CatalogCard:
    id: str
    title: str
    category: Category
    price: Optional[float]
    image: str
    in_cart: bool


@dataclass(frozen=True)
class CatalogScreen:
    cards: Tuple[CatalogCard, ...]
    error_text: str = ""


@dataclass(frozen=True)
class PreviewScreen:
    product: Product
    in_cart: bool
    action: PreviewAction


@dataclass(frozen=True)
class CartLine:
    index: int
    id: str
    title: str
    price: Optional[float]

    @property
    def purchasable(self) -> bool:
        return self.price is not None


@dataclass(frozen=True)
class CartScreen:
    lines: Tuple[CartLine, ...]
    total: float
    can_checkout: bool


@dataclass(frozen=True)
class DeliveryScreen:
    payment: Payment
    address: str
    is_valid: bool
    error_text: str = ""


@dataclass(frozen=True)
class ContactsScreen:
    email: str
    phone: str
    is_valid: bool
    error_text: str = ""
    submitting: bool = False


@dataclass(frozen=True)
class ConfirmationScreen:
    order_id: str
    total: float
