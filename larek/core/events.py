"""
Publish/subscribe bus and the closed set of events that travel on it.

Model events are emitted by the stores after they mutate; `view:*` intents
are emitted by the presentation layer and consumed by the orchestrator.
"""
from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from typing import Callable, ClassVar, List, Optional, Tuple

from larek.core.types import BuyerDraft, OrderConfirmation, OrderRequest, Payment, Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    name: ClassVar[str] = ""


# ---------------- model events ----------------

@dataclass(frozen=True)
class CatalogChanged(Event):
    name: ClassVar[str] = "catalog:changed"
    items: Tuple[Product, ...]
    load_failed: bool = False


@dataclass(frozen=True)
class ProductSelected(Event):
    name: ClassVar[str] = "product:select"
    product: Optional[Product]


@dataclass(frozen=True)
class CartChanged(Event):
    name: ClassVar[str] = "cart:changed"
    items: Tuple[Product, ...]
    total: float

    @property
    def count(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class BuyerChanged(Event):
    name: ClassVar[str] = "buyer:changed"
    draft: BuyerDraft


@dataclass(frozen=True)
class OrderPlaced(Event):
    name: ClassVar[str] = "order:placed"
    confirmation: OrderConfirmation
    request: OrderRequest
    items: Tuple[Product, ...]


# ---------------- intents ----------------

@dataclass(frozen=True)
class ProductOpen(Event):
    name: ClassVar[str] = "view:product-open"
    id: str


@dataclass(frozen=True)
class ProductAdd(Event):
    name: ClassVar[str] = "view:product-add"
    id: str


@dataclass(frozen=True)
class ProductRemove(Event):
    name: ClassVar[str] = "view:product-remove"
    id: str


@dataclass(frozen=True)
class BasketRemove(Event):
    name: ClassVar[str] = "view:basket-remove"
    id: str


@dataclass(frozen=True)
class CartOpen(Event):
    name: ClassVar[str] = "view:cart-open"


@dataclass(frozen=True)
class Checkout(Event):
    name: ClassVar[str] = "view:checkout"


@dataclass(frozen=True)
class PaymentChange(Event):
    name: ClassVar[str] = "view:payment-change"
    payment: Payment


@dataclass(frozen=True)
class FormChange(Event):
    name: ClassVar[str] = "view:form-change"
    field: str  # address | email | phone
    value: str


@dataclass(frozen=True)
class CheckoutNext(Event):
    name: ClassVar[str] = "view:checkout-next"


@dataclass(frozen=True)
class CheckoutSubmit(Event):
    name: ClassVar[str] = "view:checkout-submit"


@dataclass(frozen=True)
class ModalClose(Event):
    name: ClassVar[str] = "view:modal-close"


@dataclass(frozen=True)
class SuccessClose(Event):
    name: ClassVar[str] = "view:success-close"


MODEL_EVENTS = (CatalogChanged, ProductSelected, CartChanged, BuyerChanged, OrderPlaced)

INTENTS = (
    ProductOpen,
    ProductAdd,
    ProductRemove,
    BasketRemove,
    CartOpen,
    Checkout,
    PaymentChange,
    FormChange,
    CheckoutNext,
    CheckoutSubmit,
    ModalClose,
    SuccessClose,
)


Handler = Callable[[Event], None]


class EventDispatchError(RuntimeError):
    def __init__(self, event: Event, errors: List[Exception]):
        super().__init__(f"{len(errors)} handler(s) failed for {event.name}: {errors[0]!r}")
        self.event = event
        self.errors = errors


class EventBus:
    """
    Synchronous pub/sub.

    A subscription pattern is an exact event name, "*" or a shell-style
    pattern such as "cart:*". Handlers run in registration order; a failing
    handler does not stop the others, the failures are raised together once
    every handler has run.
    """

    def __init__(self) -> None:
        self._subs: List[Tuple[str, Handler]] = []

    def on(self, pattern: str, handler: Handler) -> Callable[[], None]:
        self._subs.append((pattern, handler))
        return lambda: self.off(pattern, handler)

    def on_any(self, handler: Handler) -> Callable[[], None]:
        return self.on("*", handler)

    def off(self, pattern: str, handler: Handler) -> None:
        for i, (p, h) in enumerate(self._subs):
            if p == pattern and h == handler:
                del self._subs[i]
                return

    def handlers_for(self, name: str) -> List[Handler]:
        return [h for p, h in self._subs if p == name or fnmatch.fnmatchcase(name, p)]

    def emit(self, event: Event) -> None:
        errors: List[Exception] = []
        # snapshot: handlers may subscribe or unsubscribe while we iterate
        for handler in self.handlers_for(event.name):
            try:
                handler(event)
            except Exception as e:
                errors.append(e)
        if errors:
            raise EventDispatchError(event, errors)
