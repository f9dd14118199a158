"""
Navigation and checkout policy of the shop.

The orchestrator listens to the store events and to the `view:*` intents on
the bus, keeps track of the single active view and tells the view what to
render. Stores never talk to views and views never touch stores: every
mutation goes through here.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, List, Optional, Protocol, Type

from larek.constants import ERR_ADDRESS, ERR_CATALOG, ERR_ORDER
from larek.core.buyer import BuyerStore
from larek.core.cart import CartStore
from larek.core.catalog import CatalogStore
from larek.core.events import (
    BasketRemove,
    BuyerChanged,
    CartChanged,
    CartOpen,
    CatalogChanged,
    Checkout,
    CheckoutNext,
    CheckoutSubmit,
    Event,
    EventBus,
    EventDispatchError,
    FormChange,
    ModalClose,
    OrderPlaced,
    PaymentChange,
    ProductAdd,
    ProductOpen,
    ProductRemove,
    ProductSelected,
    SuccessClose,
)
from larek.core.screens import (
    ActiveView,
    CartLine,
    CartScreen,
    CatalogCard,
    CatalogScreen,
    ConfirmationScreen,
    ContactsScreen,
    DeliveryScreen,
    PreviewAction,
    PreviewScreen,
)
from larek.core.types import OrderConfirmation, OrderRequest, Product

logger = logging.getLogger(__name__)


class ShopView(Protocol):
    def render_header(self, counter: int) -> None: ...

    def render_catalog(self, screen: CatalogScreen) -> None: ...

    def render_preview(self, screen: PreviewScreen) -> None: ...

    def render_cart(self, screen: CartScreen) -> None: ...

    def render_delivery(self, screen: DeliveryScreen) -> None: ...

    def render_contacts(self, screen: ContactsScreen) -> None: ...

    def render_confirmation(self, screen: ConfirmationScreen) -> None: ...

    def close(self) -> None: ...


class OrderGateway(Protocol):
    async def create_order(self, order: OrderRequest) -> OrderConfirmation: ...


class Orchestrator:
    def __init__(
        self,
        bus: EventBus,
        catalog: CatalogStore,
        cart: CartStore,
        buyer: BuyerStore,
        view: ShopView,
        gateway: OrderGateway,
    ) -> None:
        self.bus = bus
        self.catalog = catalog
        self.cart = cart
        self.buyer = buyer
        self.view = view
        self.gateway = gateway

        self.state = ActiveView.NONE
        self._submission: Optional[asyncio.Task] = None
        self._order_error = ""
        self._unsubscribe: List[Callable[[], None]] = []

    def handlers(self) -> Dict[Type[Event], Callable]:
        return {
            CatalogChanged: self._on_catalog_changed,
            ProductSelected: self._on_product_selected,
            CartChanged: self._on_cart_changed,
            BuyerChanged: self._on_buyer_changed,
            ProductOpen: self._on_product_open,
            ProductAdd: self._on_product_add,
            ProductRemove: self._on_product_remove,
            BasketRemove: self._on_basket_remove,
            CartOpen: self._on_cart_open,
            Checkout: self._on_checkout,
            PaymentChange: self._on_payment_change,
            FormChange: self._on_form_change,
            CheckoutNext: self._on_checkout_next,
            CheckoutSubmit: self._on_checkout_submit,
            ModalClose: self._on_close,
            SuccessClose: self._on_close,
        }

    def start(self) -> None:
        if self._unsubscribe:
            return
        for event_cls, handler in self.handlers().items():
            self._unsubscribe.append(self.bus.on(event_cls.name, handler))

    def stop(self) -> None:
        while self._unsubscribe:
            self._unsubscribe.pop()()

    @property
    def submitting(self) -> bool:
        return self._submission is not None and not self._submission.done()

    async def wait_idle(self) -> Optional[OrderConfirmation]:
        """Waits for the order submission in flight, if any."""
        if self._submission is None:
            return None
        return await asyncio.shield(self._submission)

    # ---------------- model events ----------------

    def _on_catalog_changed(self, event: CatalogChanged) -> None:
        self._render_catalog()

    def _on_product_selected(self, event: ProductSelected) -> None:
        if event.product is not None:
            self._open_preview(event.product)
        elif self.state is ActiveView.PREVIEW:
            self._close_modal()

    def _on_cart_changed(self, event: CartChanged) -> None:
        self.view.render_header(event.count)
        if self.state is ActiveView.PREVIEW:
            preview = self.catalog.get_preview()
            if preview is not None:
                self._open_preview(preview)
        elif self.state is ActiveView.CART:
            self._render_cart()
        elif self.state is ActiveView.NONE:
            self._render_catalog()

    def _on_buyer_changed(self, event: BuyerChanged) -> None:
        if self.state is ActiveView.DELIVERY:
            self._render_delivery()
        elif self.state is ActiveView.CONTACTS:
            self._order_error = ""
            self._render_contacts()

    # ---------------- intents ----------------

    def _on_product_open(self, event: ProductOpen) -> None:
        product = self.catalog.get_product(event.id)
        if product is None:
            logger.debug("product-open: unknown product %s", event.id)
            return
        self.catalog.set_preview(product)

    def _on_product_add(self, event: ProductAdd) -> None:
        if self._cart_locked(event):
            return
        product = self._find_product(event.id)
        if product is None:
            return
        if not product.purchasable:
            logger.debug("product-add: %s has no price, not added", event.id)
            return
        self.cart.add_item(product)
        if self.state is ActiveView.PREVIEW:
            self._close_modal()

    def _on_product_remove(self, event: ProductRemove) -> None:
        if self._cart_locked(event):
            return
        product = self._find_product(event.id)
        if product is None:
            return
        self.cart.remove_item(product)
        if self.state is ActiveView.PREVIEW:
            self._close_modal()

    def _on_basket_remove(self, event: BasketRemove) -> None:
        if self._cart_locked(event):
            return
        product = self._find_product(event.id)
        if product is None:
            return
        self.cart.remove_item(product)

    def _on_cart_open(self, event: CartOpen) -> None:
        self._set_state(ActiveView.CART)
        self._render_cart()

    def _on_checkout(self, event: Checkout) -> None:
        if self.state is not ActiveView.CART or self.cart.get_item_count() == 0:
            logger.debug("checkout ignored in state %s", self.state.value)
            return
        self._open_delivery()

    def _on_payment_change(self, event: PaymentChange) -> None:
        self.buyer.set_payment(event.payment)

    def _on_form_change(self, event: FormChange) -> None:
        setters = {
            "address": self.buyer.set_address,
            "email": self.buyer.set_email,
            "phone": self.buyer.set_phone,
        }
        setter = setters.get(event.field)
        if setter is None:
            logger.debug("form-change: unknown field %s", event.field)
            return
        setter(event.value)

    def _on_checkout_next(self, event: Event) -> None:
        if self.state is not ActiveView.DELIVERY:
            logger.debug("checkout-next ignored in state %s", self.state.value)
            return
        if not self.buyer.is_valid_address():
            self._render_delivery()
            return
        self._open_contacts()

    def _on_checkout_submit(self, event: CheckoutSubmit) -> None:
        if self.state is ActiveView.DELIVERY:
            self._on_checkout_next(event)
            return
        if self.state is not ActiveView.CONTACTS:
            logger.debug("checkout-submit ignored in state %s", self.state.value)
            return
        if self.submitting:
            logger.info("Order submission already in flight, ignoring submit")
            return

        result = self.buyer.validate_buyer_data()
        if "address" in result.errors:
            self._open_delivery()
            return
        if not result.is_valid:
            self._render_contacts()
            return
        if self.cart.get_item_count() == 0:
            self._on_cart_open(CartOpen())
            return

        order = OrderRequest.build(
            self.buyer.get_buyer_data(),
            total=self.cart.get_total_price(),
            items=tuple(p.id for p in self.cart.get_items()),
        )
        self._order_error = ""
        self._submission = asyncio.get_running_loop().create_task(self._submit(order))
        self._render_contacts()

    def _on_close(self, event: Event) -> None:
        self._close_modal()

    # ---------------- order submission ----------------

    async def _submit(self, order: OrderRequest) -> Optional[OrderConfirmation]:
        try:
            confirmation = await self.gateway.create_order(order)
        except Exception:
            logger.exception("Order submission failed")
            self._submission = None
            self._order_error = ERR_ORDER
            if self.state is ActiveView.CONTACTS:
                self._render_contacts()
            return None

        self._submission = None
        logger.info("Order %s placed, total %s", confirmation.id, confirmation.total)
        items = self.cart.get_items()

        self._set_state(ActiveView.CONFIRMATION)
        self.view.render_confirmation(ConfirmationScreen(order_id=confirmation.id, total=confirmation.total))
        self.cart.clear()
        self.buyer.clear_buyer_data()

        # the server has accepted the order; subscriber faults must not undo the step
        try:
            self.bus.emit(OrderPlaced(confirmation=confirmation, request=order, items=items))
        except EventDispatchError:
            logger.exception("order:placed handlers failed for order %s", confirmation.id)
        return confirmation

    # ---------------- helpers ----------------

    def _set_state(self, state: ActiveView) -> None:
        if state is not self.state:
            logger.debug("view %s -> %s", self.state.value, state.value)
        self.state = state

    def _cart_locked(self, event: Event) -> bool:
        # the order in flight was built from the current cart
        if self.submitting:
            logger.debug("%s ignored while an order is being submitted", event.name)
            return True
        return False

    def _find_product(self, product_id: str) -> Optional[Product]:
        # cart lines may outlive a catalog refresh
        product = self.catalog.get_product(product_id) or self.cart.get_item(product_id)
        if product is None:
            logger.debug("unknown product %s", product_id)
        return product

    def _close_modal(self) -> None:
        if self.state is not ActiveView.NONE:
            self._set_state(ActiveView.NONE)
            self.view.close()
            # in-cart marks may have changed while the modal was open
            self._render_catalog()
        if self.catalog.get_preview() is not None:
            self.catalog.set_preview(None)

    def _open_preview(self, product: Product) -> None:
        self._set_state(ActiveView.PREVIEW)
        in_cart = self.cart.has_item(product.id)
        if not product.purchasable:
            action = PreviewAction.DISABLED
        elif in_cart:
            action = PreviewAction.REMOVE
        else:
            action = PreviewAction.ADD
        self.view.render_preview(PreviewScreen(product=product, in_cart=in_cart, action=action))

    def _open_delivery(self) -> None:
        self._set_state(ActiveView.DELIVERY)
        self._render_delivery()

    def _open_contacts(self) -> None:
        self._order_error = ""
        self._set_state(ActiveView.CONTACTS)
        self._render_contacts()

    def _render_catalog(self) -> None:
        items = self.catalog.get_items()
        cards = tuple(
            CatalogCard(
                id=p.id,
                title=p.title,
                category=p.category,
                price=p.price,
                image=p.image,
                in_cart=self.cart.has_item(p.id),
            )
            for p in items
        )
        error_text = ERR_CATALOG if self.catalog.load_failed and not items else ""
        self.view.render_catalog(CatalogScreen(cards=cards, error_text=error_text))

    def _render_cart(self) -> None:
        lines = tuple(
            CartLine(index=i, id=p.id, title=p.title, price=p.price)
            for i, p in enumerate(self.cart.get_items(), start=1)
        )
        self.view.render_cart(
            CartScreen(lines=lines, total=self.cart.get_total_price(), can_checkout=bool(lines))
        )

    def _render_delivery(self) -> None:
        draft = self.buyer.get_buyer_data()
        valid = self.buyer.is_valid_address()
        self.view.render_delivery(
            DeliveryScreen(
                payment=draft.payment,
                address=draft.address,
                is_valid=valid,
                error_text="" if valid else ERR_ADDRESS,
            )
        )

    def _render_contacts(self) -> None:
        draft = self.buyer.get_buyer_data()
        errors = self.buyer.validate_buyer_data().errors
        # address was checked on the delivery step
        contact_errors = [errors[k] for k in ("email", "phone") if k in errors]
        valid = not contact_errors
        if self._order_error:
            error_text = self._order_error
        elif valid:
            error_text = ""
        else:
            error_text = ". ".join(contact_errors)
        self.view.render_contacts(
            ContactsScreen(
                email=draft.email,
                phone=draft.phone,
                is_valid=valid,
                error_text=error_text,
                submitting=self.submitting,
            )
        )
