"""Telegram layer: callback parsing, keyboards, message texts and per-chat sessions."""

import asyncio

import pytest
from conftest import FakeGateway, make_product

from larek.bot import keyboards, templates
from larek.bot.handlers import intent_from_callback
from larek.bot.sessions import SessionRegistry, build_session
from larek.bot.views import TelegramView
from larek.config import settings
from larek.constants import ACTION_BUY, ACTION_REMOVE, ACTION_UNAVAILABLE, CART_EMPTY, ERR_CATALOG, PRICE_FREE
from larek.core.events import (
    BasketRemove,
    CartOpen,
    Checkout,
    CheckoutNext,
    CheckoutSubmit,
    FormChange,
    ModalClose,
    PaymentChange,
    ProductAdd,
    ProductOpen,
)
from larek.core.screens import (
    ActiveView,
    CartLine,
    CartScreen,
    CatalogCard,
    CatalogScreen,
    ContactsScreen,
    PreviewAction,
    PreviewScreen,
)
from larek.core.types import Category, Payment
from larek.services.catalog_loader import CatalogLoadResult


def _loaded(*products, load_failed=False):
    return CatalogLoadResult(items=tuple(products), load_failed=load_failed, source="primary")


def _callbacks(markup):
    return [button.callback_data for row in markup.inline_keyboard for button in row]


def _texts(markup):
    return [button.text for row in markup.inline_keyboard for button in row]


def _card(pid="p1", in_cart=False):
    return CatalogCard(id=pid, title=f"Product {pid}", category=Category.OTHER, price=100, image="", in_cart=in_cart)


class FakeMessage:
    def __init__(self):
        self.edited = []
        self.answered = []

    async def edit_text(self, text, reply_markup=None):
        self.edited.append(text)

    async def answer(self, text, reply_markup=None):
        self.answered.append(text)


class TestCallbacks:
    @pytest.mark.parametrize(
        "data, expected",
        [
            ("open:p1", ProductOpen(id="p1")),
            ("add:p1", ProductAdd(id="p1")),
            ("bremove:p1", BasketRemove(id="p1")),
            ("cart", CartOpen()),
            ("checkout", Checkout()),
            ("close", ModalClose()),
            ("pay:cash", PaymentChange(payment=Payment.CASH)),
        ],
    )
    def test_known(self, data, expected):
        assert intent_from_callback(data) == expected

    @pytest.mark.parametrize("data", ["", "open:", "pay:crypto", "whatever"])
    def test_unknown(self, data):
        assert intent_from_callback(data) is None


class TestKeyboards:
    def test_catalog_marks_cart_and_counter(self):
        screen = CatalogScreen(cards=(_card("p1", in_cart=True), _card("p2")))
        markup = keyboards.catalog_kb(screen, counter=1)
        assert _callbacks(markup) == ["open:p1", "open:p2", "cart"]
        assert _texts(markup)[0].startswith("✅ ")
        assert _texts(markup)[-1] == "🛒 Корзина (1)"

    def test_catalog_offers_reload_on_error(self):
        markup = keyboards.catalog_kb(CatalogScreen(cards=(), error_text=ERR_CATALOG), counter=0)
        assert _callbacks(markup) == ["reload", "cart"]

    @pytest.mark.parametrize(
        "action, text, data",
        [
            (PreviewAction.ADD, ACTION_BUY, "add:p1"),
            (PreviewAction.REMOVE, ACTION_REMOVE, "remove:p1"),
            (PreviewAction.DISABLED, ACTION_UNAVAILABLE, "noop"),
        ],
    )
    def test_preview_action(self, action, text, data):
        screen = PreviewScreen(product=make_product("p1"), in_cart=action is PreviewAction.REMOVE, action=action)
        first = keyboards.preview_kb(screen).inline_keyboard[0][0]
        assert (first.text, first.callback_data) == (text, data)

    def test_cart_checkout_only_when_allowed(self):
        line = CartLine(index=1, id="p1", title="Product p1", price=100)
        assert "checkout" in _callbacks(keyboards.cart_kb(CartScreen(lines=(line,), total=100, can_checkout=True)))
        assert "checkout" not in _callbacks(keyboards.cart_kb(CartScreen(lines=(), total=0, can_checkout=False)))

    def test_contacts_submit_hidden_while_submitting(self):
        ready = ContactsScreen(email="a@b.co", phone="+79991234567", is_valid=True)
        busy = ContactsScreen(email="a@b.co", phone="+79991234567", is_valid=True, submitting=True)
        assert "submit" in _callbacks(keyboards.contacts_kb(ready))
        assert "submit" not in _callbacks(keyboards.contacts_kb(busy))


class TestTemplates:
    def test_unpriced_product_label(self):
        text = templates.render("preview.html", product=make_product("p1", None))
        assert PRICE_FREE in text

    def test_titles_are_escaped(self):
        text = templates.render("preview.html", product=make_product("p1", title="<b>x</b>"))
        assert "&lt;b&gt;x&lt;/b&gt;" in text

    def test_empty_cart(self):
        text = templates.render("cart.html", screen=CartScreen(lines=(), total=0, can_checkout=False))
        assert CART_EMPTY in text
        assert f"0 {settings.currency}" in text

    def test_catalog_error(self):
        text = templates.render("catalog.html", screen=CatalogScreen(cards=(), error_text=ERR_CATALOG))
        assert ERR_CATALOG in text


class TestTelegramView:
    def test_catalog_hidden_while_step_open(self):
        view = TelegramView()
        view.render_catalog(CatalogScreen(cards=(_card(),)))
        assert view.take() is not None

        view.render_cart(CartScreen(lines=(), total=0, can_checkout=False))
        view.render_catalog(CatalogScreen(cards=(_card(in_cart=True),)))
        assert "Корзина" in view.take().text

    def test_close_shows_latest_catalog(self):
        view = TelegramView()
        view.render_cart(CartScreen(lines=(), total=0, can_checkout=False))
        view.render_catalog(CatalogScreen(cards=(_card(in_cart=True),)))
        view.close()
        out = view.take()
        assert "✅" in out.text
        assert view.take() is None

    def test_last_screen_wins(self):
        view = TelegramView()
        view.render_cart(CartScreen(lines=(), total=0, can_checkout=False))
        view.render_preview(PreviewScreen(make_product("p1"), in_cart=False, action=PreviewAction.ADD))
        assert "Product p1" in view.take().text

    def test_flush_edits_or_answers(self):
        view = TelegramView()
        message = FakeMessage()

        async def scenario():
            view.render_cart(CartScreen(lines=(), total=0, can_checkout=False))
            await view.flush(message, edit=True)
            view.render_cart(CartScreen(lines=(), total=0, can_checkout=False))
            await view.flush(message)
            await view.flush(message)

        asyncio.run(scenario())
        assert len(message.edited) == 1
        assert len(message.answered) == 1


class TestSessions:
    def test_new_session_shows_catalog(self):
        session = build_session(1, FakeGateway(), _loaded(make_product("p1")))
        out = session.view.take()
        assert "Product p1" in out.text
        assert session.orchestrator.state is ActiveView.NONE

    def test_failed_load_shows_error(self):
        session = build_session(1, FakeGateway(), _loaded(load_failed=True))
        assert ERR_CATALOG in session.view.take().text

    def test_add_from_preview_updates_counter(self):
        session = build_session(1, FakeGateway(), _loaded(make_product("p1")))
        session.bus.emit(ProductOpen(id="p1"))
        session.bus.emit(ProductAdd(id="p1"))
        out = session.view.take()
        assert session.view.counter == 1
        assert "🛒 Корзина (1)" in _texts(out.reply_markup)

    def test_purchase_collects_placed_order(self):
        gateway = FakeGateway(order_id="order-42")
        session = build_session(1, gateway, _loaded(make_product("p1", 750)))

        async def scenario():
            session.cart.add_item(session.catalog.get_product("p1"))
            for event in (
                CartOpen(),
                Checkout(),
                FormChange(field="address", value="Москва"),
                CheckoutNext(),
                FormChange(field="email", value="a@b.co"),
                FormChange(field="phone", value="+79991234567"),
                CheckoutSubmit(),
            ):
                session.bus.emit(event)
            await session.settle()

        asyncio.run(scenario())
        placed = session.pop_placed()
        assert [p.confirmation.id for p in placed] == ["order-42"]
        assert placed[0].request.items == ("p1",)
        assert session.pop_placed() == []
        assert "order-42" in session.view.take().text
        assert session.cart.get_item_count() == 0


class TestRegistry:
    def test_one_session_per_chat(self):
        registry = SessionRegistry(FakeGateway(), _loaded(make_product("p1")))
        first = registry.get(1)
        assert registry.get(1) is first
        assert registry.get(2) is not first
        assert len(registry) == 2
        assert registry.find(3) is None

    def test_update_catalog_keeps_carts(self):
        registry = SessionRegistry(FakeGateway(), _loaded(make_product("p1")))
        one, two = registry.get(1), registry.get(2)
        one.cart.add_item(one.catalog.get_product("p1"))
        one.view.take()
        two.view.take()

        registry.update_catalog(_loaded(make_product("p1"), make_product("p2")), chat_id=1)

        assert [p.id for p in two.catalog.get_items()] == ["p1", "p2"]
        assert one.cart.has_item("p1")
        assert "Product p2" in one.view.take().text
        assert two.view.take() is None
        assert registry.get(3).catalog.get_product("p2") is not None
