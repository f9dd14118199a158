from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from aiogram.exceptions import TelegramBadRequest
from aiogram.types import InlineKeyboardMarkup, Message

from larek.bot import keyboards, templates
from larek.core.screens import (
    CartScreen,
    CatalogScreen,
    ConfirmationScreen,
    ContactsScreen,
    DeliveryScreen,
    PreviewScreen,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outgoing:
    text: str
    reply_markup: InlineKeyboardMarkup


class TelegramView:
    """
    Chat rendition of the shop screens.

    The orchestrator renders synchronously; the view keeps only the last
    screen it was asked for and the handler sends it with `flush()` once the
    update has been processed, so one update produces at most one message.
    Closing a step brings the catalog back.
    """

    def __init__(self) -> None:
        self.counter = 0
        self._catalog: Optional[CatalogScreen] = None
        self._pending: Optional[Outgoing] = None
        self._modal_open = False

    # ---------------- ShopView ----------------

    def render_header(self, counter: int) -> None:
        self.counter = max(0, counter)

    def render_catalog(self, screen: CatalogScreen) -> None:
        self._catalog = screen
        # the catalog stays underneath an open step
        if not self._modal_open:
            self.show_catalog()

    def render_preview(self, screen: PreviewScreen) -> None:
        self._open(templates.render("preview.html", product=screen.product), keyboards.preview_kb(screen))

    def render_cart(self, screen: CartScreen) -> None:
        self._open(templates.render("cart.html", screen=screen), keyboards.cart_kb(screen))

    def render_delivery(self, screen: DeliveryScreen) -> None:
        self._open(templates.render("delivery.html", screen=screen), keyboards.delivery_kb(screen))

    def render_contacts(self, screen: ContactsScreen) -> None:
        self._open(templates.render("contacts.html", screen=screen), keyboards.contacts_kb(screen))

    def render_confirmation(self, screen: ConfirmationScreen) -> None:
        self._open(templates.render("confirmation.html", screen=screen), keyboards.confirmation_kb())

    def close(self) -> None:
        self._modal_open = False
        self.show_catalog()

    # ---------------- sending ----------------

    def show_catalog(self) -> None:
        if self._catalog is None:
            return
        self._set(
            templates.render("catalog.html", screen=self._catalog),
            keyboards.catalog_kb(self._catalog, self.counter),
        )

    def take(self) -> Optional[Outgoing]:
        out, self._pending = self._pending, None
        return out

    async def flush(self, message: Message, edit: bool = False) -> None:
        out = self.take()
        if out is None:
            return
        if edit:
            try:
                await message.edit_text(out.text, reply_markup=out.reply_markup)
                return
            except TelegramBadRequest as e:
                if "message is not modified" in str(e):
                    return
                logger.debug("edit failed, sending a new message: %s", e)
        await message.answer(out.text, reply_markup=out.reply_markup)

    def _open(self, text: str, markup: InlineKeyboardMarkup) -> None:
        self._modal_open = True
        self._set(text, markup)

    def _set(self, text: str, markup: InlineKeyboardMarkup) -> None:
        self._pending = Outgoing(text=text, reply_markup=markup)
