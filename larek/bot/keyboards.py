from __future__ import annotations

from typing import List

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from larek.constants import ACTION_BUY, ACTION_REMOVE, ACTION_UNAVAILABLE, PAYMENTS
from larek.core.screens import (
    CartScreen,
    CatalogScreen,
    ContactsScreen,
    DeliveryScreen,
    PreviewAction,
    PreviewScreen,
)
from larek.core.types import Payment

# callback_data
CB_OPEN = "open:"
CB_ADD = "add:"
CB_REMOVE = "remove:"
CB_BASKET_REMOVE = "bremove:"
CB_PAY = "pay:"
CB_FIELD = "field:"
CB_CART = "cart"
CB_CHECKOUT = "checkout"
CB_NEXT = "next"
CB_SUBMIT = "submit"
CB_CLOSE = "close"
CB_SUCCESS_CLOSE = "success-close"
CB_RELOAD = "reload"
CB_NOOP = "noop"


def _btn(text: str, data: str) -> InlineKeyboardButton:
    return InlineKeyboardButton(text=text, callback_data=data)


def _close_row(text: str = "← Назад") -> List[InlineKeyboardButton]:
    return [_btn(text, CB_CLOSE)]


def catalog_kb(screen: CatalogScreen, counter: int) -> InlineKeyboardMarkup:
    rows = [[_btn(("✅ " if c.in_cart else "") + c.title, CB_OPEN + c.id)] for c in screen.cards]
    if screen.error_text:
        rows.append([_btn("🔄 Обновить", CB_RELOAD)])
    rows.append([_btn(f"🛒 Корзина ({counter})", CB_CART)])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def preview_kb(screen: PreviewScreen) -> InlineKeyboardMarkup:
    pid = screen.product.id
    if screen.action is PreviewAction.ADD:
        action = _btn(ACTION_BUY, CB_ADD + pid)
    elif screen.action is PreviewAction.REMOVE:
        action = _btn(ACTION_REMOVE, CB_REMOVE + pid)
    else:
        action = _btn(ACTION_UNAVAILABLE, CB_NOOP)
    return InlineKeyboardMarkup(inline_keyboard=[[action], _close_row()])


def cart_kb(screen: CartScreen) -> InlineKeyboardMarkup:
    rows = [[_btn(f"✖ {line.index}. {line.title}", CB_BASKET_REMOVE + line.id)] for line in screen.lines]
    if screen.can_checkout:
        rows.append([_btn("Оформить", CB_CHECKOUT)])
    rows.append(_close_row("← К каталогу"))
    return InlineKeyboardMarkup(inline_keyboard=rows)


def delivery_kb(screen: DeliveryScreen) -> InlineKeyboardMarkup:
    pay_row = [
        _btn(("✅ " if screen.payment is p else "") + label, CB_PAY + p.value)
        for p, label in PAYMENTS.items()
    ]
    rows = [pay_row]
    if screen.is_valid:
        rows.append([_btn("Далее", CB_NEXT)])
    rows.append(_close_row("Отмена"))
    return InlineKeyboardMarkup(inline_keyboard=rows)


def contacts_kb(screen: ContactsScreen) -> InlineKeyboardMarkup:
    rows = [[_btn("✉️ Email", CB_FIELD + "email"), _btn("📞 Телефон", CB_FIELD + "phone")]]
    if screen.is_valid and not screen.submitting:
        rows.append([_btn("Оплатить", CB_SUBMIT)])
    rows.append(_close_row("Отмена"))
    return InlineKeyboardMarkup(inline_keyboard=rows)


def confirmation_kb() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[[_btn("За новыми покупками!", CB_SUCCESS_CLOSE)]])


def payment_from_callback(data: str) -> Payment:
    return Payment(data[len(CB_PAY):])
