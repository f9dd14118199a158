from __future__ import annotations

import logging
from typing import Optional

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, FSInputFile, Message

from larek.bot.keyboards import (
    CB_ADD,
    CB_BASKET_REMOVE,
    CB_CART,
    CB_CHECKOUT,
    CB_CLOSE,
    CB_FIELD,
    CB_NEXT,
    CB_NOOP,
    CB_OPEN,
    CB_PAY,
    CB_RELOAD,
    CB_REMOVE,
    CB_SUBMIT,
    CB_SUCCESS_CLOSE,
    payment_from_callback,
)
from larek.bot.sessions import SessionRegistry, ShopSession
from larek.bot.states import FIELD_STATES, CheckoutInput
from larek.config import settings
from larek.constants import ACTION_UNAVAILABLE
from larek.core.events import (
    BasketRemove,
    CartOpen,
    Checkout,
    CheckoutNext,
    CheckoutSubmit,
    Event,
    EventDispatchError,
    FormChange,
    ModalClose,
    PaymentChange,
    ProductAdd,
    ProductOpen,
    ProductRemove,
    SuccessClose,
)
from larek.core.screens import ActiveView
from larek.services.catalog_loader import load_shop_catalog
from larek.services.larek_api import LarekAPI
from larek.services.receipt_pdf import generate_receipt_pdf

logger = logging.getLogger(__name__)

router = Router()

SIMPLE_INTENTS = {
    CB_CART: CartOpen,
    CB_CHECKOUT: Checkout,
    CB_NEXT: CheckoutNext,
    CB_SUBMIT: CheckoutSubmit,
    CB_CLOSE: ModalClose,
    CB_SUCCESS_CLOSE: SuccessClose,
}

ID_INTENTS = {
    CB_OPEN: ProductOpen,
    CB_ADD: ProductAdd,
    CB_REMOVE: ProductRemove,
    CB_BASKET_REMOVE: BasketRemove,
}


def intent_from_callback(data: str) -> Optional[Event]:
    if data in SIMPLE_INTENTS:
        return SIMPLE_INTENTS[data]()
    for prefix, intent in ID_INTENTS.items():
        if data.startswith(prefix) and len(data) > len(prefix):
            return intent(id=data[len(prefix):])
    if data.startswith(CB_PAY):
        try:
            return PaymentChange(payment=payment_from_callback(data))
        except ValueError:
            return None
    return None


async def _sync_input(session: ShopSession, state: FSMContext, field: Optional[str] = None) -> None:
    """Points free-text input at the field the current step expects."""
    view = session.orchestrator.state
    if view is ActiveView.DELIVERY:
        await state.set_state(CheckoutInput.address)
    elif view is ActiveView.CONTACTS:
        if field in ("email", "phone"):
            await state.set_state(FIELD_STATES[field])
            return
        current = await state.get_state()
        buyer = session.buyer
        if current == CheckoutInput.email.state and buyer.is_valid_email() and not buyer.is_valid_phone():
            await state.set_state(CheckoutInput.phone)
        elif current not in (CheckoutInput.email.state, CheckoutInput.phone.state):
            await state.set_state(CheckoutInput.email)
    else:
        await state.clear()


async def _send_receipts(session: ShopSession, message: Message) -> None:
    for placed in session.pop_placed():
        try:
            path = generate_receipt_pdf(placed.confirmation, placed.request, placed.items)
            await message.answer_document(FSInputFile(path))
        except Exception as e:
            logger.exception("Receipt for order %s failed", placed.confirmation.id)
            await message.answer(f"⚠️ Заказ оформлен, но чек не сформировался: {e}")


async def _dispatch(
    session: ShopSession,
    event: Event,
    message: Message,
    state: FSMContext,
    edit: bool = True,
) -> None:
    try:
        session.bus.emit(event)
    except EventDispatchError as e:
        logger.exception("Handling %s failed", event.name)
        await message.answer(f"❌ Ошибка: {e.errors[0]}")
        return

    # first flush shows the in-flight step, the second one its outcome
    await session.view.flush(message, edit=edit)
    await session.settle()
    await session.view.flush(message, edit=edit)

    await _sync_input(session, state)
    await _send_receipts(session, message)


@router.message(Command("start"))
async def cmd_start(message: Message, state: FSMContext, registry: SessionRegistry):
    session = registry.get(message.chat.id)
    await state.clear()
    session.bus.emit(ModalClose())
    session.view.show_catalog()
    await session.view.flush(message)


@router.message(Command("help"))
async def cmd_help(message: Message):
    text = (
        "<b>Веб-ларёк — команды</b>\n\n"
        "/start — каталог\n"
        "/cart — корзина\n"
        "/cancel — прервать оформление\n"
        "/reload — обновить каталог\n"
        "/help — помощь\n"
    )
    await message.answer(text)


@router.message(Command("cart"))
async def cmd_cart(message: Message, state: FSMContext, registry: SessionRegistry):
    session = registry.get(message.chat.id)
    await _dispatch(session, CartOpen(), message, state, edit=False)


@router.message(Command("cancel"))
async def cmd_cancel(message: Message, state: FSMContext, registry: SessionRegistry):
    session = registry.get(message.chat.id)
    await state.clear()
    await _dispatch(session, ModalClose(), message, state, edit=False)


async def _reload(message: Message, registry: SessionRegistry, api: LarekAPI, edit: bool) -> None:
    loaded = await load_shop_catalog(settings, api)
    session = registry.get(message.chat.id)
    registry.update_catalog(loaded, chat_id=message.chat.id)
    await session.view.flush(message, edit=edit)


@router.message(Command("reload"))
async def cmd_reload(message: Message, registry: SessionRegistry, api: LarekAPI):
    await _reload(message, registry, api, edit=False)


@router.callback_query(F.data == CB_RELOAD)
async def cb_reload(callback: CallbackQuery, registry: SessionRegistry, api: LarekAPI):
    await callback.answer("Обновляем каталог…")
    await _reload(callback.message, registry, api, edit=True)


@router.callback_query(F.data == CB_NOOP)
async def cb_noop(callback: CallbackQuery):
    await callback.answer(ACTION_UNAVAILABLE)


@router.callback_query(F.data.startswith(CB_FIELD))
async def cb_field(callback: CallbackQuery, state: FSMContext, registry: SessionRegistry):
    session = registry.get(callback.message.chat.id)
    field = callback.data[len(CB_FIELD):]
    if session.orchestrator.state is not ActiveView.CONTACTS or field not in ("email", "phone"):
        await callback.answer()
        return
    await _sync_input(session, state, field)
    await callback.answer("Отправьте email сообщением" if field == "email" else "Отправьте телефон в формате +7XXXXXXXXXX")


@router.callback_query()
async def cb_intent(callback: CallbackQuery, state: FSMContext, registry: SessionRegistry):
    event = intent_from_callback(callback.data or "")
    if event is None:
        await callback.answer()
        return
    session = registry.get(callback.message.chat.id)
    await callback.answer()
    await _dispatch(session, event, callback.message, state, edit=True)


@router.message(CheckoutInput.address)
@router.message(CheckoutInput.email)
@router.message(CheckoutInput.phone)
async def form_input(message: Message, state: FSMContext, registry: SessionRegistry):
    value = (message.text or "").strip()
    if not value or value.startswith("/"):
        await message.answer("Отправьте значение текстом. Отмена: /cancel")
        return

    current = await state.get_state()
    field = next(name for name, st in FIELD_STATES.items() if st.state == current)
    session = registry.get(message.chat.id)
    await _dispatch(session, FormChange(field=field, value=value), message, state, edit=False)


@router.message()
async def fallback(message: Message):
    await message.answer("Пользуйтесь кнопками под сообщениями или /start")
