from aiogram.fsm.state import State, StatesGroup


class CheckoutInput(StatesGroup):
    address = State()
    email = State()
    phone = State()


FIELD_STATES = {
    "address": CheckoutInput.address,
    "email": CheckoutInput.email,
    "phone": CheckoutInput.phone,
}
