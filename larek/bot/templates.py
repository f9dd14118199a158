"""Message texts of the bot screens, rendered for Telegram's HTML parse mode."""
from __future__ import annotations

from typing import Any

from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape

from larek.constants import CART_EMPTY, CATEGORIES, PAYMENTS
from larek.utils.formatters import money, price_label

TEMPLATES = {
    "catalog.html": (
        "<b>Каталог</b>\n"
        "{% if screen.error_text %}\n⚠️ {{ screen.error_text }}\n"
        "{% elif not screen.cards %}\nТоваров пока нет.\n"
        "{% else %}"
        "{% for card in screen.cards %}"
        "\n{{ '✅' if card.in_cart else '•' }} {{ card.title }} — {{ card.price | price }}"
        "{% endfor %}\n"
        "{% endif %}"
    ),
    "preview.html": (
        "{{ product.category | category }}\n"
        "<b>{{ product.title }}</b>\n\n"
        "{{ product.description }}\n\n"
        "<b>{{ product.price | price }}</b>"
        "{% if product.image %}\n<a href=\"{{ product.image }}\">изображение</a>{% endif %}"
    ),
    "cart.html": (
        "<b>Корзина</b>\n"
        "{% for line in screen.lines %}"
        "\n{{ line.index }}. {{ line.title }} — {{ line.price | price }}"
        "{% if not line.purchasable %} (недоступно){% endif %}"
        "{% else %}\n{{ empty }}"
        "{% endfor %}\n\n"
        "Итого: <b>{{ screen.total | money }}</b>"
    ),
    "delivery.html": (
        "<b>Способ оплаты</b>: {{ screen.payment | payment }}\n"
        "<b>Адрес доставки</b>: {{ screen.address or '—' }}\n\n"
        "Отправьте адрес доставки сообщением."
        "{% if screen.error_text %}\n\n⚠️ {{ screen.error_text }}{% endif %}"
    ),
    "contacts.html": (
        "<b>Email</b>: {{ screen.email or '—' }}\n"
        "<b>Телефон</b>: {{ screen.phone or '—' }}\n\n"
        "{% if screen.submitting %}⏳ Оформляем заказ…"
        "{% else %}Выберите поле и отправьте значение сообщением.{% endif %}"
        "{% if screen.error_text %}\n\n⚠️ {{ screen.error_text }}{% endif %}"
    ),
    "confirmation.html": (
        "✅ <b>Заказ оформлен</b>\n\n"
        "Списано {{ screen.total | money }}\n"
        "Номер заказа: <code>{{ screen.order_id }}</code>"
    ),
}

env = Environment(
    loader=DictLoader(TEMPLATES),
    autoescape=select_autoescape(["html"]),
    undefined=StrictUndefined,
    keep_trailing_newline=False,
)
env.filters["price"] = price_label
env.filters["money"] = money
env.filters["category"] = lambda c: CATEGORIES[c]
env.filters["payment"] = lambda p: PAYMENTS[p]


def render(name: str, **ctx: Any) -> str:
    return env.get_template(name).render(empty=CART_EMPTY, **ctx)
