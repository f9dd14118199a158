from larek.core.types import Category, Payment

CATEGORIES = {
    Category.SOFT_SKILL: "🟢 софт-скил",
    Category.HARD_SKILL: "🟠 хард-скил",
    Category.OTHER: "🟣 другое",
    Category.ADDITIONAL: "🔵 дополнительное",
    Category.BUTTON: "⚪ кнопка",
}

PAYMENTS = {
    Payment.CARD: "Онлайн",
    Payment.CASH: "При получении",
}

PRICE_FREE = "Бесценно"

# кнопка на карточке товара
ACTION_BUY = "Купить"
ACTION_REMOVE = "Удалить из корзины"
ACTION_UNAVAILABLE = "Недоступно"

ERR_EMAIL = "Некорректный email адрес"
ERR_PHONE = "Некорректный номер телефона"
ERR_ADDRESS = "Адрес доставки обязателен"
ERR_ORDER = "Не удалось оформить заказ. Попробуйте позже."
ERR_CATALOG = "Не удалось загрузить каталог. Попробуйте позже."

CART_EMPTY = "Корзина пуста"
