from __future__ import annotations

from typing import Any, Dict, List

from larek.core.types import Product

# same shape as GET /product items; used when no API source answers
STATIC_ITEMS: List[Dict[str, Any]] = [
    {
        "id": "854cef69-976d-4c2a-a18c-2aa45046c390",
        "title": "+1 час в сутках",
        "description": "Если планируете решать задачи в тренажёре, берите два.",
        "image": "/5_Dots.svg",
        "category": "софт-скил",
        "price": 750,
    },
    {
        "id": "c101ab44-ed99-4a54-990d-47aa2bb4e7d9",
        "title": "HEX-леденец",
        "description": "Лизните этот леденец, чтобы мгновенно запоминать и узнавать любой цветовой код CSS.",
        "image": "/Shell.svg",
        "category": "другое",
        "price": 1450,
    },
    {
        "id": "b06cde61-912f-4663-9751-09956c0eed67",
        "title": "Мамка-таймер",
        "description": "Будет стоять над душой и не давать прокрастинировать.",
        "image": "/Asterisk_2.svg",
        "category": "софт-скил",
        "price": None,
    },
    {
        "id": "412bcf81-7e75-4e70-bdb9-d3c73c9803b7",
        "title": "Фреймворк куки судьбы",
        "description": "Дайте задачу, а я выдам вам фреймворк, который вам подойдёт.",
        "image": "/Soft_Flower.svg",
        "category": "дополнительное",
        "price": 2500,
    },
    {
        "id": "1c521d84-c48d-48fa-8cfb-9d911fa515fd",
        "title": "Кнопка «Замьютить кота»",
        "description": "Если орёт кот, нажмите кнопку.",
        "image": "/mute-cat.svg",
        "category": "кнопка",
        "price": 2000,
    },
    {
        "id": "f3867296-45c7-4603-bd34-7e8a3bbdbaae",
        "title": "БЭМ-пилюлька",
        "description": "Чтобы научиться правильно называть модификаторы, без этого не обойтись.",
        "image": "/Pill.svg",
        "category": "другое",
        "price": 1500,
    },
    {
        "id": "54df7dcb-1213-4b3c-ab61-92ed5f845535",
        "title": "Портативный телепорт",
        "description": "Измените локацию для поиска работы.",
        "image": "/Polygon.svg",
        "category": "другое",
        "price": 100000,
    },
    {
        "id": "6a834fb8-350a-440c-ab55-d0e9b959b6e3",
        "title": "Микровселенная в кармане",
        "description": "Даст время для изучения React, ООП и бэкенда.",
        "image": "/Butterfly.svg",
        "category": "другое",
        "price": 750,
    },
    {
        "id": "48e86fc0-ca99-4e13-b164-b98d65928b53",
        "title": "UI/UX-карандаш",
        "description": "Очень полезный навык для фронтендера. Без шуток.",
        "image": "/Leaf.svg",
        "category": "хард-скил",
        "price": 10000,
    },
    {
        "id": "90973ae5-285c-4b6f-a6d0-65d1d760b102",
        "title": "Бэкенд-антистресс",
        "description": "Сжимайте мячик, чтобы снизить стресс от тем по бэкенду.",
        "image": "/Mithosis.svg",
        "category": "другое",
        "price": 1000,
    },
]


def static_products(image_origin: str = "") -> List[Product]:
    return [Product.from_dict(item, image_origin) for item in STATIC_ITEMS]
