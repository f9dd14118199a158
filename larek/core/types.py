from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class Category(str, Enum):
    SOFT_SKILL = "софт-скил"
    HARD_SKILL = "хард-скил"
    OTHER = "другое"
    ADDITIONAL = "дополнительное"
    BUTTON = "кнопка"

    @classmethod
    def parse(cls, value: Any) -> "Category":
        try:
            return cls(value)
        except ValueError:
            logger.warning("Unknown product category %r, using %s", value, cls.OTHER.value)
            return cls.OTHER


class Payment(str, Enum):
    CARD = "card"
    CASH = "cash"


@dataclass(frozen=True)
class Product:
    id: str
    title: str
    description: str
    image: str
    category: Category
    price: Optional[float]

    @property
    def purchasable(self) -> bool:
        return self.price is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], image_origin: str = "") -> "Product":
        """
        Builds a product from the API payload.
        `image` on the wire is a path relative to the content origin.
        """
        return cls(
            id=str(data["id"]),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            image=image_origin + str(data.get("image") or ""),
            category=Category.parse(data.get("category")),
            price=data.get("price"),
        )


@dataclass(frozen=True)
class BuyerDraft:
    payment: Payment = Payment.CARD
    email: str = ""
    phone: str = ""
    address: str = ""


BUYER_FIELDS = ("payment", "email", "phone", "address")


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class OrderRequest:
    payment: Payment
    email: str
    phone: str
    address: str
    total: float
    items: Tuple[str, ...]

    @classmethod
    def build(cls, draft: BuyerDraft, total: float, items: Tuple[str, ...]) -> "OrderRequest":
        return cls(
            payment=draft.payment,
            email=draft.email,
            phone=draft.phone,
            address=draft.address,
            total=total,
            items=tuple(items),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["payment"] = self.payment.value
        data["items"] = list(self.items)
        return data


@dataclass(frozen=True)
class OrderConfirmation:
    id: str
    total: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderConfirmation":
        return cls(id=str(data["id"]), total=data["total"])
