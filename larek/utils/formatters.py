from typing import Optional

from larek.config import settings
from larek.constants import PRICE_FREE


def money(v: float) -> str:
    if float(v).is_integer():
        return f"{int(v)} {settings.currency}"
    return f"{v:.2f} {settings.currency}"


def price_label(price: Optional[float]) -> str:
    return PRICE_FREE if price is None else money(price)
