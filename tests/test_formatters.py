from larek.config import settings
from larek.constants import PRICE_FREE
from larek.utils.formatters import money, price_label
from larek.utils.validators import is_filled


def test_money_whole():
    assert money(750) == f"750 {settings.currency}"
    assert money(750.0) == f"750 {settings.currency}"


def test_money_fraction():
    assert money(12.5) == f"12.50 {settings.currency}"


def test_price_label():
    assert price_label(None) == PRICE_FREE
    assert price_label(0) == money(0)


def test_is_filled():
    assert is_filled(" x ")
    assert not is_filled("  ")
