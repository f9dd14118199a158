from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Optional, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from larek.config import settings
from larek.constants import PAYMENTS
from larek.core.types import OrderConfirmation, OrderRequest, Product
from larek.utils.formatters import money, price_label

logger = logging.getLogger(__name__)

RECEIPT_FONT = "ReceiptFont"


def _fonts(font_path: Optional[str]) -> tuple[str, str]:
    """
    Built-in Helvetica has no Cyrillic glyphs; a TTF from RECEIPT_FONT is used
    for both weights when configured.
    """
    if not font_path:
        return "Helvetica", "Helvetica-Bold"
    if RECEIPT_FONT not in pdfmetrics.getRegisteredFontNames():
        try:
            pdfmetrics.registerFont(TTFont(RECEIPT_FONT, font_path))
        except Exception as e:
            logger.warning("Receipt font %s not loaded: %r", font_path, e)
            return "Helvetica", "Helvetica-Bold"
    return RECEIPT_FONT, RECEIPT_FONT


def generate_receipt_pdf(
    confirmation: OrderConfirmation,
    order: OrderRequest,
    items: Sequence[Product],
    export_dir: Optional[str] = None,
    font_path: Optional[str] = None,
) -> str:
    export_dir = export_dir or settings.export_dir
    font_path = font_path if font_path is not None else settings.receipt_font
    os.makedirs(export_dir, exist_ok=True)

    regular, bold = _fonts(font_path)

    filename = f"receipt_{confirmation.id}.pdf"
    path = os.path.join(export_dir, filename)

    c = canvas.Canvas(path, pagesize=A4)
    w, h = A4

    y = h - 50
    c.setFont(bold, 14)
    c.drawString(40, y, f"ORDER {confirmation.id}")
    y -= 20

    c.setFont(regular, 11)
    c.drawString(40, y, f"Date: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    y -= 16
    c.drawString(40, y, f"Payment: {PAYMENTS[order.payment]}")
    y -= 16
    c.drawString(40, y, f"Address: {order.address}"[:80])
    y -= 16
    c.drawString(40, y, f"Contacts: {order.email}, {order.phone}")
    y -= 24

    # header
    c.setFont(bold, 10)
    c.drawString(40, y, "#")
    c.drawString(70, y, "Item")
    c.drawString(440, y, "Price")
    y -= 10
    c.line(40, y, 550, y)
    y -= 16

    c.setFont(regular, 10)
    for i, it in enumerate(items, start=1):
        c.drawString(40, y, str(i))
        c.drawString(70, y, it.title[:60])
        c.drawRightString(550, y, price_label(it.price))
        y -= 14
        if y < 80:
            c.showPage()
            y = h - 50
            c.setFont(regular, 10)

    y -= 10
    c.line(40, y, 550, y)
    y -= 18
    c.setFont(bold, 12)
    c.drawRightString(550, y, f"TOTAL: {money(confirmation.total)}")

    c.save()
    return path
