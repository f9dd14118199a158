"""
Local stand-in of the shop API: same routes and wire format, backed by the
bundled catalog. Point API_ORIGIN at it to run the bot without the network:

    uvicorn larek.web.main:app --port 8000
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Literal

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from larek.config import settings
from larek.services.static_catalog import STATIC_ITEMS
from larek.utils.validators import is_filled

logger = logging.getLogger(__name__)

API = settings.api_base_path

app = FastAPI(title="Larek API (local)")

PRODUCTS: Dict[str, Dict[str, Any]] = {item["id"]: item for item in STATIC_ITEMS}


class OrderIn(BaseModel):
    payment: Literal["card", "cash"]
    email: str
    phone: str
    address: str
    total: float
    items: List[str]


@app.exception_handler(HTTPException)
async def _error(request: Request, exc: HTTPException) -> JSONResponse:
    # the shop API reports every failure as {"error": "..."}
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def _invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": "Неверные данные заказа"})


@app.get(f"{API}/product")
def product_list():
    items = list(PRODUCTS.values())
    return {"total": len(items), "items": items}


@app.get(f"{API}/product/{{product_id}}")
def product_get(product_id: str):
    item = PRODUCTS.get(product_id)
    if item is None:
        raise HTTPException(status_code=404, detail="NotFound")
    return item


@app.post(f"{API}/order")
def order_create(order: OrderIn):
    if not order.items:
        raise HTTPException(status_code=400, detail="Не указаны товары")

    total = 0
    for product_id in order.items:
        item = PRODUCTS.get(product_id)
        if item is None:
            raise HTTPException(status_code=400, detail=f"Товар с id {product_id} не найден")
        if item["price"] is None:
            raise HTTPException(status_code=400, detail=f"Товар с id {product_id} не продается")
        total += item["price"]

    if total != order.total:
        raise HTTPException(status_code=400, detail="Неверная сумма заказа")
    for name in ("email", "phone", "address"):
        if not is_filled(getattr(order, name)):
            raise HTTPException(status_code=400, detail=f"Не указан {name}")

    order_id = str(uuid.uuid4())
    logger.info("Order %s accepted: %d items, total %s", order_id, len(order.items), total)
    return {"id": order_id, "total": total}
