from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

import aiohttp

from larek.core.types import OrderConfirmation, OrderRequest, Product

logger = logging.getLogger(__name__)


class LarekAPIError(RuntimeError):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class LarekAPI:
    """
    Client of the shop API.
    base_url: .../api/weblarek
    cdn_url:  .../content/weblarek, prefixed to every product image path
    """

    def __init__(
        self,
        base_url: str,
        cdn_url: str,
        timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.cdn_url = cdn_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._own_session = session is None

    async def __aenter__(self) -> "LarekAPI":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        if self._own_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._own_session = True
        return self._session

    async def _request(self, method: str, uri: str, payload: Any = None) -> Any:
        url = self.base_url + uri
        try:
            async with self._get_session().request(method, url, json=payload, timeout=self.timeout) as resp:
                try:
                    data = await resp.json(content_type=None)
                except ValueError:
                    data = None
                if resp.status >= 400:
                    error = data.get("error") if isinstance(data, dict) else None
                    raise LarekAPIError(error or resp.reason or f"HTTP {resp.status}", status=resp.status)
                return data
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise LarekAPIError(f"{method} {url} failed: {e!r}") from e

    async def get_product_list(self) -> List[Product]:
        data = await self._request("GET", "/product")
        if not isinstance(data, dict) or not isinstance(data.get("items"), list):
            raise LarekAPIError("unexpected product list payload")
        try:
            return [Product.from_dict(item, self.cdn_url) for item in data["items"]]
        except (KeyError, TypeError) as e:
            raise LarekAPIError(f"unexpected product in list: {e!r}") from e

    async def get_product(self, product_id: str) -> Product:
        data = await self._request("GET", f"/product/{product_id}")
        try:
            return Product.from_dict(data, self.cdn_url)
        except (KeyError, TypeError) as e:
            raise LarekAPIError(f"unexpected product payload: {data!r}") from e

    async def create_order(self, order: OrderRequest) -> OrderConfirmation:
        data = await self._request("POST", "/order", order.to_dict())
        try:
            return OrderConfirmation.from_dict(data)
        except (KeyError, TypeError) as e:
            raise LarekAPIError(f"unexpected order payload: {data!r}") from e
