from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from larek.config import Settings
from larek.core.types import Product
from larek.services.larek_api import LarekAPI
from larek.services.static_catalog import static_products

logger = logging.getLogger(__name__)

CatalogSource = Callable[[], Awaitable[List[Product]]]

STATIC_SOURCE = "static"


@dataclass(frozen=True)
class CatalogLoadResult:
    items: Tuple[Product, ...]
    load_failed: bool
    source: str


async def load_catalog(
    sources: Sequence[Tuple[str, CatalogSource]],
    fallback: Sequence[Product] = (),
    timeout: Optional[float] = None,
) -> CatalogLoadResult:
    """
    Tries each source in order and returns the first list that loads.
    When every source fails the bundled `fallback` list is used;
    `load_failed` is set only if that list is empty as well.
    """
    for name, fetch in sources:
        try:
            items = await asyncio.wait_for(fetch(), timeout)
        except Exception as e:
            logger.warning("Catalog source %s failed: %r", name, e)
            continue
        logger.info("Catalog loaded from %s: %d products", name, len(items))
        return CatalogLoadResult(items=tuple(items), load_failed=False, source=name)

    items = tuple(fallback)
    if items:
        logger.warning("All catalog sources failed, using %d bundled products", len(items))
    else:
        logger.error("All catalog sources failed and no bundled products available")
    return CatalogLoadResult(items=items, load_failed=not items, source=STATIC_SOURCE)


def build_sources(settings: Settings, api: LarekAPI) -> List[Tuple[str, CatalogSource]]:
    sources: List[Tuple[str, CatalogSource]] = [("primary", api.get_product_list)]
    mirror_url = settings.mirror_api_url
    if mirror_url:
        mirror = LarekAPI(mirror_url, settings.cdn_url, timeout=settings.request_timeout)

        async def fetch_mirror() -> List[Product]:
            async with mirror:
                return await mirror.get_product_list()

        sources.append(("mirror", fetch_mirror))
    return sources


async def load_shop_catalog(settings: Settings, api: LarekAPI) -> CatalogLoadResult:
    return await load_catalog(
        build_sources(settings, api),
        fallback=static_products(settings.cdn_url),
        timeout=settings.request_timeout,
    )
