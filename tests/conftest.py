import asyncio
from typing import Any, List, Optional, Tuple

import pytest

from larek.core.buyer import BuyerStore
from larek.core.cart import CartStore
from larek.core.catalog import CatalogStore
from larek.core.events import Event, EventBus
from larek.core.orchestrator import Orchestrator
from larek.core.types import Category, OrderConfirmation, OrderRequest, Product


def make_product(pid: str = "p1", price: Optional[float] = 100, **kw: Any) -> Product:
    return Product(
        id=pid,
        title=kw.get("title", f"Product {pid}"),
        description=kw.get("description", ""),
        image=kw.get("image", f"https://cdn.test/{pid}.svg"),
        category=kw.get("category", Category.OTHER),
        price=price,
    )


class RecordingView:
    """ShopView that remembers what it was asked to render."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.counter = 0

    def _record(self, name: str, screen: Any = None) -> None:
        self.calls.append((name, screen))

    def render_header(self, counter: int) -> None:
        self.counter = counter
        self._record("header", counter)

    def render_catalog(self, screen):
        self._record("catalog", screen)

    def render_preview(self, screen):
        self._record("preview", screen)

    def render_cart(self, screen):
        self._record("cart", screen)

    def render_delivery(self, screen):
        self._record("delivery", screen)

    def render_contacts(self, screen):
        self._record("contacts", screen)

    def render_confirmation(self, screen):
        self._record("confirmation", screen)

    def close(self) -> None:
        self._record("close")

    def last(self, name: str) -> Any:
        for n, screen in reversed(self.calls):
            if n == name:
                return screen
        raise AssertionError(f"{name} was never rendered")

    def names(self) -> List[str]:
        return [n for n, _ in self.calls]

    def reset(self) -> None:
        self.calls.clear()


class FakeGateway:
    def __init__(self, fail: bool = False, order_id: str = "order-1") -> None:
        self.fail = fail
        self.order_id = order_id
        self.requests: List[OrderRequest] = []
        self.release: Optional[asyncio.Event] = None

    def hold(self) -> None:
        """Keeps the next create_order call in flight until `release` is set."""
        self.release = asyncio.Event()

    async def create_order(self, order: OrderRequest) -> OrderConfirmation:
        self.requests.append(order)
        if self.release is not None:
            await self.release.wait()
        if self.fail:
            raise RuntimeError("gateway down")
        return OrderConfirmation(id=self.order_id, total=order.total)


class Shop:
    """Bus, stores and orchestrator wired the way a session wires them."""

    def __init__(self, products=(), gateway: Optional[FakeGateway] = None, load_failed: bool = False):
        self.bus = EventBus()
        self.events: List[Event] = []
        self.bus.on_any(self.events.append)
        self.catalog = CatalogStore(self.bus)
        self.cart = CartStore(self.bus)
        self.buyer = BuyerStore(self.bus)
        self.view = RecordingView()
        self.gateway = gateway or FakeGateway()
        self.orchestrator = Orchestrator(self.bus, self.catalog, self.cart, self.buyer, self.view, self.gateway)
        self.orchestrator.start()
        self.catalog.set_items(products, load_failed=load_failed)

    def emit(self, event: Event) -> None:
        self.bus.emit(event)

    @property
    def state(self):
        return self.orchestrator.state


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def events(bus):
    seen: List[Event] = []
    bus.on_any(seen.append)
    return seen


@pytest.fixture
def products():
    return [
        make_product("p1", 100, title="Мамка-таймер"),
        make_product("p2", 750, title="+1 час в сутках", category=Category.SOFT_SKILL),
        make_product("free", None, title="Бесценная штука"),
    ]
