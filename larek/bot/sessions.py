from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from larek.bot.views import TelegramView
from larek.core.buyer import BuyerStore
from larek.core.cart import CartStore
from larek.core.catalog import CatalogStore
from larek.core.events import Event, EventBus, OrderPlaced
from larek.core.orchestrator import Orchestrator, OrderGateway
from larek.services.catalog_loader import CatalogLoadResult

logger = logging.getLogger(__name__)


def _log_event(event: Event) -> None:
    logger.debug("event %s %r", event.name, event)


@dataclass
class ShopSession:
    chat_id: int
    bus: EventBus
    catalog: CatalogStore
    cart: CartStore
    buyer: BuyerStore
    view: TelegramView
    orchestrator: Orchestrator
    placed: List[OrderPlaced] = field(default_factory=list)

    async def settle(self) -> None:
        await self.orchestrator.wait_idle()

    def pop_placed(self) -> List[OrderPlaced]:
        out, self.placed = self.placed, []
        return out


def build_session(chat_id: int, gateway: OrderGateway, loaded: CatalogLoadResult) -> ShopSession:
    bus = EventBus()
    bus.on_any(_log_event)

    catalog = CatalogStore(bus)
    cart = CartStore(bus)
    buyer = BuyerStore(bus)
    view = TelegramView()
    orchestrator = Orchestrator(bus, catalog, cart, buyer, view, gateway)

    session = ShopSession(
        chat_id=chat_id,
        bus=bus,
        catalog=catalog,
        cart=cart,
        buyer=buyer,
        view=view,
        orchestrator=orchestrator,
    )
    bus.on(OrderPlaced.name, session.placed.append)

    orchestrator.start()
    catalog.set_items(loaded.items, load_failed=loaded.load_failed)
    return session


class SessionRegistry:
    """One shop session per chat; sessions share the loaded catalog and the gateway."""

    def __init__(self, gateway: OrderGateway, loaded: CatalogLoadResult) -> None:
        self.gateway = gateway
        self.loaded = loaded
        self._sessions: Dict[int, ShopSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, chat_id: int) -> ShopSession:
        session = self._sessions.get(chat_id)
        if session is None:
            session = build_session(chat_id, self.gateway, self.loaded)
            self._sessions[chat_id] = session
            logger.info("New shop session for chat %s", chat_id)
        return session

    def find(self, chat_id: int) -> Optional[ShopSession]:
        return self._sessions.get(chat_id)

    def update_catalog(self, loaded: CatalogLoadResult, chat_id: Optional[int] = None) -> None:
        """Re-populates every session; only `chat_id` keeps the re-rendered screen."""
        self.loaded = loaded
        for cid, session in self._sessions.items():
            session.catalog.set_items(loaded.items, load_failed=loaded.load_failed)
            if cid != chat_id:
                session.view.take()
