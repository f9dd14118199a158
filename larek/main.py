import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from larek.bot.handlers import router
from larek.bot.sessions import SessionRegistry
from larek.config import settings
from larek.services.catalog_loader import load_shop_catalog
from larek.services.larek_api import LarekAPI

logger = logging.getLogger(__name__)


async def main() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    token = settings.require_bot_token()

    async with LarekAPI(settings.api_url, settings.cdn_url, timeout=settings.request_timeout) as api:
        loaded = await load_shop_catalog(settings, api)
        logger.info("Catalog: %d products from %s", len(loaded.items), loaded.source)

        bot = Bot(token=token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
        dp = Dispatcher()
        dp["registry"] = SessionRegistry(api, loaded)
        dp["api"] = api
        dp.include_router(router)

        try:
            await dp.start_polling(bot)
        finally:
            await bot.session.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
