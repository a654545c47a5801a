import logging

from aiogram import Bot
from aiohttp import web
from dotenv import load_dotenv

from receiptgate.bot.setup import build_dispatcher
from receiptgate.config import Settings
from receiptgate.logging_config import setup_logging
from receiptgate.services.notifications import AdminNotifier
from receiptgate.store.memory import MemorySubmissionStore
from receiptgate.web.app import create_web_app

logger = logging.getLogger(__name__)


def main() -> None:
    load_dotenv()
    setup_logging()

    settings = Settings()
    missing = settings.missing_required()
    if missing:
        logger.error("Missing ENV: %s", " / ".join(missing))
        raise SystemExit(1)

    store = MemorySubmissionStore()
    bot = Bot(token=settings.telegram_bot_token)
    dp = build_dispatcher(store, settings)
    app = create_web_app(
        settings,
        store,
        AdminNotifier(bot, settings.telegram_admin_chat_id),
        dispatcher=dp,
        bot=bot,
    )

    logger.info("Server running at: %s (listening on %s:%s)", settings.public_base_url, settings.host, settings.port)
    web.run_app(app, host=settings.host, port=settings.port, print=None)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
