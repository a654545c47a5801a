from __future__ import annotations

import logging

from aiogram import Bot, Dispatcher

from receiptgate.bot.handlers import admin_receipts as admin_receipts_handlers
from receiptgate.bot.middlewares.correlation import CorrelationMiddleware
from receiptgate.config import Settings
from receiptgate.store.base import SubmissionStore

logger = logging.getLogger(__name__)


async def on_bot_startup(bot: Bot, dispatcher: Dispatcher, settings: Settings) -> None:
    await bot.set_webhook(
        settings.webhook_url,
        secret_token=settings.webhook_secret or None,
        allowed_updates=dispatcher.resolve_used_update_types(),
    )
    logger.info("Telegram webhook active", extra={"extra": {"webhook_url": settings.webhook_url}})


def build_dispatcher(store: SubmissionStore, settings: Settings) -> Dispatcher:
    # store/settings become workflow data injected into handlers by name
    dp = Dispatcher(store=store, settings=settings)
    dp.callback_query.middleware(CorrelationMiddleware())
    dp.include_router(admin_receipts_handlers.router)
    dp.startup.register(on_bot_startup)
    return dp
