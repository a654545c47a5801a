from __future__ import annotations

from typing import AsyncIterator, Optional

from aiogram import Bot, Dispatcher
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application
from aiohttp import web

from receiptgate.config import Settings
from receiptgate.services.notifications import Notifier
from receiptgate.services.scheduler import start_scheduler
from receiptgate.store.base import SubmissionStore
from receiptgate.web.middlewares import correlation_middleware
from receiptgate.web.routes import NOTIFIER_KEY, SETTINGS_KEY, STORE_KEY, routes


async def _housekeeping_ctx(app: web.Application) -> AsyncIterator[None]:
    sched = await start_scheduler(app[STORE_KEY], app[SETTINGS_KEY])
    yield
    if sched is not None:
        await sched.close()


def create_web_app(
    settings: Settings,
    store: SubmissionStore,
    notifier: Notifier,
    *,
    dispatcher: Optional[Dispatcher] = None,
    bot: Optional[Bot] = None,
) -> web.Application:
    """Build the HTTP app; the Telegram webhook is mounted only when a bot is given."""
    app = web.Application(middlewares=[correlation_middleware])
    app[SETTINGS_KEY] = settings
    app[STORE_KEY] = store
    app[NOTIFIER_KEY] = notifier
    app.add_routes(routes)
    app.cleanup_ctx.append(_housekeeping_ctx)

    if dispatcher is not None and bot is not None:
        SimpleRequestHandler(
            dispatcher=dispatcher,
            bot=bot,
            secret_token=settings.webhook_secret or None,
        ).register(app, path=settings.webhook_path)
        setup_application(app, dispatcher, bot=bot)
    return app
