from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from receiptgate.utils.correlation import clear_correlation_id, get_correlation_id, set_correlation_id


class CorrelationMiddleware(BaseMiddleware):
    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        # Webhook updates inherit the id of the HTTP request that delivered them
        cid = set_correlation_id(get_correlation_id())
        data["correlation_id"] = cid
        try:
            return await handler(event, data)
        finally:
            clear_correlation_id()
