from __future__ import annotations

import logging
from typing import Awaitable, Callable

from aiohttp import web

from receiptgate.utils.correlation import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def correlation_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    cid = set_correlation_id(request.headers.get(REQUEST_ID_HEADER))
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers[REQUEST_ID_HEADER] = cid
        raise
    except Exception:
        logger.exception(
            "unhandled request error",
            extra={"extra": {"method": request.method, "path": request.path}},
        )
        raise
    finally:
        clear_correlation_id()
    response.headers[REQUEST_ID_HEADER] = cid
    return response
