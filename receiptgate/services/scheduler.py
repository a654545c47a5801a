from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import aiojobs

from receiptgate.config import Settings
from receiptgate.services.receipts import remove_receipt_file
from receiptgate.store.base import SubmissionStore
from receiptgate.utils.time import hours_ago

logger = logging.getLogger(__name__)


async def job_purge_submissions(store: SubmissionStore, settings: Settings) -> int:
    """Drop submissions older than SUBMISSION_TTL_HOURS along with their receipt files."""
    hours = settings.submission_ttl_hours
    if hours <= 0:
        return 0
    purged = store.purge_older_than(hours_ago(hours))
    for sub in purged:
        remove_receipt_file(sub.file_path)
    if purged:
        logger.info("purged stale submissions", extra={"extra": {"count": len(purged), "ttl_hours": hours}})
    return len(purged)


async def _periodic(job: Callable[[], Awaitable[object]], interval: float) -> None:
    while True:
        try:
            await job()
        except Exception as e:
            logger.exception("periodic job error: %s", e)
        await asyncio.sleep(interval)


async def start_scheduler(store: SubmissionStore, settings: Settings) -> Optional[aiojobs.Scheduler]:
    """Spawn housekeeping jobs; returns None when nothing needs scheduling."""
    if settings.submission_ttl_hours <= 0:
        logger.info("submission purge disabled (SUBMISSION_TTL_HOURS=0)")
        return None
    sched = aiojobs.Scheduler()
    interval = max(1, settings.purge_interval_minutes) * 60
    await sched.spawn(_periodic(lambda: job_purge_submissions(store, settings), interval))
    logger.info(
        "scheduler started",
        extra={"extra": {"ttl_hours": settings.submission_ttl_hours, "interval_s": interval}},
    )
    return sched
