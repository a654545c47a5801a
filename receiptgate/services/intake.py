from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from receiptgate.services.notifications import Notifier
from receiptgate.services.receipts import StoredReceipt
from receiptgate.store.base import SubmissionStore
from receiptgate.store.models import (
    DEFAULT_AMOUNT,
    DEFAULT_EMAIL,
    DEFAULT_NAME,
    Submission,
    SubmissionStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class ReceiptMetadata:
    name: Optional[str] = None
    email: Optional[str] = None
    amount: Optional[str] = None
    autokey: Optional[str] = None


@dataclass
class IntakeResult:
    success: bool
    id: Optional[str] = None
    message: Optional[str] = None

    def to_json(self) -> dict:
        payload: dict = {"success": self.success}
        if self.id is not None:
            payload["id"] = self.id
        if self.message is not None:
            payload["message"] = self.message
        return payload


def is_auto_approved(supplied: Optional[str], configured: str) -> bool:
    # An unset secret never matches, not even an empty autokey field
    if not configured or supplied is None:
        return False
    return supplied == configured


async def submit(
    store: SubmissionStore,
    notifier: Notifier,
    metadata: ReceiptMetadata,
    receipt: Optional[StoredReceipt],
    *,
    auto_approve_key: str = "",
) -> IntakeResult:
    if receipt is None:
        return IntakeResult(success=False, message="No file uploaded")

    auto = is_auto_approved(metadata.autokey, auto_approve_key)
    submission = Submission(
        id=str(uuid.uuid4()),
        token=str(uuid.uuid4()),
        file_path=receipt.path,
        original_filename=receipt.original_filename,
        name=metadata.name or DEFAULT_NAME,
        email=metadata.email or DEFAULT_EMAIL,
        amount=metadata.amount or DEFAULT_AMOUNT,
        status=SubmissionStatus.APPROVED if auto else SubmissionStatus.PENDING,
        auto_approved=auto,
    )
    store.put(submission)
    logger.info(
        "submission created",
        extra={"extra": {"id": submission.id, "status": submission.status.value, "size": receipt.size}},
    )

    # Best-effort: the record already exists, delivery problems never reach the uploader
    try:
        sent = await notifier.notify_submission(submission)
    except Exception:
        logger.exception("admin notification raised", extra={"extra": {"id": submission.id}})
        sent = False
    if not sent:
        logger.warning("admin not notified", extra={"extra": {"id": submission.id}})

    return IntakeResult(success=True, id=submission.id)
