from __future__ import annotations

import logging
from typing import Optional, Protocol, Union

from aiogram import Bot
from aiogram.types import FSInputFile, InlineKeyboardButton, InlineKeyboardMarkup

from receiptgate.services.decisions import DecisionAction, decision_tag
from receiptgate.store.models import Submission, SubmissionStatus

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def notify_submission(self, submission: Submission) -> bool:
        ...


def _chat_id(raw: str) -> Union[int, str]:
    # Numeric ids (incl. negative group ids) go as int, @channel names as str
    try:
        return int(raw)
    except (TypeError, ValueError):
        return raw


def submission_caption(submission: Submission) -> str:
    status = "AUTO APPROVED" if submission.auto_approved else "Pending Approval"
    return "\n".join(
        [
            "New Payment Receipt",
            "",
            f"Name: {submission.name}",
            f"Email: {submission.email}",
            f"Amount: ₱{submission.amount}",
            f"Status: {status}",
            f"Upload ID: {submission.id}",
        ]
    )


def decision_keyboard(submission: Submission) -> Optional[InlineKeyboardMarkup]:
    if submission.status is not SubmissionStatus.PENDING:
        return None
    return InlineKeyboardMarkup(inline_keyboard=[
        [
            InlineKeyboardButton(text="Approve", callback_data=decision_tag(DecisionAction.APPROVE, submission.id)),
            InlineKeyboardButton(text="Reject", callback_data=decision_tag(DecisionAction.REJECT, submission.id)),
        ]
    ])


class AdminNotifier:
    """Delivers new submissions to the single admin chat."""

    def __init__(self, bot: Bot, admin_chat_id: str) -> None:
        self.bot = bot
        self.admin_chat_id = _chat_id(admin_chat_id)

    async def notify_submission(self, submission: Submission) -> bool:
        """Send the receipt photo with caption (and decision buttons when pending).

        Returns True if sent, False otherwise.
        """
        try:
            await self.bot.send_photo(
                chat_id=self.admin_chat_id,
                photo=FSInputFile(submission.file_path),
                caption=submission_caption(submission),
                reply_markup=decision_keyboard(submission),
            )
            return True
        except Exception as e:
            logger.warning(
                "notify_submission failed",
                extra={"extra": {"id": submission.id, "err": str(e)}},
            )
            return False
