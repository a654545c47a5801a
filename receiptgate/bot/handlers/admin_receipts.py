from __future__ import annotations

import logging

from aiogram import Bot, F, Router
from aiogram.types import CallbackQuery

from receiptgate.services.decisions import DECISION_PREFIX, apply_decision, parse_decision_tag
from receiptgate.store.base import SubmissionStore

logger = logging.getLogger(__name__)

router = Router()

INVALID_NOTICE = "Invalid or expired receipt ID"


def confirmation_text(submission_id: str, status: str) -> str:
    return f"Payment {submission_id} has been {status.upper()}"


@router.callback_query(F.data.startswith(f"{DECISION_PREFIX}:"))
async def cb_receipt_decision(cb: CallbackQuery, bot: Bot, store: SubmissionStore) -> None:
    parsed = parse_decision_tag(cb.data)
    if parsed is None:
        await cb.answer(INVALID_NOTICE, show_alert=True)
        return
    action, submission_id = parsed
    outcome = apply_decision(store, submission_id, action)
    if not outcome.found or outcome.status is None:
        await cb.answer(INVALID_NOTICE, show_alert=True)
        return

    status = outcome.status.value
    msg = cb.message
    if msg is not None:
        chat_id = msg.chat.id
        try:
            await bot.edit_message_reply_markup(chat_id=chat_id, message_id=msg.message_id, reply_markup=None)
        except Exception as e:
            # Already-removed keyboards end up here on duplicate callbacks
            logger.debug("keyboard removal failed", extra={"extra": {"id": submission_id, "err": str(e)}})
        if outcome.changed:
            try:
                await bot.send_message(chat_id=chat_id, text=confirmation_text(submission_id, status))
            except Exception as e:
                logger.warning("decision confirmation failed", extra={"extra": {"id": submission_id, "err": str(e)}})
    await cb.answer(f"Payment {status}")
