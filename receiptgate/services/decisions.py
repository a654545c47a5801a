from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from receiptgate.store.base import SubmissionStore
from receiptgate.store.models import Submission, SubmissionStatus
from receiptgate.utils.time import utc_now

logger = logging.getLogger(__name__)

DECISION_PREFIX = "rcpt"


class DecisionAction(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"

    @property
    def target_status(self) -> SubmissionStatus:
        if self is DecisionAction.APPROVE:
            return SubmissionStatus.APPROVED
        return SubmissionStatus.REJECTED


@dataclass
class DecisionOutcome:
    found: bool
    changed: bool = False
    status: Optional[SubmissionStatus] = None


def decision_tag(action: DecisionAction, submission_id: str) -> str:
    # Telegram limits callback_data to 64 bytes; "rcpt:approve:<uuid4>" is 49
    return f"{DECISION_PREFIX}:{action.value}:{submission_id}"


def parse_decision_tag(data: Optional[str]) -> Optional[Tuple[DecisionAction, str]]:
    if not data:
        return None
    parts = data.split(":", 2)
    if len(parts) != 3 or parts[0] != DECISION_PREFIX or not parts[2]:
        return None
    try:
        action = DecisionAction(parts[1])
    except ValueError:
        return None
    return action, parts[2]


def apply_decision(store: SubmissionStore, submission_id: str, action: DecisionAction) -> DecisionOutcome:
    """Move a pending submission to approved/rejected.

    Only a pending record changes. Repeated or conflicting decisions leave
    the first outcome in place and report ``changed=False``.
    """
    changed = False

    def _transition(sub: Submission) -> None:
        nonlocal changed
        if sub.status is not SubmissionStatus.PENDING:
            return
        sub.status = action.target_status
        sub.decided_at = utc_now()
        changed = True

    sub = store.mutate(submission_id, _transition)
    if sub is None:
        logger.info("decision for unknown submission", extra={"extra": {"id": submission_id, "action": action.value}})
        return DecisionOutcome(found=False)
    if changed:
        logger.info("submission decided", extra={"extra": {"id": sub.id, "status": sub.status.value}})
    else:
        logger.info(
            "duplicate decision ignored",
            extra={"extra": {"id": sub.id, "status": sub.status.value, "action": action.value}},
        )
    return DecisionOutcome(found=True, changed=changed, status=sub.status)
