from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from receiptgate.utils.time import utc_now

DEFAULT_NAME = "Unknown"
DEFAULT_EMAIL = "N/A"
DEFAULT_AMOUNT = "149"


class SubmissionStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_final(self) -> bool:
        return self is not SubmissionStatus.PENDING


@dataclass
class Submission:
    id: str
    token: str
    file_path: str
    name: str = DEFAULT_NAME
    email: str = DEFAULT_EMAIL
    amount: str = DEFAULT_AMOUNT
    status: SubmissionStatus = SubmissionStatus.PENDING
    original_filename: Optional[str] = None
    auto_approved: bool = False
    created_at: datetime = field(default_factory=utc_now)
    decided_at: Optional[datetime] = None

    def status_view(self) -> dict:
        """Public status payload; the only place the token leaves the store."""
        return {"status": self.status.value, "id": self.id, "token": self.token}
