from __future__ import annotations

import abc
from datetime import datetime
from typing import Callable, List, Optional

from receiptgate.store.models import Submission


class SubmissionStore(abc.ABC):
    """Keyed storage for submissions.

    All methods are synchronous: callers on the event loop never suspend in
    the middle of a read-modify-write, so a guarded status transition cannot
    interleave with another one for the same id.
    """

    @abc.abstractmethod
    def put(self, submission: Submission) -> None:
        ...

    @abc.abstractmethod
    def get(self, submission_id: str) -> Optional[Submission]:
        ...

    @abc.abstractmethod
    def mutate(self, submission_id: str, fn: Callable[[Submission], None]) -> Optional[Submission]:
        """Apply ``fn`` to the stored record; ``None`` when the id is unknown."""

    @abc.abstractmethod
    def purge_older_than(self, cutoff: datetime) -> List[Submission]:
        """Remove and return records created before ``cutoff``."""

    @abc.abstractmethod
    def __len__(self) -> int:
        ...
