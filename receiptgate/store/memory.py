"""In-memory submission store.

Records live for the process lifetime (or until the optional TTL purge).
A restart loses every pending and approved submission.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, List, Optional

from receiptgate.store.base import SubmissionStore
from receiptgate.store.models import Submission


class MemorySubmissionStore(SubmissionStore):
    def __init__(self) -> None:
        self._items: Dict[str, Submission] = {}

    def put(self, submission: Submission) -> None:
        self._items[submission.id] = submission

    def get(self, submission_id: str) -> Optional[Submission]:
        if not submission_id:
            return None
        return self._items.get(submission_id)

    def mutate(self, submission_id: str, fn: Callable[[Submission], None]) -> Optional[Submission]:
        item = self.get(submission_id)
        if item is None:
            return None
        fn(item)
        return item

    def purge_older_than(self, cutoff: datetime) -> List[Submission]:
        stale = [s for s in self._items.values() if s.created_at < cutoff]
        for s in stale:
            del self._items[s.id]
        return stale

    def __len__(self) -> int:
        return len(self._items)
