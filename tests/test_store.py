from __future__ import annotations

from datetime import timedelta

from receiptgate.store.memory import MemorySubmissionStore
from receiptgate.store.models import Submission, SubmissionStatus
from receiptgate.utils.time import utc_now


def _sub(sid: str = "id-1", **kwargs) -> Submission:  # type: ignore[no-untyped-def]
    return Submission(id=sid, token=f"tok-{sid}", file_path=f"/tmp/{sid}.png", **kwargs)


def test_put_get_and_unknown() -> None:
    store = MemorySubmissionStore()
    sub = _sub()
    store.put(sub)
    assert store.get("id-1") is sub
    assert store.get("missing") is None
    assert store.get("") is None
    assert len(store) == 1


def test_mutate_in_place() -> None:
    store = MemorySubmissionStore()
    store.put(_sub())

    def _approve(s: Submission) -> None:
        s.status = SubmissionStatus.APPROVED

    out = store.mutate("id-1", _approve)
    assert out is not None and out.status is SubmissionStatus.APPROVED
    assert store.get("id-1").status is SubmissionStatus.APPROVED  # type: ignore[union-attr]
    assert store.mutate("nope", _approve) is None


def test_purge_older_than_only_removes_stale() -> None:
    store = MemorySubmissionStore()
    now = utc_now()
    store.put(_sub("old", created_at=now - timedelta(hours=30)))
    store.put(_sub("new", created_at=now))

    purged = store.purge_older_than(now - timedelta(hours=24))

    assert [s.id for s in purged] == ["old"]
    assert store.get("old") is None
    assert store.get("new") is not None


def test_status_view_and_defaults() -> None:
    sub = _sub()
    assert sub.name == "Unknown"
    assert sub.email == "N/A"
    assert sub.amount == "149"
    assert sub.status_view() == {"status": "pending", "id": "id-1", "token": "tok-id-1"}
    assert not SubmissionStatus.PENDING.is_final
    assert SubmissionStatus.REJECTED.is_final
