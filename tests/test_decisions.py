from __future__ import annotations

import pytest

from receiptgate.services.decisions import (
    DecisionAction,
    apply_decision,
    decision_tag,
    parse_decision_tag,
)
from receiptgate.store.memory import MemorySubmissionStore
from receiptgate.store.models import Submission, SubmissionStatus

SID = "0b9f3c1e-7a5d-4f3e-9c1a-2d6b8e4f0a11"


def _store_with(status: SubmissionStatus = SubmissionStatus.PENDING) -> MemorySubmissionStore:
    store = MemorySubmissionStore()
    store.put(Submission(id=SID, token="t", file_path="/tmp/r.png", status=status))
    return store


def test_tag_roundtrip_fits_callback_limit() -> None:
    tag = decision_tag(DecisionAction.APPROVE, SID)
    assert tag == f"rcpt:approve:{SID}"
    assert len(tag.encode("utf-8")) <= 64
    assert parse_decision_tag(tag) == (DecisionAction.APPROVE, SID)


@pytest.mark.parametrize("data", [None, "", "rcpt", "rcpt:approve:", "rcpt:maybe:x", "ord:approve:1", "approve_x"])
def test_parse_rejects_malformed(data) -> None:  # type: ignore[no-untyped-def]
    assert parse_decision_tag(data) is None


def test_approve_pending() -> None:
    store = _store_with()
    out = apply_decision(store, SID, DecisionAction.APPROVE)
    assert out.found and out.changed
    assert out.status is SubmissionStatus.APPROVED
    sub = store.get(SID)
    assert sub is not None and sub.decided_at is not None


def test_duplicate_decision_is_noop() -> None:
    store = _store_with()
    first = apply_decision(store, SID, DecisionAction.REJECT)
    decided_at = store.get(SID).decided_at  # type: ignore[union-attr]
    second = apply_decision(store, SID, DecisionAction.REJECT)
    assert first.changed is True
    assert second.found is True and second.changed is False
    assert second.status is SubmissionStatus.REJECTED
    assert store.get(SID).decided_at == decided_at  # type: ignore[union-attr]


def test_conflicting_second_decision_keeps_first() -> None:
    store = _store_with()
    apply_decision(store, SID, DecisionAction.APPROVE)
    out = apply_decision(store, SID, DecisionAction.REJECT)
    assert out.changed is False
    assert store.get(SID).status is SubmissionStatus.APPROVED  # type: ignore[union-attr]


def test_auto_approved_record_is_not_rejectable() -> None:
    store = _store_with(SubmissionStatus.APPROVED)
    out = apply_decision(store, SID, DecisionAction.REJECT)
    assert out.found and not out.changed
    assert out.status is SubmissionStatus.APPROVED


def test_unknown_id() -> None:
    out = apply_decision(MemorySubmissionStore(), "nope", DecisionAction.APPROVE)
    assert out.found is False
    assert out.status is None
