from __future__ import annotations

import hmac
from pathlib import Path
from typing import Optional

from receiptgate.config import Settings
from receiptgate.store.base import SubmissionStore
from receiptgate.store.models import SubmissionStatus


def query_status(store: SubmissionStore, submission_id: Optional[str]) -> dict:
    """Status lookup for polling clients; unknown and missing ids both yield {}."""
    if not submission_id:
        return {}
    sub = store.get(submission_id)
    if sub is None:
        return {}
    return {submission_id: sub.status_view()}


def authorize_download(store: SubmissionStore, submission_id: str, token: str) -> bool:
    sub = store.get(submission_id)
    if sub is None or not token:
        return False
    if not hmac.compare_digest(sub.token.encode("utf-8"), token.encode("utf-8")):
        return False
    return sub.status is SubmissionStatus.APPROVED


def resolve_artifact(settings: Settings) -> Optional[Path]:
    path = Path(settings.download_file_path)
    if not path.is_file():
        return None
    return path


def artifact_filename(settings: Settings, path: Path) -> str:
    return settings.download_filename or path.name
