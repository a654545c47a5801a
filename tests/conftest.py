from __future__ import annotations

import types
from pathlib import Path
from typing import Any, List, Tuple

import pytest

from receiptgate.config import Settings
from receiptgate.store.memory import MemorySubmissionStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
ARTIFACT_BYTES = b"PK\x03\x04fake-apk-payload"


class FakeNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: List[Any] = []

    async def notify_submission(self, submission) -> bool:  # type: ignore[no-untyped-def]
        if self.fail:
            raise RuntimeError("telegram unreachable")
        self.sent.append(submission)
        return True


class FakeBot:
    def __init__(self, fail_on: Tuple[str, ...] = ()) -> None:
        self.fail_on = fail_on
        self.calls: List[Tuple[str, dict]] = []

    async def _record(self, name: str, kwargs: dict) -> bool:
        self.calls.append((name, kwargs))
        if name in self.fail_on:
            raise RuntimeError(f"{name} failed")
        return True

    async def send_photo(self, **kwargs):  # type: ignore[no-untyped-def]
        return await self._record("send_photo", kwargs)

    async def send_message(self, **kwargs):  # type: ignore[no-untyped-def]
        return await self._record("send_message", kwargs)

    async def edit_message_reply_markup(self, **kwargs):  # type: ignore[no-untyped-def]
        return await self._record("edit_message_reply_markup", kwargs)

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]


class FakeCb:
    def __init__(self, data: str | None, chat_id: int = 42, message_id: int = 7) -> None:
        self.data = data
        self.message = types.SimpleNamespace(chat=types.SimpleNamespace(id=chat_id), message_id=message_id)
        self.answers: List[Tuple[tuple, dict]] = []

    async def answer(self, *args, **kwargs):  # type: ignore[no-untyped-def]
        self.answers.append((args, kwargs))


@pytest.fixture
def artifact(tmp_path: Path) -> Path:
    path = tmp_path / "GTracker-1.0-release.apk"
    path.write_bytes(ARTIFACT_BYTES)
    return path


@pytest.fixture
def settings(tmp_path: Path, artifact: Path) -> Settings:
    return Settings(
        app_env="development",
        telegram_bot_token="123456:TEST-token",
        telegram_admin_chat_id="42",
        public_base_url="https://receipts.example.test",
        auto_approve_key="s3cret",
        upload_dir=str(tmp_path / "uploads"),
        max_upload_mb=1,
        download_file_path=str(artifact),
        download_filename="",
        submission_ttl_hours=0,
    )


@pytest.fixture
def store() -> MemorySubmissionStore:
    return MemorySubmissionStore()
