from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass
class Settings:
    app_env: str = field(default_factory=lambda: os.getenv("APP_ENV", "production"))

    telegram_bot_token: str = field(default_factory=lambda: os.getenv("TELEGRAM_BOT_TOKEN", "").strip())
    telegram_admin_chat_id: str = field(default_factory=lambda: os.getenv("TELEGRAM_ADMIN_CHAT_ID", "").strip())
    public_base_url: str = field(default_factory=lambda: os.getenv("PUBLIC_BASE_URL", "").strip().rstrip("/"))
    webhook_secret: str = field(default_factory=lambda: os.getenv("WEBHOOK_SECRET", "").strip())

    # Empty key disables auto-approval; it never matches an empty autokey field
    auto_approve_key: str = field(default_factory=lambda: os.getenv("AUTO_APPROVE_KEY", ""))

    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("PORT", 3000))

    upload_dir: str = field(default_factory=lambda: os.getenv("UPLOAD_DIR", "./uploads"))
    max_upload_mb: int = field(default_factory=lambda: _env_int("MAX_UPLOAD_MB", 10))

    download_file_path: str = field(
        default_factory=lambda: os.getenv("DOWNLOAD_FILE_PATH", "./GTracker-1.0-release.apk")
    )
    download_filename: str = field(default_factory=lambda: os.getenv("DOWNLOAD_FILENAME", ""))

    submission_ttl_hours: int = field(default_factory=lambda: _env_int("SUBMISSION_TTL_HOURS", 0))
    purge_interval_minutes: int = field(default_factory=lambda: _env_int("PURGE_INTERVAL_MINUTES", 60))

    @property
    def webhook_path(self) -> str:
        return f"/bot{self.telegram_bot_token}"

    @property
    def webhook_url(self) -> str:
        return f"{self.public_base_url}{self.webhook_path}"

    @property
    def max_upload_bytes(self) -> int:
        return max(0, self.max_upload_mb) * 1024 * 1024

    def missing_required(self) -> List[str]:
        missing: List[str] = []
        if not self.telegram_bot_token:
            missing.append("TELEGRAM_BOT_TOKEN")
        if not self.telegram_admin_chat_id:
            missing.append("TELEGRAM_ADMIN_CHAT_ID")
        if not self.public_base_url:
            missing.append("PUBLIC_BASE_URL")
        return missing
