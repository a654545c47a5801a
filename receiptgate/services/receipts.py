from __future__ import annotations

import logging
import os
import random
import re
from dataclasses import dataclass
from typing import Any, Optional

from receiptgate.utils.time import epoch_millis

logger = logging.getLogger(__name__)

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")
CHUNK_SIZE = 64 * 1024


class ReceiptTooLarge(Exception):
    def __init__(self, limit: int) -> None:
        super().__init__(f"receipt exceeds {limit} bytes")
        self.limit = limit


@dataclass
class StoredReceipt:
    path: str
    original_filename: str
    size: int


def build_receipt_filename(original: Optional[str]) -> str:
    """``<epoch-ms>-<random>-<name>``; avoids collisions, not a security boundary."""
    base = os.path.basename((original or "").replace("\\", "/")).strip()
    base = _UNSAFE_CHARS_RE.sub("_", base).strip("._") or "receipt"
    return f"{epoch_millis()}-{random.randint(0, 10**9)}-{base[:120]}"


async def save_receipt_part(part: Any, upload_dir: str, *, max_bytes: int = 0) -> Optional[StoredReceipt]:
    """Stream a multipart file part to ``upload_dir``.

    Returns None for an empty upload. Raises ReceiptTooLarge (after removing
    the partial file) when ``max_bytes`` is positive and exceeded.
    """
    os.makedirs(upload_dir, exist_ok=True)
    original = getattr(part, "filename", None) or ""
    path = os.path.join(upload_dir, build_receipt_filename(original))
    size = 0
    try:
        with open(path, "wb") as fh:
            while True:
                chunk = await part.read_chunk(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if max_bytes and size > max_bytes:
                    raise ReceiptTooLarge(max_bytes)
                fh.write(chunk)
    except BaseException:
        remove_receipt_file(path)
        raise
    if size == 0:
        remove_receipt_file(path)
        return None
    logger.debug("receipt stored", extra={"extra": {"path": path, "size": size}})
    return StoredReceipt(path=path, original_filename=original, size=size)


def remove_receipt_file(path: Optional[str]) -> bool:
    if not path:
        return False
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning("receipt removal failed", extra={"extra": {"path": path, "err": str(e)}})
        return False
