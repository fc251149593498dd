"""
Local file storage for hearing minutes.

Files are written under the configured uploads directory and served back
at /uploads/<key>. The stored reference (URL path) is what the rules engine
records on the hearing.
"""

import logging
import random
import time
from pathlib import Path
from typing import Optional

from .config import get_settings

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads"


class UploadTooLargeError(Exception):
    """Raised when an uploaded file exceeds the configured size limit."""


class LocalMinutesStorage:
    """Writes uploaded minutes to a local directory."""

    def __init__(self, root: str, max_bytes: int):
        self.root = Path(root)
        self.max_bytes = max_bytes

    def generate_key(self, filename: Optional[str], field_name: str = "minutes") -> str:
        """Unique file name that keeps the original extension."""
        suffix = Path(filename or "").suffix.lower()
        unique = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        return f"{field_name}-{unique}{suffix}"

    def put(self, key: str, data: bytes) -> str:
        """Store bytes under key; returns the public reference."""
        if len(data) > self.max_bytes:
            raise UploadTooLargeError(
                f"File is {len(data)} bytes, limit is {self.max_bytes} bytes"
            )
        self.root.mkdir(parents=True, exist_ok=True)
        (self.root / key).write_bytes(data)
        logger.info(f"Stored upload {key} ({len(data)} bytes)")
        return f"{URL_PREFIX}/{key}"


def get_minutes_storage() -> LocalMinutesStorage:
    settings = get_settings()
    return LocalMinutesStorage(settings.uploads_dir, settings.max_upload_bytes)
