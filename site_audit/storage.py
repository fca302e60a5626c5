# === FILE: site_audit/storage.py ===
"""Append-only thumbnail store.

Every write gets a fresh uuid4 file name, so concurrent image tasks never
target the same file. The returned locator is relative and goes into the
report verbatim.
"""
from __future__ import annotations

import uuid
from pathlib import Path
from typing import Union

from site_audit.logger import get_logger


class ThumbnailStore:
    """Writes thumbnail bytes under *directory* and hands back ``prefix/name`` locators."""

    def __init__(self, directory: Union[str, Path], url_prefix: str = "thumbnails") -> None:
        self.directory = Path(directory)
        self.url_prefix = url_prefix.strip("/")
        self.logger = get_logger("storage")

    def store(self, data: bytes, suffix: str = ".png") -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        name = f"{uuid.uuid4().hex}{suffix}"
        (self.directory / name).write_bytes(data)
        self.logger.debug("Stored thumbnail %s (%d bytes)", name, len(data))
        return f"{self.url_prefix}/{name}" if self.url_prefix else name
