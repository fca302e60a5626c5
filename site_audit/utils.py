# File: site_audit/utils.py
"""site_audit.utils: small URL and collection helpers shared by the crawler and analyzers."""

from __future__ import annotations

import posixpath
from typing import Collection, Iterable, List, Sequence
from urllib.parse import urlparse

from site_audit.logger import logger

__all__: Sequence[str] = (
    "is_blank",
    "remove_duplicates",
    "url_extension",
)


def is_blank(value: str | None) -> bool:
    """True for None, empty or whitespace-only strings."""
    return value is None or not str(value).strip()


def url_extension(url: str) -> str:
    """Lower-case file extension of the URL path without the dot; "" if there is none."""
    path = urlparse(url).path
    ext = posixpath.splitext(posixpath.basename(path))[1]
    return ext[1:].lower()


def remove_duplicates(urls: Collection[str] | Iterable[str]) -> List[str]:
    """Drop duplicate URLs, keeping the first occurrence order."""
    items = list(urls)
    unique = list(dict.fromkeys(items))
    removed = len(items) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
