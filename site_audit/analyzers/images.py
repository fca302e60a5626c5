"""Oversized image inventory.

Every <img src> of a page is fetched concurrently. Images above
OVERSIZED_IMAGE_KB get a thumbnail that fits THUMBNAIL_BOX; smaller images are
left out of the result entirely.
"""
from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag
from PIL import Image, UnidentifiedImageError

from site_audit.crawler.crawler import PageFetcher
from site_audit.crawler.models import FetchFailure
from site_audit.logger import get_logger
from site_audit.storage import ThumbnailStore
from site_audit.utils import url_extension

OVERSIZED_IMAGE_KB = 1024
THUMBNAIL_BOX = (150, 150)

_PNG_MODES = {"1", "L", "LA", "I", "P", "RGB", "RGBA"}

logger = get_logger("images")


@dataclass(slots=True)
class ImageRecord:
    url: str
    size_kb: Optional[int] = None
    format: Optional[str] = None
    thumbnail: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict:
        if self.error is not None:
            return {"url": self.url, "error": self.error}
        return {
            "url": self.url,
            "size_kb": self.size_kb,
            "format": self.format,
            "thumbnail": self.thumbnail,
        }


def image_sources(page_url: str, html: str) -> List[str]:
    """Absolute addresses of every <img src> in document order."""
    soup = BeautifulSoup(html, "html.parser")
    sources: List[str] = []
    for tag in soup.find_all("img", src=True):
        if not isinstance(tag, Tag):
            continue
        src = tag.get("src")
        if not isinstance(src, str) or not src.strip():
            continue
        try:
            sources.append(urljoin(page_url, src.strip()))
        except ValueError:
            logger.debug("Skipping malformed image src %r on %s", src, page_url)
    return sources


def make_thumbnail(data: bytes) -> bytes:
    """Decode *data* and return a PNG that fits THUMBNAIL_BOX, aspect ratio kept."""
    with Image.open(BytesIO(data)) as img:
        img.thumbnail(THUMBNAIL_BOX)
        if img.mode not in _PNG_MODES:
            img = img.convert("RGBA")
        out = BytesIO()
        img.save(out, format="PNG")
        return out.getvalue()


class ImageAnalyzer:
    def __init__(self, fetcher: PageFetcher, store: ThumbnailStore) -> None:
        self.fetcher = fetcher
        self.store = store

    async def analyze(self, page_url: str) -> List[ImageRecord]:
        """
        Records for the oversized or failing images of *page_url*.

        If the page itself cannot be fetched, a single record carrying the
        page address and the error is returned.
        """
        page = await self.fetcher.get(page_url)
        if isinstance(page, FetchFailure):
            logger.warning("Image analysis failed for %s: %s", page_url, page.message)
            return [ImageRecord(url=page_url, error=page.message)]

        sources = image_sources(page_url, page.text)
        logger.debug("%s: %d image references", page_url, len(sources))
        results = await asyncio.gather(*(self._process(src) for src in sources))
        return [r for r in results if r is not None]

    async def _process(self, url: str) -> Optional[ImageRecord]:
        result = await self.fetcher.get(url)
        if isinstance(result, FetchFailure):
            return ImageRecord(url=url, error=result.message)

        # measured from the bytes received, not from Content-Length
        size_kb = len(result.body) / 1024
        if size_kb <= OVERSIZED_IMAGE_KB:
            return None

        try:
            reference = await asyncio.to_thread(self._store_thumbnail, result.body)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            logger.warning("Cannot decode image %s: %s", url, exc)
            return ImageRecord(url=url, error=str(exc) or type(exc).__name__)

        # rounded up so a kept image never reports a size at the threshold
        return ImageRecord(
            url=url,
            size_kb=math.ceil(size_kb),
            format=url_extension(url),
            thumbnail=reference,
        )

    def _store_thumbnail(self, data: bytes) -> str:
        return self.store.store(make_thumbnail(data), suffix=".png")
