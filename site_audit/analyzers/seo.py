"""SEO metadata extraction: title, description, canonical URL and h1-h3 headings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_audit.crawler.crawler import PageFetcher
from site_audit.crawler.models import FetchFailure
from site_audit.logger import get_logger

NO_TITLE = "No title"
NO_DESCRIPTION = "No description"
NO_CANONICAL = "No canonical URL"
HEADING_LEVELS = ("h1", "h2", "h3")

logger = get_logger("seo")


@dataclass(slots=True)
class SeoRecord:
    url: str
    title: str = NO_TITLE
    description: str = NO_DESCRIPTION
    canonical: str = NO_CANONICAL
    headings: Dict[str, List[str]] = field(
        default_factory=lambda: {level: [] for level in HEADING_LEVELS}
    )
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict:
        if self.error is not None:
            return {"url": self.url, "error": self.error}
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "canonical": self.canonical,
            "headings": {k: list(v) for k, v in self.headings.items()},
        }


def _attr(tag: object, name: str) -> Optional[str]:
    if not isinstance(tag, Tag):
        return None
    value = tag.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value if value else None


def extract_seo(url: str, html: str) -> SeoRecord:
    """Build a SeoRecord from already fetched markup. Absent elements keep their placeholder."""
    soup = BeautifulSoup(html, "html.parser")
    record = SeoRecord(url=url)

    title_tag = soup.find("title")
    # verbatim, no trimming
    if isinstance(title_tag, Tag) and title_tag.get_text():
        record.title = title_tag.get_text()

    description = _attr(soup.find("meta", attrs={"name": "description"}), "content")
    if description:
        record.description = description

    canonical = _attr(soup.find("link", rel="canonical"), "href")
    if canonical:
        record.canonical = canonical

    for level in HEADING_LEVELS:
        record.headings[level] = [h.get_text().strip() for h in soup.find_all(level)]
    return record


class SeoExtractor:
    def __init__(self, fetcher: PageFetcher) -> None:
        self.fetcher = fetcher

    async def extract(self, url: str) -> SeoRecord:
        result = await self.fetcher.get(url)
        if isinstance(result, FetchFailure):
            logger.warning("SEO extraction failed for %s: %s", url, result.message)
            return SeoRecord(url=url, error=result.message)
        return extract_seo(url, result.text)
