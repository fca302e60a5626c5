"""Third-party tracking script detection by literal signature matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from site_audit.crawler.models import FetchFailure
from site_audit.crawler.crawler import PageFetcher
from site_audit.logger import get_logger

NO_TRACKING_TOOLS = "No tracking tools detected"

#: tool name -> literal substrings; declaration order is report order
TRACKING_SIGNATURES: Dict[str, Tuple[str, ...]] = {
    "Facebook Pixel": ("https://connect.facebook.net", "fbq("),
    "Hotjar": ("https://static.hotjar.com", "_hjSettings"),
    "Google Analytics": ("gtag('config'", "www.googletagmanager.com"),
    "LinkedIn Insights": ("snap.licdn.com",),
}

logger = get_logger("tracking")


@dataclass(slots=True)
class TrackingFinding:
    """Tools found on *url*, or the error that prevented the check."""

    url: str
    tools: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def labels(self) -> List[str]:
        """Presentation form: tool names, the "none detected" sentinel, or the error."""
        if self.error is not None:
            return [f"Error analyzing {self.url}: {self.error}"]
        return list(self.tools) if self.tools else [NO_TRACKING_TOOLS]

    def as_dict(self) -> dict:
        data: dict = {"url": self.url, "tools": list(self.tools), "labels": self.labels()}
        if self.error is not None:
            data["error"] = self.error
        return data


def match_signatures(
    content: str, signatures: Dict[str, Sequence[str]] = TRACKING_SIGNATURES
) -> List[str]:
    """Names of the tools with at least one signature present in *content*, in table order."""
    return [tool for tool, patterns in signatures.items() if any(p in content for p in patterns)]


class TrackingDetector:
    def __init__(
        self, fetcher: PageFetcher, signatures: Optional[Dict[str, Sequence[str]]] = None
    ) -> None:
        self.fetcher = fetcher
        self.signatures = signatures if signatures is not None else TRACKING_SIGNATURES

    async def detect(self, url: str) -> TrackingFinding:
        result = await self.fetcher.get(url)
        if isinstance(result, FetchFailure):
            logger.warning("Tracking check skipped for %s: %s", url, result.message)
            return TrackingFinding(url=url, error=result.message)
        tools = match_signatures(result.text, self.signatures)
        logger.debug("%s: tracking tools %s", url, tools or "none")
        return TrackingFinding(url=url, tools=tools)
