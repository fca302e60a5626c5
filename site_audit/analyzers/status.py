"""HTTP status verification of discovered addresses (HEAD, one at a time)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Union

from site_audit.crawler.models import FetchFailure
from site_audit.logger import get_logger

STATUS_ERROR = "Error"

logger = get_logger("status")


class HeadFetcher(Protocol):
    async def head(self, url: str) -> Union[int, FetchFailure]: ...


@dataclass(slots=True)
class UrlStatus:
    """Either an HTTP status code or, when nothing answered, the transport error."""

    url: str
    status: Optional[int] = None
    error: Optional[str] = None

    @property
    def reachable(self) -> bool:
        return self.status is not None

    @property
    def label(self) -> Union[int, str]:
        return self.status if self.status is not None else STATUS_ERROR

    def as_dict(self) -> dict:
        data: dict = {"url": self.url, "status": self.label}
        if self.error is not None:
            data["error"] = self.error
        return data


class StatusChecker:
    def __init__(self, fetcher: HeadFetcher) -> None:
        self.fetcher = fetcher

    async def check(self, url: str) -> UrlStatus:
        result = await self.fetcher.head(url)
        if isinstance(result, FetchFailure):
            # a non-2xx answer still carries its code
            return UrlStatus(url=url, status=result.status, error=result.message)
        return UrlStatus(url=url, status=result)

    async def check_all(self, urls: Iterable[str]) -> List[UrlStatus]:
        """Check *urls* sequentially; output order equals input order."""
        statuses: List[UrlStatus] = []
        for url in urls:
            status = await self.check(url)
            logger.debug("%s -> %s", url, status.label)
            statuses.append(status)
        return statuses
