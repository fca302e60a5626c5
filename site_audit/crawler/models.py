# site_audit/crawler/models.py
"""
Data models shared by the SiteAudit fetcher and crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union


@dataclass(slots=True)
class FetchFailure:
    """A network, timeout or non-2xx error met while retrieving *url*.

    ``status`` is only set when the server did answer, with a non-2xx code.
    """

    url: str
    message: str
    status: Optional[int] = None

    def as_dict(self) -> dict:
        data: dict = {"url": self.url, "error": self.message}
        if self.status is not None:
            data["status"] = self.status
        return data


@dataclass(slots=True)
class Response:
    """Successful (2xx) GET: final status, headers and raw body."""

    url: str
    status: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    charset: Optional[str] = None

    @property
    def text(self) -> str:
        """Body decoded with the declared charset, UTF-8 otherwise."""
        try:
            return self.body.decode(self.charset or "utf-8", errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


FetchResult = Union[Response, FetchFailure]

#: page address -> outbound in-scope addresses, or the failure met fetching it
SiteGraph = Dict[str, Union[List[str], FetchFailure]]
