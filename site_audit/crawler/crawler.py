# === FILE: site_audit/crawler/crawler.py ===
from __future__ import annotations

import time
from typing import List, Protocol, Set, Tuple

from site_audit.crawler.link_extractor import scoped_links
from site_audit.crawler.models import FetchFailure, FetchResult, SiteGraph
from site_audit.logger import get_logger

__all__ = ("PageFetcher", "SiteCrawler", "crawl_site")


class PageFetcher(Protocol):
    async def get(self, url: str) -> FetchResult: ...


class SiteCrawler:
    """
    Depth-first crawler over an explicit worklist of (address, depth) pairs.

    One instance owns its visited set, frontier and graph for a single crawl.
    Children are pushed in reverse so they are popped in document order, which
    visits pages in the same order as a recursive depth-first walk.
    """

    def __init__(self, fetcher: PageFetcher, seed: str, max_depth: int = 2) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self.fetcher = fetcher
        self.seed = seed
        self.max_depth = max_depth
        self.visited: Set[str] = set()
        self.graph: SiteGraph = {}
        self._frontier: List[Tuple[str, int]] = []
        self._started = False
        self.logger = get_logger("crawler")

    @property
    def frontier(self) -> Tuple[Tuple[str, int], ...]:
        """Pending (address, depth) pairs, next one last."""
        return tuple(self._frontier)

    async def crawl(self) -> SiteGraph:
        if self._started:
            raise RuntimeError("a SiteCrawler runs a single crawl")
        self._started = True
        self.logger.info("Crawl start: %s (max depth %d)", self.seed, self.max_depth)
        start = time.monotonic()
        self._frontier.append((self.seed, 0))
        while self._frontier:
            url, depth = self._frontier.pop()
            await self._visit(url, depth)
        duration = time.monotonic() - start
        failures = sum(1 for v in self.graph.values() if isinstance(v, FetchFailure))
        self.logger.info(
            "Crawl done: %d pages (%d failed) in %.2f s", len(self.graph), failures, duration
        )
        return self.graph

    async def _visit(self, url: str, depth: int) -> None:
        # depth-limited nodes are skipped without a graph entry
        if depth > self.max_depth or url in self.visited:
            return
        self.visited.add(url)
        result = await self.fetcher.get(url)
        if isinstance(result, FetchFailure):
            self.logger.warning("Failed %s: %s", url, result.message)
            self.graph[url] = result
            return
        links = scoped_links(url, result.text, self.seed)
        self.graph[url] = links
        self.logger.debug("%s (depth %d): %d in-scope links", url, depth, len(links))
        self._frontier.extend((link, depth + 1) for link in reversed(links))


async def crawl_site(fetcher: PageFetcher, seed: str, max_depth: int = 2) -> SiteGraph:
    """Crawl from *seed* with a fresh SiteCrawler and return its site graph."""
    return await SiteCrawler(fetcher, seed, max_depth).crawl()
