# File: site_audit/engine.py
"""site_audit.engine: orchestration of crawling, per-page analysis and report aggregation."""

from __future__ import annotations

import asyncio
from typing import List, Optional

from site_audit.aggregator import AuditReport, PageAnalysis, aggregate_results, collect_addresses
from site_audit.analyzers.images import ImageAnalyzer
from site_audit.analyzers.load_time import LoadTimeProfiler, LoadTiming
from site_audit.analyzers.seo import SeoExtractor
from site_audit.analyzers.status import StatusChecker
from site_audit.analyzers.tracking import TrackingDetector
from site_audit.config import AuditConfig
from site_audit.crawler.crawler import SiteCrawler
from site_audit.crawler.fetcher import Fetcher
from site_audit.logger import logger
from site_audit.storage import ThumbnailStore
from site_audit.utils import is_blank

__all__ = ["Engine", "SeedValidationError", "start_audit"]


class SeedValidationError(ValueError):
    """The seed URL is missing or empty."""


def validate_seed(seed: Optional[str]) -> str:
    if is_blank(seed):
        raise SeedValidationError("Please provide a valid URL.")
    return str(seed).strip()


class Engine:
    """Facade for the CLI and tests: crawl, analyze, aggregate."""

    def __init__(
        self,
        config: AuditConfig,
        *,
        store: Optional[ThumbnailStore] = None,
        profiler: Optional[LoadTimeProfiler] = None,
    ) -> None:
        self.config = config
        self.store = store or ThumbnailStore(config.thumbnail_dir, config.thumbnail_url_prefix)
        self.profiler = profiler or LoadTimeProfiler(config.navigation_timeout)

    async def run_analysis(self, seed: Optional[str]) -> AuditReport:
        """Crawl from *seed* and run every analysis; failures stay inside their records."""
        seed = validate_seed(seed)
        logger.info("Starting audit of %s", seed)

        async with Fetcher(self.config) as fetcher:
            graph = await SiteCrawler(fetcher, seed, self.config.max_depth).crawl()
            addresses = collect_addresses(seed, graph)
            targets = addresses if self.config.extended else [seed]
            logger.info(
                "%d addresses discovered, analyzing %d page(s)", len(addresses), len(targets)
            )

            images = ImageAnalyzer(fetcher, self.store)
            tracking = TrackingDetector(fetcher)
            seo = SeoExtractor(fetcher)
            pages: List[PageAnalysis] = []
            for url in targets:
                page_images, finding, record = await asyncio.gather(
                    images.analyze(url), tracking.detect(url), seo.extract(url)
                )
                pages.append(PageAnalysis(url, page_images, finding, record))

            statuses = []
            load_times: List[LoadTiming] = []
            if self.config.extended:
                statuses = await StatusChecker(fetcher).check_all(addresses)
                for url in addresses:
                    load_times.append(await self.profiler.measure(url))

        report = aggregate_results(seed, graph, pages, statuses, load_times)
        logger.info("Audit of %s finished", seed)
        return report

    def submit(self, seed: Optional[str]) -> AuditReport:
        """Synchronous entry point; validation happens before any crawling."""
        seed = validate_seed(seed)
        return asyncio.run(self.run_analysis(seed))


async def start_audit(cfg: AuditConfig, seed: Optional[str]) -> AuditReport:
    """Run a full audit of *seed* with *cfg*."""
    return await Engine(cfg).run_analysis(seed)
