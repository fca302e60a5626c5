# File: site_audit/aggregator.py
"""site_audit.aggregator: joins the crawl graph and per-page analyses into one AuditReport."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from itertools import chain
from typing import Any, Dict, Iterable, List

from site_audit.analyzers.images import ImageRecord
from site_audit.analyzers.load_time import LoadTiming
from site_audit.analyzers.seo import SeoRecord
from site_audit.analyzers.status import UrlStatus
from site_audit.analyzers.tracking import TrackingFinding
from site_audit.crawler.models import FetchFailure, SiteGraph
from site_audit.utils import remove_duplicates


@dataclass(slots=True)
class PageAnalysis:
    """Image, tracking and SEO results of one page."""

    url: str
    images: List[ImageRecord]
    tracking: TrackingFinding
    seo: SeoRecord


@dataclass(slots=True)
class AuditReport:
    """Everything learned about a site from one seed address."""

    seed: str
    site_graph: SiteGraph = field(default_factory=dict)
    addresses: List[str] = field(default_factory=list)
    images: Dict[str, List[ImageRecord]] = field(default_factory=dict)
    tracking: Dict[str, TrackingFinding] = field(default_factory=dict)
    seo: List[SeoRecord] = field(default_factory=list)
    statuses: List[UrlStatus] = field(default_factory=list)
    load_times: List[LoadTiming] = field(default_factory=list)

    def site_tree(self) -> Dict[str, Any]:
        """Graph with failures rendered as error mappings."""
        return {
            url: value.as_dict() if isinstance(value, FetchFailure) else list(value)
            for url, value in self.site_graph.items()
        }

    def as_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "site_tree": self.site_tree(),
            "addresses": list(self.addresses),
            "images": {url: [r.as_dict() for r in recs] for url, recs in self.images.items()},
            "tracking": {url: f.as_dict() for url, f in self.tracking.items()},
            "seo": [r.as_dict() for r in self.seo],
            "statuses": [s.as_dict() for s in self.statuses],
            "load_times": [t.as_dict() for t in self.load_times],
        }

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the report."""
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)


def collect_addresses(seed: str, graph: SiteGraph) -> List[str]:
    """Seed, graph keys and every edge target, deduplicated in first-seen order."""
    edges = chain.from_iterable(v for v in graph.values() if not isinstance(v, FetchFailure))
    return remove_duplicates(chain([seed], graph.keys(), edges))


def aggregate_results(
    seed: str,
    graph: SiteGraph,
    pages: Iterable[PageAnalysis],
    statuses: Iterable[UrlStatus] = (),
    load_times: Iterable[LoadTiming] = (),
) -> AuditReport:
    """Assemble all parts of the report."""
    report = AuditReport(seed=seed, site_graph=graph, addresses=collect_addresses(seed, graph))
    for page in pages:
        report.images[page.url] = list(page.images)
        report.tracking[page.url] = page.tracking
        report.seo.append(page.seo)
    report.statuses = list(statuses)
    report.load_times = list(load_times)
    return report
