"""site_audit.crawler: fetching and depth-bounded site traversal."""

from .crawler import SiteCrawler, crawl_site
from .fetcher import Fetcher
from .models import FetchFailure, Response, SiteGraph

__all__ = ["Fetcher", "FetchFailure", "Response", "SiteCrawler", "SiteGraph", "crawl_site"]
