"""site_audit.analyzers: per-page analyses run over the crawled pages."""

from .images import ImageAnalyzer, ImageRecord
from .load_time import LoadTimeProfiler, LoadTiming
from .seo import SeoExtractor, SeoRecord
from .status import StatusChecker, UrlStatus
from .tracking import NO_TRACKING_TOOLS, TrackingDetector, TrackingFinding

__all__ = [
    "ImageAnalyzer",
    "ImageRecord",
    "LoadTimeProfiler",
    "LoadTiming",
    "NO_TRACKING_TOOLS",
    "SeoExtractor",
    "SeoRecord",
    "StatusChecker",
    "TrackingDetector",
    "TrackingFinding",
    "UrlStatus",
]
