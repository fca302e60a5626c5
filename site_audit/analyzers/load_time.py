"""Page load timing measured in a real headless Chromium.

Each measurement launches its own browser and always closes it, whether the
navigation succeeded or not.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from site_audit.logger import get_logger

logger = get_logger("load_time")

# Navigation Timing Level 1 fields, relative to navigationStart
_TIMING_SCRIPT = """
() => {
    const t = performance.timing;
    return {
        total: t.loadEventEnd - t.navigationStart,
        dns: t.domainLookupEnd - t.domainLookupStart,
        tcp: t.connectEnd - t.connectStart,
        ttfb: t.responseStart - t.requestStart,
        domContentLoaded: t.domContentLoadedEventEnd - t.navigationStart,
    };
}
"""


@dataclass(slots=True)
class LoadTiming:
    url: str
    total_ms: Optional[float] = None
    dns_ms: Optional[float] = None
    tcp_ms: Optional[float] = None
    ttfb_ms: Optional[float] = None
    dom_content_loaded_ms: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> dict:
        if self.error is not None:
            return {"url": self.url, "error": self.error}
        return {
            "url": self.url,
            "total_ms": self.total_ms,
            "dns_ms": self.dns_ms,
            "tcp_ms": self.tcp_ms,
            "ttfb_ms": self.ttfb_ms,
            "dom_content_loaded_ms": self.dom_content_loaded_ms,
        }


def _ms(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and value >= 0:
        return float(value)
    return None


class LoadTimeProfiler:
    def __init__(
        self,
        navigation_timeout: float = 60.0,
        playwright_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        self.navigation_timeout = navigation_timeout
        self._playwright_factory = playwright_factory

    async def measure(self, url: str) -> LoadTiming:
        try:
            timing, wall_ms = await self._navigate(url)
        except PlaywrightError as exc:
            logger.warning("Load timing failed for %s: %s", url, exc)
            return LoadTiming(url=url, error=str(exc) or type(exc).__name__)

        total = _ms(timing.get("total"))
        return LoadTiming(
            url=url,
            # loadEventEnd can still be 0 right after the load event
            total_ms=total if total else round(wall_ms, 1),
            dns_ms=_ms(timing.get("dns")),
            tcp_ms=_ms(timing.get("tcp")),
            ttfb_ms=_ms(timing.get("ttfb")),
            dom_content_loaded_ms=_ms(timing.get("domContentLoaded")),
        )

    async def _navigate(self, url: str) -> tuple[Dict[str, Any], float]:
        async with self._playwright_factory() as pw:
            browser = await pw.chromium.launch(headless=True)
            try:
                page = await browser.new_page()
                started = time.perf_counter()
                await page.goto(url, wait_until="load", timeout=self.navigation_timeout * 1000)
                wall_ms = (time.perf_counter() - started) * 1000
                timing = await page.evaluate(_TIMING_SCRIPT)
            finally:
                await browser.close()
        return (timing if isinstance(timing, dict) else {}), wall_ms
