# File: tests/test_load_time.py
"""Load-time profiler against a fake Playwright driver (no browser needed)."""
from __future__ import annotations

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from site_audit.analyzers.load_time import LoadTimeProfiler

URL = "http://example.test/"

TIMING = {"total": 812, "dns": 3, "tcp": 7, "ttfb": 120, "domContentLoaded": 455}


class FakePage:
    def __init__(self, timing=None, goto_error=None, evaluate_error=None):
        self.timing = TIMING if timing is None else timing
        self.goto_error = goto_error
        self.evaluate_error = evaluate_error
        self.goto_args = None

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_args = (url, wait_until, timeout)
        if self.goto_error:
            raise self.goto_error

    async def evaluate(self, script):
        if self.evaluate_error:
            raise self.evaluate_error
        return self.timing


class FakeBrowser:
    def __init__(self, page: FakePage):
        self.page = page
        self.closed = False

    async def new_page(self):
        return self.page

    async def close(self):
        self.closed = True


class FakeChromium:
    def __init__(self, browser: FakeBrowser, launch_error=None):
        self.browser = browser
        self.launch_error = launch_error
        self.launches = 0

    async def launch(self, headless=True):
        self.launches += 1
        if self.launch_error:
            raise self.launch_error
        return self.browser


class FakePlaywright:
    """Stands in for ``async_playwright()``: an async context manager."""

    def __init__(self, page: FakePage, launch_error=None):
        self.browser = FakeBrowser(page)
        self.chromium = FakeChromium(self.browser, launch_error)
        self.exited = False

    def __call__(self):
        return self

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited = True


@pytest.mark.asyncio()
async def test_measure_reads_navigation_timing():
    fake = FakePlaywright(FakePage())
    timing = await LoadTimeProfiler(navigation_timeout=60, playwright_factory=fake).measure(URL)

    assert timing.ok
    assert timing.as_dict() == {
        "url": URL,
        "total_ms": 812.0,
        "dns_ms": 3.0,
        "tcp_ms": 7.0,
        "ttfb_ms": 120.0,
        "dom_content_loaded_ms": 455.0,
    }
    assert fake.browser.page.goto_args == (URL, "load", 60000)
    assert fake.browser.closed
    assert fake.exited


@pytest.mark.asyncio()
async def test_total_falls_back_to_wall_clock():
    fake = FakePlaywright(FakePage(timing={**TIMING, "total": -1700000000000}))
    timing = await LoadTimeProfiler(playwright_factory=fake).measure(URL)
    assert timing.total_ms is not None and timing.total_ms >= 0


@pytest.mark.asyncio()
async def test_navigation_timeout_closes_browser():
    fake = FakePlaywright(FakePage(goto_error=PlaywrightTimeoutError("Timeout 60000ms exceeded.")))
    timing = await LoadTimeProfiler(playwright_factory=fake).measure(URL)

    assert not timing.ok
    assert "Timeout" in timing.error
    assert timing.as_dict() == {"url": URL, "error": timing.error}
    assert fake.browser.closed


@pytest.mark.asyncio()
async def test_evaluate_failure_closes_browser():
    fake = FakePlaywright(FakePage(evaluate_error=PlaywrightError("Execution context was destroyed")))
    timing = await LoadTimeProfiler(playwright_factory=fake).measure(URL)
    assert timing.error == "Execution context was destroyed"
    assert fake.browser.closed


@pytest.mark.asyncio()
async def test_launch_failure_is_reported():
    fake = FakePlaywright(FakePage(), launch_error=PlaywrightError("Executable doesn't exist"))
    timing = await LoadTimeProfiler(playwright_factory=fake).measure(URL)
    assert timing.error == "Executable doesn't exist"
    assert fake.exited
