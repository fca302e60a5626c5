# File: tests/test_engine.py
"""End-to-end audits against a local aiohttp site."""
from __future__ import annotations

import json
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from aiohttp import web

from conftest import png_bytes, serve_app
from site_audit.aggregator import aggregate_results, collect_addresses
from site_audit.analyzers.load_time import LoadTiming
from site_audit.analyzers.tracking import NO_TRACKING_TOOLS
from site_audit.crawler.models import FetchFailure
from site_audit.engine import Engine, SeedValidationError

KIB = 1024


class StubProfiler:
    """Records measured URLs; the first one fails like a crashed browser."""

    def __init__(self) -> None:
        self.measured: list[str] = []

    async def measure(self, url: str) -> LoadTiming:
        self.measured.append(url)
        if len(self.measured) == 1:
            return LoadTiming(url=url, error="Target page, context or browser has been closed")
        return LoadTiming(url=url, total_ms=10.0, dns_ms=0.0, tcp_ms=0.0, ttfb_ms=1.0, dom_content_loaded_ms=5.0)


@pytest_asyncio.fixture
async def site(unused_tcp_port: int) -> AsyncIterator[str]:
    app = web.Application()
    big = png_bytes((300, 300), pad_to=2048 * KIB)
    small = png_bytes(pad_to=10 * KIB)

    async def home(_):
        return web.Response(
            text=(
                "<html><head><title>Home</title>"
                "<script>gtag('config', 'G-XYZ');</script></head><body>"
                "<h1>Welcome</h1>"
                '<img src="/img/big.png"><img src="/img/small.png">'
                '<a href="/about">About</a><a href="/broken">Broken</a>'
                "</body></html>"
            ),
            content_type="text/html",
        )

    async def about(_):
        return web.Response(
            text='<title>About</title><a href="/">Home</a><a href="/team">Team</a>',
            content_type="text/html",
        )

    async def team(_):
        return web.Response(text="<title>Team</title>", content_type="text/html")

    async def image(request):
        data = big if request.match_info["name"] == "big.png" else small
        return web.Response(body=data, content_type="image/png")

    app.router.add_get("/", home)
    app.router.add_get("/about", about)
    app.router.add_get("/team", team)
    app.router.add_get("/img/{name}", image)

    async for url in serve_app(app, unused_tcp_port):
        yield url


@pytest.mark.asyncio()
async def test_extended_audit(audit_config, site: str):
    seed = f"{site}/"
    profiler = StubProfiler()
    report = await Engine(audit_config, profiler=profiler).run_analysis(seed)

    about, team, broken = f"{site}/about", f"{site}/team", f"{site}/broken"
    assert report.addresses == [seed, about, team, broken]
    assert isinstance(report.site_graph[broken], FetchFailure)
    assert report.site_graph[about] == [seed, team]

    # every page analyzed, failures kept per page
    assert list(report.images) == report.addresses
    [big] = report.images[seed]
    assert big.url == f"{site}/img/big.png"
    assert (big.size_kb, big.format) == (2048, "png")
    assert big.thumbnail.startswith("thumbnails/")
    assert report.images[about] == []
    assert report.images[broken][0].error

    assert report.tracking[seed].tools == ["Google Analytics"]
    assert report.tracking[about].labels() == [NO_TRACKING_TOOLS]
    assert not report.tracking[broken].ok

    titles = {r.url: r.title for r in report.seo if r.ok}
    assert titles == {seed: "Home", about: "About", team: "Team"}

    assert [s.label for s in report.statuses] == [200, 200, 200, 404]
    assert profiler.measured == report.addresses
    assert not report.load_times[0].ok
    assert all(t.ok for t in report.load_times[1:])

    data = json.loads(report.json())
    assert data["site_tree"][broken]["status"] == 404
    assert data["statuses"][3] == {"url": broken, "status": 404, "error": "Request failed with status code 404"}


@pytest.mark.asyncio()
async def test_minimal_audit_only_seed(audit_config, site: str):
    seed = f"{site}/"
    profiler = StubProfiler()
    config = audit_config.model_copy(update={"extended": False, "max_depth": 1})
    report = await Engine(config, profiler=profiler).run_analysis(seed)

    assert list(report.images) == [seed]
    assert list(report.tracking) == [seed]
    assert [r.url for r in report.seo] == [seed]
    assert report.statuses == []
    assert report.load_times == []
    assert profiler.measured == []
    # depth 1: /team is known as an edge target but never fetched
    assert f"{site}/team" in report.addresses
    assert f"{site}/team" not in report.site_graph


@pytest.mark.asyncio()
async def test_unreachable_seed_still_reports(audit_config, unused_tcp_port: int):
    seed = f"http://localhost:{unused_tcp_port}/"
    report = await Engine(audit_config, profiler=StubProfiler()).run_analysis(seed)

    assert report.addresses == [seed]
    assert isinstance(report.site_graph[seed], FetchFailure)
    assert report.images[seed][0].error
    assert not report.tracking[seed].ok
    assert not report.seo[0].ok
    assert report.statuses[0].label == "Error"


@pytest.mark.parametrize("seed", [None, "", "   "])
def test_submit_rejects_missing_seed(audit_config, seed):
    profiler = StubProfiler()
    with pytest.raises(SeedValidationError):
        Engine(audit_config, profiler=profiler).submit(seed)
    assert profiler.measured == []


def test_collect_addresses_includes_seed_for_empty_graph():
    assert collect_addresses("http://x.test/", {}) == ["http://x.test/"]


def test_collect_addresses_dedupes_keys_and_edges():
    graph = {
        "http://x.test/": ["http://x.test/a", "http://x.test/b"],
        "http://x.test/a": ["http://x.test/", "http://x.test/c"],
        "http://x.test/b": FetchFailure("http://x.test/b", "boom"),
    }
    assert collect_addresses("http://x.test/", graph) == [
        "http://x.test/",
        "http://x.test/a",
        "http://x.test/b",
        "http://x.test/c",
    ]


def test_aggregate_without_pages():
    report = aggregate_results("http://x.test/", {}, [])
    assert report.as_dict()["addresses"] == ["http://x.test/"]
    assert report.images == {} and report.statuses == []
