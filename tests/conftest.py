# File: tests/conftest.py
from __future__ import annotations

from collections import Counter
from collections.abc import AsyncIterator
from io import BytesIO
from typing import Dict, Optional, Union

import pytest
from aiohttp import web
from PIL import Image

from site_audit.config import AuditConfig
from site_audit.crawler.models import FetchFailure, Response
from site_audit.storage import ThumbnailStore


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


class FakeFetcher:
    """
    In-memory fetcher: str values are HTML pages, bytes are binary bodies,
    ints are HTTP status codes (2xx for HEAD, failures otherwise).
    Unknown URLs fail like a refused connection.
    """

    def __init__(self, resources: Dict[str, Union[str, bytes, int]]) -> None:
        self.resources = resources
        self.calls: Counter[str] = Counter()
        self.head_calls: list[str] = []

    async def get(self, url: str) -> Union[Response, FetchFailure]:
        self.calls[url] += 1
        value = self.resources.get(url)
        if value is None:
            return FetchFailure(url, "connect ECONNREFUSED")
        if isinstance(value, int):
            return FetchFailure(url, f"Request failed with status code {value}", value)
        body = value.encode("utf-8") if isinstance(value, str) else value
        return Response(url=url, status=200, body=body)

    async def head(self, url: str) -> Union[int, FetchFailure]:
        self.head_calls.append(url)
        value = self.resources.get(url)
        if value is None:
            return FetchFailure(url, "connect ECONNREFUSED")
        if isinstance(value, int) and not 200 <= value < 300:
            return FetchFailure(url, f"Request failed with status code {value}", value)
        return 200 if not isinstance(value, int) else value


def png_bytes(size: tuple[int, int] = (40, 20), pad_to: Optional[int] = None) -> bytes:
    """A valid PNG; *pad_to* appends bytes after IEND up to that total length."""
    buf = BytesIO()
    Image.new("RGB", size, (200, 30, 30)).save(buf, format="PNG")
    data = buf.getvalue()
    if pad_to is not None:
        assert pad_to >= len(data)
        data += b"\0" * (pad_to - len(data))
    return data


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def audit_config(tmp_path) -> AuditConfig:
    """Return a basic valid AuditConfig writing thumbnails into tmp_path."""
    return AuditConfig(
        max_depth=2,
        timeout=2.0,
        navigation_timeout=5.0,
        user_agent="TestAgent/1.0",
        thumbnail_dir=tmp_path / "thumbnails",
    )


@pytest.fixture()
def thumbnail_store(tmp_path) -> ThumbnailStore:
    return ThumbnailStore(tmp_path / "thumbnails", "thumbnails")
