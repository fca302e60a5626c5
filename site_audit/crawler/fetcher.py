# site_audit/crawler/fetcher.py
"""
Fetcher module: the single point every network read of SiteAudit goes through.

Each call carries the configured timeout and User-Agent. Transport errors,
timeouts and non-2xx answers never raise; they come back as FetchFailure.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Union

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_audit.config import AuditConfig
from site_audit.crawler.models import FetchFailure, FetchResult, Response
from site_audit.logger import get_logger


def _status_message(status: int) -> str:
    return f"Request failed with status code {status}"


class Fetcher:
    """Bounded-timeout HTTP GET/HEAD with a fixed identifying header."""

    def __init__(self, config: AuditConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self.logger = get_logger("fetcher")

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    def _require_session(self) -> ClientSession:
        if not self.session:
            raise RuntimeError("Session not initialized")
        return self.session

    async def get(self, url: str) -> FetchResult:
        """
        GET *url* and read the whole body.

        Returns Response for a 2xx answer, FetchFailure otherwise.
        """
        session = self._require_session()
        try:
            async with session.get(url) as resp:
                if not 200 <= resp.status < 300:
                    self.logger.debug("GET %s -> HTTP %s", url, resp.status)
                    return FetchFailure(url, _status_message(resp.status), resp.status)
                body = await resp.read()
                return Response(
                    url=url,
                    status=resp.status,
                    body=body,
                    headers={k: v for k, v in resp.headers.items()},
                    charset=resp.charset,
                )
        except asyncio.TimeoutError:
            return FetchFailure(url, f"timeout of {self.config.timeout:g}s exceeded")
        except (ClientError, ValueError) as exc:
            self.logger.debug("GET %s failed: %s", url, exc)
            return FetchFailure(url, str(exc) or type(exc).__name__)

    async def head(self, url: str) -> Union[int, FetchFailure]:
        """
        HEAD *url*, following redirects.

        Returns the 2xx status code, or FetchFailure (with ``status`` set when
        the server answered with a non-2xx code).
        """
        session = self._require_session()
        try:
            async with session.head(url, allow_redirects=True) as resp:
                if not 200 <= resp.status < 300:
                    return FetchFailure(url, _status_message(resp.status), resp.status)
                return resp.status
        except asyncio.TimeoutError:
            return FetchFailure(url, f"timeout of {self.config.timeout:g}s exceeded")
        except (ClientError, ValueError) as exc:
            self.logger.debug("HEAD %s failed: %s", url, exc)
            return FetchFailure(url, str(exc) or type(exc).__name__)
