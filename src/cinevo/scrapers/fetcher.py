"""HTML fetching through the relay, with a persisted time-boxed cache."""

import asyncio
import logging
from urllib.parse import quote

import httpx

from cinevo.cache.store import CacheStore
from cinevo.config import settings

logger = logging.getLogger(__name__)

_UA = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"


class FetchError(Exception):
    """Raised when a page cannot be fetched (network failure or non-2xx status)."""

    def __init__(self, url: str, status_code: int | None = None, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        detail = f"{status_code}" if status_code is not None else reason
        super().__init__(f"Failed to fetch {url}: {detail}")


class HtmlFetcher:
    """
    Fetches page HTML, serving repeat requests from the HTML cache.

    Cache keys are the exact URL strings. Transport errors and 5xx
    responses are retried with exponential backoff up to ``max_retries``
    total attempts; 4xx responses fail straight away.
    """

    def __init__(
        self,
        cache: CacheStore,
        relay_prefix: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_base: float | None = None,
    ) -> None:
        self.cache = cache
        self.relay_prefix = settings.cors_relay_prefix if relay_prefix is None else relay_prefix
        self.timeout = timeout or settings.scrape_timeout
        self.max_retries = max(1, max_retries or settings.scrape_max_retries)
        self.backoff_base = settings.scrape_backoff_base if backoff_base is None else backoff_base

    def relay_url(self, url: str) -> str:
        """Return the URL actually requested for ``url``."""
        if not self.relay_prefix:
            return url
        return self.relay_prefix + quote(url, safe="")

    async def fetch(self, url: str) -> str:
        """
        Return the HTML for ``url``.

        Raises:
            FetchError: On a non-success status or a network failure
        """
        try:
            cached = await self.cache.get(url)
        except Exception as e:
            logger.warning(f"HTML cache read failed for {url}: {e}")
            cached = None
        if isinstance(cached, str):
            logger.debug(f"HTML cache hit: {url}")
            return cached

        html = await self._fetch_with_retries(url)
        try:
            await self.cache.set(url, html)
        except Exception as e:
            logger.warning(f"HTML cache write failed for {url}: {e}")
        return html

    async def _fetch_with_retries(self, url: str) -> str:
        attempt = 1
        while True:
            try:
                return await self._fetch_once(url)
            except FetchError as e:
                retryable = e.status_code is None or e.status_code >= 500
                if not retryable or attempt >= self.max_retries:
                    raise
                delay = self.backoff_base * (2 ** (attempt - 1))
                logger.warning(
                    f"Fetch attempt {attempt}/{self.max_retries} failed for {url}: {e}; "
                    f"retrying in {delay}s"
                )
                await asyncio.sleep(delay)
            attempt += 1

    async def _fetch_once(self, url: str) -> str:
        logger.info(f"[fetch] {url}")
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": _UA, "Accept": "text/html"},
            ) as client:
                response = await client.get(self.relay_url(url))
        except httpx.HTTPError as e:
            raise FetchError(url, reason=str(e) or type(e).__name__) from e

        if response.status_code < 200 or response.status_code >= 300:
            raise FetchError(url, status_code=response.status_code)
        return response.text
