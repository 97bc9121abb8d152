"""
Polite static HTML crawler.

Fetches pages with httpx and parses them with BeautifulSoup. Every fetch
checks robots.txt first, then waits for the per-domain rate limit, then
issues a single GET. There are no retries: a failed fetch is reported to
the caller and the source is skipped.
"""

from dataclasses import dataclass
from typing import Optional, Dict
from urllib.parse import urlsplit
import httpx
import logging

from api.config import settings
from ..exceptions import PolicyDenied, TransportFailure, ParseFailure
from ..utils.document import PageDocument
from .rate_limit import DomainRateLimiter
from .robots import RobotsChecker

logger = logging.getLogger(__name__)

# Process-wide limiter used when a crawler is built without one
_shared_rate_limiter: Optional[DomainRateLimiter] = None


def get_shared_rate_limiter() -> DomainRateLimiter:
    """Rate limiter shared by every crawler created with defaults."""
    global _shared_rate_limiter
    if _shared_rate_limiter is None:
        _shared_rate_limiter = DomainRateLimiter(settings.scraper_rate_limit_seconds)
    return _shared_rate_limiter


@dataclass
class FetchResult:
    """A successfully fetched and parsed page."""
    document: PageDocument
    final_url: str      # URL after redirects
    status_code: int
    html: str


class StaticCrawler:
    """
    Wrapper for fetching static HTML pages politely.

    Uses a reusable httpx.AsyncClient and a DomainRateLimiter shared by
    every fetch made through this crawler. Construct one per process and
    pass it to the scrapers.
    """

    def __init__(
        self,
        rate_limiter: Optional[DomainRateLimiter] = None,
        timeout: Optional[float] = None,
        robots_timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        user_agent: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the crawler.

        Args:
            rate_limiter: Per-domain limiter (defaults to the process-wide one)
            timeout: Request timeout in seconds
            robots_timeout: robots.txt request timeout in seconds
            max_redirects: Redirect ceiling before the fetch fails
            user_agent: Bot user-agent string
            headers: Extra default headers
            transport: Custom httpx transport (tests)
        """
        self.rate_limiter = rate_limiter or get_shared_rate_limiter()
        self.timeout = timeout if timeout is not None else settings.scraper_timeout
        self.max_redirects = max_redirects if max_redirects is not None else settings.scraper_max_redirects
        self.user_agent = user_agent or settings.scraper_user_agent
        self.robots = RobotsChecker(
            self.user_agent,
            timeout=robots_timeout if robots_timeout is not None else settings.scraper_robots_timeout,
        )
        self.headers = {
            'User-Agent': self.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': settings.scraper_accept_language,
        }
        if headers:
            self.headers.update(headers)
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create reusable HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                max_redirects=self.max_redirects,
                timeout=self.timeout,
                headers=self.headers,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client and release resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def fetch(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        language: Optional[str] = None,
    ) -> FetchResult:
        """
        Fetch a URL and return the parsed page.

        Args:
            url: URL to fetch
            headers: Per-call header overrides
            timeout: Per-call timeout in seconds
            language: Accept-Language override

        Returns:
            FetchResult with document, final URL and status code

        Raises:
            PolicyDenied: robots.txt disallows the URL (no rate-limit slot is used)
            TransportFailure: timeout, network error, redirects or error status
            ParseFailure: the body could not be loaded as HTML
        """
        domain = urlsplit(url).netloc
        if not domain:
            raise TransportFailure(f"Invalid URL: {url}", url=url)

        client = await self._get_client()

        if not await self.robots.is_allowed(url, client):
            logger.warning(f"robots.txt disallows {url}")
            raise PolicyDenied(url)

        await self.rate_limiter.wait(domain)

        request_headers = {}
        if language:
            request_headers['Accept-Language'] = language
        if headers:
            request_headers.update(headers)

        logger.debug(f"StaticCrawler fetching: {url}")
        try:
            response = await client.get(
                url,
                headers=request_headers or None,
                timeout=timeout if timeout is not None else self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportFailure(
                f"Failed to fetch {url}: HTTP {e.response.status_code}",
                url=url,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TransportFailure(f"Failed to fetch {url}: {str(e) or type(e).__name__}", url=url) from e

        try:
            document = PageDocument(response.text)
        except Exception as e:
            raise ParseFailure(f"Failed to parse {url}: {e}", url=url) from e

        return FetchResult(
            document=document,
            final_url=str(response.url),
            status_code=response.status_code,
            html=response.text,
        )
