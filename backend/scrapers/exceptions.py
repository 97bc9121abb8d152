"""Errors raised while fetching and loading source pages."""

from typing import Optional


class FetchError(Exception):
    """Base class for every failure of a single source fetch."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class PolicyDenied(FetchError):
    """robots.txt disallows the target path for our user-agent."""

    def __init__(self, url: str):
        super().__init__(f"Scraping not allowed by robots.txt: {url}", url=url)


class TransportFailure(FetchError):
    """Timeout, DNS/connection error, too many redirects or an error status."""


class ParseFailure(FetchError):
    """The fetched body could not be loaded as an HTML document."""
