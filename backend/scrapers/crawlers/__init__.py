"""Politeness layer: robots.txt, per-domain rate limiting and fetching."""

from .static import StaticCrawler, FetchResult
from .rate_limit import DomainRateLimiter
from .robots import RobotsChecker

__all__ = ['StaticCrawler', 'FetchResult', 'DomainRateLimiter', 'RobotsChecker']
