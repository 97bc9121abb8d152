"""
Scraping core for CasaNova.

This module provides the relocation-info scraping framework:
- Polite fetching (robots.txt, per-domain rate limiting) with httpx
- A generic category engine driven by per-category keyword tables
- A manager that scrapes countries and records every source attempt
"""

from .base import Category, CategoryConfig, CategoryScraper, ExtractedRecord, ScrapeLogEntry, Source
from .config import SOURCES, get_category_config, get_sources, list_categories
from .gateway import PersistenceGateway, SQLAlchemyGateway
from .manager import ScraperManager

__all__ = [
    'Category',
    'CategoryConfig',
    'CategoryScraper',
    'ExtractedRecord',
    'ScrapeLogEntry',
    'Source',
    'SOURCES',
    'get_category_config',
    'get_sources',
    'list_categories',
    'PersistenceGateway',
    'SQLAlchemyGateway',
    'ScraperManager',
]
