"""
Scraper Manager - orchestrates the category scrapers.

Provides a unified interface for scraping one country, every known
country, or every category at once. Sources and countries are processed
sequentially, so at most one request is in flight at any time.
"""

from typing import Dict, List, Optional
from datetime import datetime, timezone
import logging

from .base import CategoryScraper, Colors, CountryScrapeSummary, ExtractedRecord, ScrapeLogEntry
from .config import get_category, get_category_config, get_sources, list_categories
from .crawlers.static import StaticCrawler
from .gateway import PersistenceGateway, SQLAlchemyGateway
from .utils.normalizers import normalize_country_code

logger = logging.getLogger(__name__)


class ScraperManager:
    """
    Manages and orchestrates all category scrapers.

    Usage:
        manager = ScraperManager(SQLAlchemyGateway(db_session))

        # Scrape one country
        records = await manager.scrape_country('job', 'FR')

        # Scrape every known country for a category
        summaries = await manager.scrape_all('housing')

        await manager.close()
    """

    def __init__(self, gateway: PersistenceGateway, crawler: Optional[StaticCrawler] = None):
        """
        Initialize the scraper manager.

        Args:
            gateway: Storage for records and scrape logs
            crawler: Shared polite crawler (one is created when omitted)
        """
        self.gateway = gateway
        self._owns_crawler = crawler is None
        self.crawler = crawler or StaticCrawler()
        self.results: Dict[str, List[CountryScrapeSummary]] = {}

    def get_scraper(self, category) -> CategoryScraper:
        """
        Get a scraper for a category.

        Raises:
            ValueError: If the category is not known
        """
        return CategoryScraper(get_category_config(category), self.crawler)

    async def scrape_country(self, category, country_code: str) -> List[ExtractedRecord]:
        """
        Scrape every configured source of one country.

        A failing source is logged as an error entry and skipped; records
        from the other sources are still persisted.

        Returns:
            All records extracted for the country
        """
        scraper = self.get_scraper(category)
        category = get_category(category)
        country_code = normalize_country_code(country_code)
        sources = get_sources(category, country_code)

        if not sources:
            logger.debug(f"No {category.value} sources configured for {country_code}")
            return []

        records: List[ExtractedRecord] = []
        for source in sources:
            entry = ScrapeLogEntry(source_name=source.name, source_url=source.url, status='success')
            logger.info(f"Scraping {Colors.bold(source.name)} for {country_code} {Colors.gray(f'({source.url})')}")
            try:
                data = await scraper.scrape_source(source, country_code)
            except Exception as e:
                entry.status = 'error'
                entry.error_message = str(e) or type(e).__name__
                logger.error(f"   {Colors.red('[ERR]')} {source.name}: {entry.error_message}")
            else:
                entry.items_scraped = len(data)
                records.extend(data)
                logger.info(f"   {Colors.green('[OK]')} {source.name}: {len(data)} item(s)")
            entry.completed_at = datetime.now(timezone.utc)
            self.gateway.append_scrape_log(entry)

        for record in records:
            self.gateway.insert_record(record)
        self.gateway.flush()

        return records

    async def scrape_all(self, category) -> List[CountryScrapeSummary]:
        """
        Scrape a category for every known country.

        A country that fails is logged and left out of the summary; the
        remaining countries are still scraped.
        """
        category = get_category(category)
        summaries = []
        for country_code in self.gateway.list_country_codes():
            try:
                records = await self.scrape_country(category, country_code)
            except Exception as e:
                logger.error(f"Failed to scrape {category.value} info for {country_code}: {e}")
                continue
            summaries.append(CountryScrapeSummary(country=country_code, count=len(records)))

        self.results[category.value] = summaries
        total = sum(s.count for s in summaries)
        logger.info(f"{Colors.bold(category.value)}: {total} item(s) across {len(summaries)} countries")
        return summaries

    async def scrape_everything(self, categories: Optional[List[str]] = None) -> Dict[str, List[CountryScrapeSummary]]:
        """
        Run scrape_all for each category in order.

        Args:
            categories: Category keys (defaults to all)

        Returns:
            Dictionary mapping category to its per-country summaries
        """
        categories = [get_category(c).value for c in (categories or list_categories())]
        logger.info(f"Starting scrape for {len(categories)} categories: {categories}")

        results = {}
        for category in categories:
            try:
                results[category] = await self.scrape_all(category)
            except Exception as e:
                logger.error(f"{Colors.red('[ERR]')} {category} scrape failed: {e}")
                results[category] = []
        return results

    def get_results_summary(self) -> Dict:
        """
        Get summary of the bulk scrapes run so far.

        Returns:
            Summary dictionary with totals
        """
        return {
            'categories': len(self.results),
            'total_items': sum(s.count for summaries in self.results.values() for s in summaries),
            'by_category': {
                category: [s.to_dict() for s in summaries]
                for category, summaries in self.results.items()
            },
        }

    async def close(self):
        if self._owns_crawler:
            await self.crawler.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


# Convenience functions for standalone usage

async def scrape_country(category: str, country_code: str, db_session, upsert: bool = False) -> List[ExtractedRecord]:
    """
    Scrape one country for a category and store the results.

    Args:
        category: Category key (e.g., 'visa')
        country_code: ISO country code, any case
        db_session: Database session
        upsert: Update matching rows instead of appending

    Returns:
        Extracted records
    """
    async with ScraperManager(SQLAlchemyGateway(db_session, upsert=upsert)) as manager:
        return await manager.scrape_country(category, country_code)


async def scrape_all(category: str, db_session, upsert: bool = False) -> List[CountryScrapeSummary]:
    """
    Scrape every known country for a category.

    Returns:
        Per-country summaries
    """
    async with ScraperManager(SQLAlchemyGateway(db_session, upsert=upsert)) as manager:
        return await manager.scrape_all(category)
