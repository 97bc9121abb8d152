"""
Base classes for the category scraper system.

This module defines the data structures shared by all categories and the
generic scraping engine. The five categories (visa, job, housing,
healthcare, banking) share one control flow and differ only in the
CategoryConfig they pass in: relevance keywords, category rules and
field extractors.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone
import logging

from bs4 import Tag

from .crawlers.static import StaticCrawler
from .utils.document import PageDocument
from .utils.extractors import contains_any, infer_label
from .utils.normalizers import clean_text, normalize_country_code, serialize_field

logger = logging.getLogger(__name__)

# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for colorized logging."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    CYAN = '\033[96m'
    GRAY = '\033[90m'

    @staticmethod
    def green(text):
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def yellow(text):
        return f"{Colors.YELLOW}{text}{Colors.RESET}"

    @staticmethod
    def red(text):
        return f"{Colors.RED}{text}{Colors.RESET}"

    @staticmethod
    def cyan(text):
        return f"{Colors.CYAN}{text}{Colors.RESET}"

    @staticmethod
    def gray(text):
        return f"{Colors.GRAY}{text}{Colors.RESET}"

    @staticmethod
    def bold(text):
        return f"{Colors.BOLD}{text}{Colors.RESET}"


class Category(str, Enum):
    """Information domains scraped and served."""
    VISA = "visa"
    JOB = "job"
    HOUSING = "housing"
    HEALTHCARE = "healthcare"
    BANKING = "banking"


# Broad "content block" heuristic: source sites share no common structure
DEFAULT_BLOCK_SELECTOR = 'article, .content-section, section, .card, .info-block'
DEFAULT_HEADING_SELECTOR = 'h1, h2, h3, .title'
LIST_ITEM_SELECTOR = 'ul li, ol li'


@dataclass(frozen=True)
class Source:
    """A configured page believed to hold information for one country/category."""
    name: str
    url: str
    type: str


@dataclass
class BlockContext:
    """Everything a field extractor may look at for one content block."""
    document: PageDocument
    block: Tag
    heading: str
    text: str                   # Full raw text of the block
    list_items: List[str]       # Page-wide list items
    links: List[Dict[str, Optional[str]]]  # Links inside the block


FieldExtractor = Callable[[BlockContext], Any]


@dataclass
class CategoryConfig:
    """Everything that distinguishes one category scraper from another."""
    category: Category
    label: str                                  # Used in fallback titles ("Job Market")
    category_rules: Sequence[Tuple[Sequence[str], str]]
    field_extractors: Dict[str, FieldExtractor]
    relevance_keywords: Optional[Sequence[str]] = None  # None: every heading is relevant
    block_selector: str = DEFAULT_BLOCK_SELECTOR
    heading_selector: str = DEFAULT_HEADING_SELECTOR
    fallback_fields: Optional[Callable[[str], Dict[str, Any]]] = None

    def is_relevant(self, text: Optional[str]) -> bool:
        if not text:
            return False
        if self.relevance_keywords is None:
            return True
        return contains_any(text, self.relevance_keywords)


@dataclass
class ExtractedRecord:
    """
    One normalized piece of information for a country/category.

    ``fields`` holds the category-specific structured values; multi-valued
    ones are already serialized to JSON text (or None when empty).
    """
    kind: Category
    country_code: str
    category: str
    title: str
    description: Optional[str]
    source_url: str
    source_name: str
    language: str = 'en'
    fields: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'country_code': self.country_code,
            'category': self.category,
            'title': self.title,
            'description': self.description,
        }
        data.update(self.fields)
        data.update({
            'source_url': self.source_url,
            'source_name': self.source_name,
            'language': self.language,
        })
        return data


@dataclass
class ScrapeLogEntry:
    """Outcome of one (source, attempt). Written once."""
    source_name: str
    source_url: str
    status: str                 # success | error
    items_scraped: int = 0
    error_message: Optional[str] = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None

    @property
    def success(self) -> bool:
        return self.status == 'success'

    def to_dict(self) -> Dict:
        return {
            'source_name': self.source_name,
            'source_url': self.source_url,
            'status': self.status,
            'items_scraped': self.items_scraped,
            'error_message': self.error_message,
            'started_at': self.started_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
        }


@dataclass
class CountryScrapeSummary:
    """Per-country result of a bulk scrape."""
    country: str
    count: int

    def to_dict(self) -> Dict:
        return {'country': self.country, 'count': self.count}


class CategoryScraper:
    """
    Generic engine turning one fetched page into records for one category.

    Flow for a page:
    1. Select every content block
    2. Keep blocks whose heading passes the category relevance test
    3. Build one record per kept block (description, label, structured fields)
    4. If no block was kept, build a single fallback record from the page
       title/description

    This class never writes to storage; the manager persists what it returns.
    """

    def __init__(self, config: CategoryConfig, crawler: StaticCrawler):
        self.config = config
        self.crawler = crawler
        self.logger = logging.getLogger(f"scraper.{config.category.value}")

    async def scrape_source(self, source: Source, country_code: str) -> List[ExtractedRecord]:
        """
        Fetch a source page and extract its records.

        Raises:
            FetchError: robots denial, transport or parse failure
        """
        result = await self.crawler.fetch(source.url)
        return self.extract(result.document, source, country_code, result.final_url)

    def extract(
        self,
        document: PageDocument,
        source: Source,
        country_code: str,
        page_url: Optional[str] = None,
    ) -> List[ExtractedRecord]:
        """Extract records from an already parsed page."""
        country_code = normalize_country_code(country_code)
        page_url = page_url or source.url
        records = []

        list_items = None
        for block in document.select(self.config.block_selector):
            heading = document.first_text(self.config.heading_selector, block)
            if not self.config.is_relevant(heading):
                continue

            if list_items is None:
                list_items = document.list_texts(LIST_ITEM_SELECTOR)

            context = BlockContext(
                document=document,
                block=block,
                heading=heading,
                text=document.text(block),
                list_items=list_items,
                links=document.links(block),
            )
            records.append(self._build_record(context, source, country_code, page_url))

        if not records:
            self.logger.debug(f"No relevant blocks on {page_url}, using fallback record")
            records.append(self._build_fallback(document, source, country_code, page_url))

        return records

    def infer_category(self, heading: Optional[str]) -> str:
        return infer_label(heading, self.config.category_rules)

    def _build_record(self, context: BlockContext, source: Source, country_code: str, page_url: str) -> ExtractedRecord:
        fields = {
            name: _store_value(extractor(context))
            for name, extractor in self.config.field_extractors.items()
        }

        return ExtractedRecord(
            kind=self.config.category,
            country_code=country_code,
            category=self.infer_category(context.heading),
            title=context.heading,
            description=clean_text(context.document.raw_first_text('p', context.block)),
            source_url=page_url,
            source_name=source.name,
            fields=fields,
        )

    def _build_fallback(self, document: PageDocument, source: Source, country_code: str, page_url: str) -> ExtractedRecord:
        title = (
            document.first_text('h1')
            or document.title()
            or f"{self.config.label} Information for {country_code}"
        )
        description = document.meta_description() or document.raw_first_text('p')

        fields = {name: None for name in self.config.field_extractors}
        if self.config.fallback_fields:
            for name, value in self.config.fallback_fields(country_code).items():
                fields[name] = _store_value(value)

        return ExtractedRecord(
            kind=self.config.category,
            country_code=country_code,
            category='general',
            title=title,
            description=clean_text(description),
            source_url=page_url,
            source_name=source.name,
            fields=fields,
        )


def _store_value(value: Any) -> Any:
    """Serialize lists/dicts to JSON text; scalars pass through."""
    if isinstance(value, (list, tuple, dict)):
        return serialize_field(value)
    return value
