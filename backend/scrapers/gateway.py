"""
Persistence gateway used by the scrape manager.

The scraping core only needs three operations from storage: insert a
record, append a scrape log entry and list the known country codes.
SQLAlchemyGateway implements them on top of the api.database models.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from .base import ExtractedRecord, ScrapeLogEntry

logger = logging.getLogger(__name__)


class PersistenceGateway(ABC):
    """Storage operations consumed by the scraping core."""

    @abstractmethod
    def insert_record(self, record: ExtractedRecord) -> None:
        pass

    @abstractmethod
    def append_scrape_log(self, entry: ScrapeLogEntry) -> None:
        pass

    @abstractmethod
    def list_country_codes(self) -> List[str]:
        pass

    def flush(self) -> None:
        """Make pending record writes durable. Called once per scraped country."""


class SQLAlchemyGateway(PersistenceGateway):
    """
    Gateway over a SQLAlchemy session.

    Records are appended by default, so re-scraping a country adds rows
    next to the previous ones. With ``upsert=True`` a row with the same
    (country_code, source_url, title) is updated in place instead.
    """

    def __init__(self, db_session, upsert: bool = False):
        self.db = db_session
        self.upsert = upsert
        self._pending = 0

    def insert_record(self, record: ExtractedRecord) -> None:
        # Import here to avoid circular imports
        from api.database import CATEGORY_COLUMNS, INFO_MODELS

        kind = record.kind.value
        model = INFO_MODELS[kind]
        values = {
            'country_code': record.country_code,
            CATEGORY_COLUMNS[kind]: record.category,
            'title': record.title,
            'description': record.description,
            'source_url': record.source_url,
            'source_name': record.source_name,
            'language': record.language,
        }
        values.update(record.fields)

        existing = None
        if self.upsert:
            # Newest row wins when append mode left several behind
            existing = self.db.query(model).filter_by(
                country_code=record.country_code,
                source_url=record.source_url,
                title=record.title,
            ).order_by(model.id.desc()).first()

        if existing is not None:
            for column, value in values.items():
                setattr(existing, column, value)
        else:
            self.db.add(model(**values))
            if self.upsert:
                # Sessions don't autoflush; later lookups in this batch must see the row
                self.db.flush()
        self._pending += 1

    def append_scrape_log(self, entry: ScrapeLogEntry) -> None:
        """Committed right away so the attempt survives a failed record batch."""
        from api.database import ScrapeLog

        self.db.add(ScrapeLog(
            source_name=entry.source_name,
            source_url=entry.source_url,
            status=entry.status,
            items_scraped=entry.items_scraped,
            error_message=entry.error_message,
            started_at=entry.started_at,
            completed_at=entry.completed_at,
        ))
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def list_country_codes(self) -> List[str]:
        from api.database import Country

        return [code for (code,) in self.db.query(Country.code).order_by(Country.code).all()]

    def flush(self) -> None:
        if not self._pending:
            return
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        finally:
            self._pending = 0
        logger.debug("Committed pending rows")
