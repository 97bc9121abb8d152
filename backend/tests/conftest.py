"""
Pytest configuration and fixtures for CasaNova tests.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.database import Base, get_db, seed_countries
from api.main import app
from scrapers.base import ExtractedRecord, ScrapeLogEntry
from scrapers.gateway import PersistenceGateway


# Create an in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override the get_db dependency for testing."""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)

    # Use TestClient directly without context manager so startup does not touch the real database
    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def seeded_db(db_session):
    """Database session with the reference countries loaded."""
    seed_countries(db_session)
    return db_session


@pytest.fixture
def sample_country(db_session):
    """Create a sample country for testing."""
    from api.database import Country

    country = Country(code="FR", name="France", name_fr="France", region="Europe")
    db_session.add(country)
    db_session.commit()
    db_session.refresh(country)
    return country


@pytest.fixture
def sample_job_info(db_session, sample_country):
    """Create a sample job entry for testing."""
    from api.database import JobInfo

    info = JobInfo(
        country_code="FR",
        category="work_permit",
        title="Work Permit Requirements",
        description="EU citizens can work freely.",
        work_permit_required=False,
        popular_sectors='["technology", "tourism"]',
        job_portals='[{"name": "Pole Emploi jobs", "url": "https://example.com/jobs"}]',
        source_url="https://example.com/work",
        source_name="Example",
    )
    db_session.add(info)
    db_session.commit()
    db_session.refresh(info)
    return info


class InMemoryGateway(PersistenceGateway):
    """Gateway keeping everything in lists, for manager tests."""

    def __init__(self, country_codes=None):
        self.records: list = []
        self.logs: list = []
        self.flushes = 0
        self.country_codes = list(country_codes or [])

    def insert_record(self, record: ExtractedRecord) -> None:
        self.records.append(record)

    def append_scrape_log(self, entry: ScrapeLogEntry) -> None:
        self.logs.append(entry)

    def list_country_codes(self):
        return list(self.country_codes)

    def flush(self) -> None:
        self.flushes += 1


@pytest.fixture
def make_gateway():
    """Factory for in-memory gateways: make_gateway(country_codes=[...])."""
    return InMemoryGateway
