"""
Tests for database models.
"""

import pytest
from sqlalchemy.exc import IntegrityError


class TestCountryModel:
    """Test the Country model and seeding."""

    def test_create_country(self, db_session):
        """Test creating a country."""
        from api.database import Country

        country = Country(code="JP", name="Japan", region="Asia")
        db_session.add(country)
        db_session.commit()

        assert country.id is not None
        assert country.created_at is not None

    def test_country_code_unique(self, db_session, sample_country):
        """Country codes cannot be duplicated."""
        from api.database import Country

        db_session.add(Country(code="FR", name="France again"))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_seed_countries_is_idempotent(self, db_session):
        """Seeding twice only inserts the reference list once."""
        from api.database import COUNTRIES, Country, seed_countries

        assert seed_countries(db_session) == len(COUNTRIES)
        assert seed_countries(db_session) == 0
        assert db_session.query(Country).count() == len(COUNTRIES)

    def test_init_db_on_memory_engine(self):
        """init_db creates tables and seeds countries on any bind."""
        from sqlalchemy import create_engine, inspect
        from sqlalchemy.orm import sessionmaker
        from sqlalchemy.pool import StaticPool
        from api.database import Country, init_db

        engine = create_engine("sqlite:///:memory:", poolclass=StaticPool)
        init_db(bind=engine)

        assert "scrape_logs" in inspect(engine).get_table_names()
        session = sessionmaker(bind=engine)()
        try:
            assert session.query(Country).filter_by(code="FR").one().name == "France"
        finally:
            session.close()


class TestInfoModels:
    """Test the category info models."""

    def test_create_visa_info(self, db_session, sample_country):
        """Visa rows keep their label in visa_type."""
        from api.database import VisaInfo

        info = VisaInfo(
            country_code="FR",
            visa_type="student",
            title="Student Visa",
            requirements='["Passport"]',
        )
        db_session.add(info)
        db_session.commit()

        assert info.id is not None
        assert info.language == "en"
        assert info.updated_at is not None

    def test_job_work_permit_tri_state(self, db_session, sample_country):
        """work_permit_required stores True, False and unknown."""
        from api.database import JobInfo

        for value in (True, False, None):
            db_session.add(JobInfo(country_code="FR", category="general", title=f"Job {value}", work_permit_required=value))
        db_session.commit()

        stored = {row.title: row.work_permit_required for row in db_session.query(JobInfo).all()}
        assert stored == {"Job True": True, "Job False": False, "Job None": None}

    def test_title_required(self, db_session, sample_country):
        """Rows cannot be stored without a title."""
        from api.database import BankingInfo

        db_session.add(BankingInfo(country_code="FR", category="accounts", title=None))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_category_columns_exist(self):
        """Every category maps to a real label column."""
        from api.database import CATEGORY_COLUMNS, INFO_MODELS

        assert set(CATEGORY_COLUMNS) == set(INFO_MODELS)
        for category, model in INFO_MODELS.items():
            assert CATEGORY_COLUMNS[category] in model.__table__.columns


class TestScrapeLogModel:
    """Test the ScrapeLog model."""

    def test_create_scrape_log(self, db_session):
        from api.database import ScrapeLog

        log = ScrapeLog(
            source_name="Example",
            source_url="https://example.com",
            status="error",
            error_message="Scraping not allowed by robots.txt: https://example.com",
        )
        db_session.add(log)
        db_session.commit()

        assert log.items_scraped == 0
        assert log.started_at is not None
        assert log.completed_at is None
