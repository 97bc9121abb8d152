from sqlalchemy import create_engine, Column, Integer, String, DateTime, Boolean, Text, ForeignKey, Index
from sqlalchemy.orm import declarative_base, declared_attr, sessionmaker, relationship
from datetime import datetime, timezone
from pathlib import Path


def utc_now():
    """Return current UTC time (timezone-aware). Replaces deprecated datetime.utcnow()."""
    return datetime.now(timezone.utc)

Base = declarative_base()


# Reference country list seeded on first start
COUNTRIES = [
    {"code": "FR", "name": "France", "name_fr": "France", "region": "Europe"},
    {"code": "DE", "name": "Germany", "name_fr": "Allemagne", "region": "Europe"},
    {"code": "ES", "name": "Spain", "name_fr": "Espagne", "region": "Europe"},
    {"code": "IT", "name": "Italy", "name_fr": "Italie", "region": "Europe"},
    {"code": "PT", "name": "Portugal", "name_fr": "Portugal", "region": "Europe"},
    {"code": "NL", "name": "Netherlands", "name_fr": "Pays-Bas", "region": "Europe"},
    {"code": "BE", "name": "Belgium", "name_fr": "Belgique", "region": "Europe"},
    {"code": "CH", "name": "Switzerland", "name_fr": "Suisse", "region": "Europe"},
    {"code": "GB", "name": "United Kingdom", "name_fr": "Royaume-Uni", "region": "Europe"},
    {"code": "IE", "name": "Ireland", "name_fr": "Irlande", "region": "Europe"},
    {"code": "US", "name": "United States", "name_fr": "Etats-Unis", "region": "North America"},
    {"code": "CA", "name": "Canada", "name_fr": "Canada", "region": "North America"},
    {"code": "AU", "name": "Australia", "name_fr": "Australie", "region": "Oceania"},
    {"code": "NZ", "name": "New Zealand", "name_fr": "Nouvelle-Zelande", "region": "Oceania"},
    {"code": "JP", "name": "Japan", "name_fr": "Japon", "region": "Asia"},
    {"code": "SG", "name": "Singapore", "name_fr": "Singapour", "region": "Asia"},
    {"code": "AE", "name": "United Arab Emirates", "name_fr": "Emirats Arabes Unis", "region": "Middle East"},
    {"code": "BR", "name": "Brazil", "name_fr": "Bresil", "region": "South America"},
    {"code": "MX", "name": "Mexico", "name_fr": "Mexique", "region": "North America"},
    {"code": "MA", "name": "Morocco", "name_fr": "Maroc", "region": "Africa"},
]


class Country(Base):
    __tablename__ = 'countries'

    id = Column(Integer, primary_key=True)
    code = Column(String, unique=True, nullable=False)  # ISO code, upper case
    name = Column(String, nullable=False)
    name_fr = Column(String)
    region = Column(String, index=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)


class InfoMixin:
    """Columns shared by every category info table."""

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    source_url = Column(String)
    source_name = Column(String)
    language = Column(String, nullable=False, default='en')
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    @declared_attr
    def country_code(cls):
        return Column(String, ForeignKey('countries.code'), nullable=False, index=True)


class VisaInfo(InfoMixin, Base):
    __tablename__ = 'visa_info'

    visa_type = Column(String, nullable=False, index=True)  # tourist, work, student, ...
    requirements = Column(Text)  # JSON array
    processing_time = Column(String)
    cost = Column(String)
    validity = Column(String)


class JobInfo(InfoMixin, Base):
    __tablename__ = 'job_info'

    category = Column(String, index=True)
    work_permit_required = Column(Boolean)  # True / False / unknown (NULL)
    average_salary = Column(String)
    job_search_tips = Column(Text)  # JSON array
    popular_sectors = Column(Text)  # JSON array
    job_portals = Column(Text)  # JSON array of {name, url}


class HousingInfo(InfoMixin, Base):
    __tablename__ = 'housing_info'

    city = Column(String, index=True)
    category = Column(String, index=True)
    average_rent = Column(String)
    required_documents = Column(Text)  # JSON array
    tips = Column(Text)  # JSON array
    rental_platforms = Column(Text)  # JSON array of {name, url}


class HealthcareInfo(InfoMixin, Base):
    __tablename__ = 'healthcare_info'

    category = Column(String, index=True)
    public_system_info = Column(Text)
    insurance_requirements = Column(Text)  # JSON array
    emergency_numbers = Column(Text)  # JSON array of snippets, or JSON object of defaults
    useful_links = Column(Text)  # JSON array of {name, url}


class BankingInfo(InfoMixin, Base):
    __tablename__ = 'banking_info'

    category = Column(String, index=True)
    account_requirements = Column(Text)  # JSON array
    recommended_banks = Column(Text)  # JSON array
    tips = Column(Text)  # JSON array


class ScrapeLog(Base):
    __tablename__ = 'scrape_logs'

    id = Column(Integer, primary_key=True)
    source_name = Column(String, nullable=False)
    source_url = Column(String, nullable=False)
    status = Column(String, nullable=False, index=True)  # success | error
    items_scraped = Column(Integer, nullable=False, default=0)
    error_message = Column(Text)
    started_at = Column(DateTime, default=utc_now)
    completed_at = Column(DateTime)

    __table_args__ = (
        Index('ix_scrape_logs_started_at', 'started_at'),
    )


# Table model per scrape category
INFO_MODELS = {
    'visa': VisaInfo,
    'job': JobInfo,
    'housing': HousingInfo,
    'healthcare': HealthcareInfo,
    'banking': BankingInfo,
}

# Column holding the category label per table
CATEGORY_COLUMNS = {
    'visa': 'visa_type',
    'job': 'category',
    'housing': 'category',
    'healthcare': 'category',
    'banking': 'category',
}


# Database setup - import settings for database URL
from api.config import settings

engine = create_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,    # Verify connections before use (handles stale connections)
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def seed_countries(db) -> int:
    """Insert missing reference countries. Returns the number of rows added."""
    existing = {code for (code,) in db.query(Country.code).all()}
    added = 0
    for data in COUNTRIES:
        if data['code'] not in existing:
            db.add(Country(**data))
            added += 1
    if added:
        db.commit()
    return added


def init_db(bind=None):
    bind = bind or engine
    if bind.url.drivername.startswith('sqlite') and bind.url.database not in (None, '', ':memory:'):
        Path(bind.url.database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=bind)
    db = sessionmaker(bind=bind)()
    try:
        seed_countries(db)
    finally:
        db.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
