"""
Information Endpoints
Per-category read/scrape routes, country lookups and the scrape log.
"""

from collections import Counter
from typing import Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from api.config import settings
from api.database import (
    CATEGORY_COLUMNS,
    INFO_MODELS,
    Country,
    HealthcareInfo,
    HousingInfo,
    JobInfo,
    ScrapeLog,
    VisaInfo,
    get_db,
)
from scrapers.gateway import SQLAlchemyGateway
from scrapers.manager import ScraperManager
from scrapers.sites import get_default_emergency_numbers
from scrapers.utils.normalizers import deserialize_field, normalize_country_code
import logging

logger = logging.getLogger(__name__)

# Columns stored as JSON text, decoded on the way out
JSON_COLUMNS = {
    'visa': ('requirements',),
    'job': ('job_search_tips', 'popular_sectors', 'job_portals'),
    'housing': ('required_documents', 'tips', 'rental_platforms'),
    'healthcare': ('insurance_requirements', 'emergency_numbers', 'useful_links'),
    'banking': ('account_requirements', 'recommended_banks', 'tips'),
}

CATEGORY_DESCRIPTIONS = {
    'visa': 'Visa requirements and procedures by country',
    'job': 'Job market information for foreigners',
    'housing': 'Housing/rental information for foreigners',
    'healthcare': 'Healthcare system information',
    'banking': 'Banking and financial services for expats',
}

CATEGORY_NAMES = {
    'visa': 'visa',
    'job': 'job market',
    'housing': 'housing',
    'healthcare': 'healthcare',
    'banking': 'banking',
}


def decode_row(category: str, data: dict) -> dict:
    """Decode the JSON text columns of a category row/record dict."""
    for column in JSON_COLUMNS[category]:
        if column in data:
            data[column] = deserialize_field(data[column])
    return data


def row_to_dict(category: str, row) -> dict:
    data = {column.name: getattr(row, column.name) for column in row.__table__.columns}
    return decode_row(category, data)


def country_to_dict(country: Optional[Country]) -> Optional[dict]:
    if country is None:
        return None
    return {column.name: getattr(country, column.name) for column in country.__table__.columns}


def get_country(db: Session, code: str) -> Optional[Country]:
    return db.query(Country).filter(Country.code == normalize_country_code(code)).first()


def build_category_router(category: str, extend: Optional[Callable[[APIRouter], None]] = None) -> APIRouter:
    """
    Build the standard routes for one information category.

    ``extend`` registers category-specific routes before the
    ``/{country_code}`` catch-all so they are matched first.
    """
    model = INFO_MODELS[category]
    label_column = getattr(model, CATEGORY_COLUMNS[category])
    router = APIRouter(prefix=f"/{category}", tags=[category.capitalize()])

    @router.get("")
    async def list_entries(
        country: Optional[str] = Query(None, description="Filter by country code"),
        label: Optional[str] = Query(None, alias="category", description="Filter by category label"),
        language: Optional[str] = Query(None, description="Filter by language"),
        db: Session = Depends(get_db),
    ):
        """List entries, newest first"""
        query = db.query(model)
        if country:
            query = query.filter(model.country_code == normalize_country_code(country))
        if label:
            query = query.filter(label_column == label.lower())
        if language:
            query = query.filter(model.language == language.lower())
        rows = query.order_by(model.updated_at.desc(), model.id.desc()).all()
        data = [row_to_dict(category, r) for r in rows]
        return {"count": len(data), "data": data}

    @router.get("/countries")
    async def list_countries(db: Session = Depends(get_db)):
        """Countries with their number of entries for this category"""
        rows = (
            db.query(Country, func.count(model.id))
            .outerjoin(model, model.country_code == Country.code)
            .group_by(Country.id)
            .order_by(Country.name)
            .all()
        )
        data = [
            {
                "code": country.code,
                "name": country.name,
                "name_fr": country.name_fr,
                "region": country.region,
                f"{category}_entries": count,
            }
            for country, count in rows
        ]
        return {"count": len(data), "data": data}

    @router.get("/categories")
    async def list_labels(db: Session = Depends(get_db)):
        """Category labels with their entry counts"""
        rows = (
            db.query(label_column, func.count(model.id).label("count"))
            .group_by(label_column)
            .order_by(func.count(model.id).desc())
            .all()
        )
        return {"data": [{"category": name, "count": count} for name, count in rows]}

    @router.post("/scrape/{country_code}")
    async def scrape_country(country_code: str, db: Session = Depends(get_db)):
        """Trigger scraping of one country"""
        code = normalize_country_code(country_code)
        gateway = SQLAlchemyGateway(db, upsert=settings.scraper_upsert_records)
        try:
            async with ScraperManager(gateway) as manager:
                records = await manager.scrape_country(category, code)
        except Exception as e:
            logger.error(f"Scraping {category} for {code} failed: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to scrape {CATEGORY_NAMES[category]} information")
        return {
            "message": f"Scraped {CATEGORY_NAMES[category]} information for {code}",
            "itemsScraped": len(records),
            "data": [decode_row(category, r.to_dict()) for r in records],
        }

    @router.post("/scrape-all")
    async def scrape_all(db: Session = Depends(get_db)):
        """Trigger scraping of every known country"""
        gateway = SQLAlchemyGateway(db, upsert=settings.scraper_upsert_records)
        try:
            async with ScraperManager(gateway) as manager:
                summaries = await manager.scrape_all(category)
        except Exception as e:
            logger.error(f"Bulk {category} scrape failed: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to scrape {CATEGORY_NAMES[category]} information")
        return {
            "message": f"Scraped {CATEGORY_NAMES[category]} information for {len(summaries)} countries",
            "itemsScraped": sum(s.count for s in summaries),
            "results": [s.to_dict() for s in summaries],
        }

    if extend:
        extend(router)

    @router.get("/{country_code}")
    async def get_by_country(
        country_code: str,
        label: Optional[str] = Query(None, alias="category", description="Filter by category label"),
        db: Session = Depends(get_db),
    ):
        """All entries for one country"""
        code = normalize_country_code(country_code)
        query = db.query(model).filter(model.country_code == code)
        if label:
            query = query.filter(label_column == label.lower())
        rows = query.order_by(label_column, model.updated_at.desc()).all()
        if not rows:
            raise HTTPException(
                status_code=404,
                detail=f"No {CATEGORY_NAMES[category]} information found for {code}",
            )
        data = [row_to_dict(category, r) for r in rows]
        return {"country": country_to_dict(get_country(db, code)), "count": len(data), "data": data}

    return router


# ============================================================
# CATEGORY-SPECIFIC ROUTES
# ============================================================

def _visa_routes(router: APIRouter):
    @router.get("/types")
    async def list_visa_types(db: Session = Depends(get_db)):
        """Visa types with their entry counts"""
        rows = (
            db.query(VisaInfo.visa_type, func.count(VisaInfo.id))
            .group_by(VisaInfo.visa_type)
            .order_by(func.count(VisaInfo.id).desc())
            .all()
        )
        return {"data": [{"visa_type": name, "count": count} for name, count in rows]}

    @router.get("/{country_code}/{visa_type}")
    async def get_by_country_and_type(country_code: str, visa_type: str, db: Session = Depends(get_db)):
        code = normalize_country_code(country_code)
        rows = (
            db.query(VisaInfo)
            .filter(VisaInfo.country_code == code, VisaInfo.visa_type == visa_type.lower())
            .order_by(VisaInfo.updated_at.desc())
            .all()
        )
        if not rows:
            raise HTTPException(status_code=404, detail=f"No {visa_type.lower()} visa information found for {code}")
        data = [row_to_dict('visa', r) for r in rows]
        return {"count": len(data), "data": data}


def _job_routes(router: APIRouter):
    @router.get("/sectors")
    async def list_sectors(db: Session = Depends(get_db)):
        """How many entries mention each sector"""
        counts = Counter()
        rows = db.query(JobInfo.popular_sectors).filter(JobInfo.popular_sectors.isnot(None)).all()
        for (sectors,) in rows:
            counts.update(deserialize_field(sectors) or [])
        return {"data": [{"name": name, "count": count} for name, count in counts.most_common()]}


def _housing_routes(router: APIRouter):
    @router.get("/cities")
    async def list_cities(
        country: Optional[str] = Query(None, description="Filter by country code"),
        db: Session = Depends(get_db),
    ):
        """Cities mentioned in housing entries"""
        query = (
            db.query(HousingInfo.city, HousingInfo.country_code, func.count(HousingInfo.id))
            .filter(HousingInfo.city.isnot(None))
        )
        if country:
            query = query.filter(HousingInfo.country_code == normalize_country_code(country))
        rows = (
            query.group_by(HousingInfo.city, HousingInfo.country_code)
            .order_by(func.count(HousingInfo.id).desc())
            .all()
        )
        data = [{"city": city, "country_code": code, "entries": count} for city, code, count in rows]
        return {"count": len(data), "data": data}

    @router.get("/{country_code}/{city}")
    async def get_by_city(country_code: str, city: str, db: Session = Depends(get_db)):
        code = normalize_country_code(country_code)
        rows = (
            db.query(HousingInfo)
            .filter(HousingInfo.country_code == code, func.lower(HousingInfo.city) == city.lower())
            .order_by(HousingInfo.updated_at.desc())
            .all()
        )
        if not rows:
            raise HTTPException(status_code=404, detail=f"No housing information found for {city} ({code})")
        data = [row_to_dict('housing', r) for r in rows]
        return {"count": len(data), "data": data}


def _healthcare_routes(router: APIRouter):
    @router.get("/emergency/{country_code}")
    async def get_emergency_numbers(country_code: str, db: Session = Depends(get_db)):
        """Stored emergency numbers, falling back to the built-in table"""
        code = normalize_country_code(country_code)
        row = (
            db.query(HealthcareInfo.emergency_numbers)
            .filter(HealthcareInfo.country_code == code, HealthcareInfo.emergency_numbers.isnot(None))
            .first()
        )
        numbers = deserialize_field(row[0]) if row else get_default_emergency_numbers(code)
        if not numbers:
            raise HTTPException(status_code=404, detail=f"No emergency numbers found for {code}")
        return {"countryCode": code, "emergency_numbers": numbers}


visa_router = build_category_router('visa', _visa_routes)
job_router = build_category_router('job', _job_routes)
housing_router = build_category_router('housing', _housing_routes)
healthcare_router = build_category_router('healthcare', _healthcare_routes)
banking_router = build_category_router('banking')

CATEGORY_ROUTERS = [visa_router, job_router, housing_router, healthcare_router, banking_router]


# ============================================================
# COUNTRIES
# ============================================================

countries_router = APIRouter(prefix="/countries", tags=["Countries"])


@countries_router.get("")
async def list_all_countries(
    region: Optional[str] = Query(None, description="Filter by region"),
    db: Session = Depends(get_db),
):
    query = db.query(Country)
    if region:
        query = query.filter(Country.region == region)
    data = [country_to_dict(c) for c in query.order_by(Country.name).all()]
    return {"count": len(data), "data": data}


@countries_router.get("/regions")
async def list_regions(db: Session = Depends(get_db)):
    rows = (
        db.query(Country.region, func.count(Country.id))
        .filter(Country.region.isnot(None))
        .group_by(Country.region)
        .order_by(Country.region)
        .all()
    )
    return {"data": [{"region": region, "country_count": count} for region, count in rows]}


@countries_router.get("/{code}")
async def get_country_detail(code: str, db: Session = Depends(get_db)):
    """Country with the amount of information available per category"""
    country = get_country(db, code)
    if country is None:
        raise HTTPException(status_code=404, detail=f"Country not found: {normalize_country_code(code)}")

    available = {
        category: db.query(func.count(model.id)).filter(model.country_code == country.code).scalar()
        for category, model in INFO_MODELS.items()
    }
    data = country_to_dict(country)
    data["available_info"] = available
    data["endpoints"] = {category: f"/{category}/{country.code}" for category in INFO_MODELS}
    return data


@countries_router.get("/{code}/summary")
async def get_country_summary(code: str, db: Session = Depends(get_db)):
    """Latest three entries per category"""
    country = get_country(db, code)
    if country is None:
        raise HTTPException(status_code=404, detail=f"Country not found: {normalize_country_code(code)}")

    summary = {}
    for category, model in INFO_MODELS.items():
        rows = (
            db.query(model)
            .filter(model.country_code == country.code)
            .order_by(model.updated_at.desc(), model.id.desc())
            .limit(3)
            .all()
        )
        summary[category] = [
            {
                "title": r.title,
                "category": getattr(r, CATEGORY_COLUMNS[category]),
                "description": r.description,
                **({"city": r.city} if category == 'housing' else {}),
                **({"emergency_numbers": deserialize_field(r.emergency_numbers)} if category == 'healthcare' else {}),
            }
            for r in rows
        ]
    return {"country": country_to_dict(country), "summary": summary}


# ============================================================
# SCRAPE LOG
# ============================================================

logs_router = APIRouter(tags=["Scrape Logs"])


@logs_router.get("/scrape-logs")
async def list_scrape_logs(
    status: Optional[str] = Query(None, description="Filter by status (success, error)"),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    """Latest source fetch attempts"""
    query = db.query(ScrapeLog)
    if status:
        query = query.filter(ScrapeLog.status == status)
    rows = query.order_by(ScrapeLog.started_at.desc(), ScrapeLog.id.desc()).limit(limit).all()
    data = [
        {column.name: getattr(r, column.name) for column in r.__table__.columns}
        for r in rows
    ]
    return {"count": len(data), "data": data}
