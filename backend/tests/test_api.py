"""
Tests for API endpoints.
"""

import pytest
from fastapi import status

from scrapers.base import Source
from scrapers.crawlers.static import FetchResult, StaticCrawler
from scrapers.utils.document import PageDocument


class TestRootEndpoint:
    """Test the root and health endpoints."""

    def test_root_returns_json(self, client):
        """Test that root endpoint lists the information endpoints."""
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["name"] == "CasaNova API"
        assert "version" in data
        for endpoint in ("/visa", "/job", "/housing", "/healthcare", "/banking", "/countries"):
            assert endpoint in data["endpoints"]

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "ok"


class TestCategoryEndpoints:
    """Test the routes shared by every category."""

    @pytest.mark.parametrize("category", ["visa", "job", "housing", "healthcare", "banking"])
    def test_list_empty(self, client, category):
        response = client.get(f"/{category}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"count": 0, "data": []}

    def test_list_decodes_json_columns(self, client, sample_job_info):
        """Multi-valued columns come back as lists, not JSON text."""
        response = client.get("/job")

        data = response.json()
        assert data["count"] == 1
        entry = data["data"][0]
        assert entry["popular_sectors"] == ["technology", "tourism"]
        assert entry["job_portals"][0]["url"] == "https://example.com/jobs"
        assert entry["work_permit_required"] is False
        assert entry["job_search_tips"] is None

    def test_list_filters(self, client, sample_job_info):
        assert client.get("/job?category=WORK_PERMIT").json()["count"] == 1
        assert client.get("/job?category=salary").json()["count"] == 0
        assert client.get("/job?country=fr").json()["count"] == 1
        assert client.get("/job?country=DE").json()["count"] == 0
        assert client.get("/job?language=en").json()["count"] == 1

    def test_get_by_country(self, client, sample_job_info):
        response = client.get("/job/fr")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["country"]["name"] == "France"
        assert data["count"] == 1
        assert data["data"][0]["title"] == "Work Permit Requirements"

    def test_get_by_country_not_found(self, client):
        response = client.get("/banking/DE")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert "DE" in response.json()["detail"]

    def test_countries_with_counts(self, client, sample_job_info):
        response = client.get("/job/countries")

        data = response.json()
        assert data["count"] == 1
        assert data["data"][0]["code"] == "FR"
        assert data["data"][0]["job_entries"] == 1

    def test_categories(self, client, sample_job_info):
        response = client.get("/job/categories")

        assert response.json()["data"] == [{"category": "work_permit", "count": 1}]


class TestCategorySpecificEndpoints:
    """Test the extra routes of visa, job, housing and healthcare."""

    def test_job_sectors(self, client, sample_job_info):
        response = client.get("/job/sectors")

        assert response.json()["data"] == [
            {"name": "technology", "count": 1},
            {"name": "tourism", "count": 1},
        ]

    def test_visa_types_and_lookup(self, client, db_session, sample_country):
        from api.database import VisaInfo

        db_session.add(VisaInfo(country_code="FR", visa_type="student", title="Student visa", requirements='["Passport"]'))
        db_session.commit()

        assert client.get("/visa/types").json()["data"] == [{"visa_type": "student", "count": 1}]

        response = client.get("/visa/fr/STUDENT")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"][0]["requirements"] == ["Passport"]

        assert client.get("/visa/FR/work").status_code == status.HTTP_404_NOT_FOUND

    def test_housing_cities_and_city_lookup(self, client, db_session, sample_country):
        from api.database import HousingInfo

        db_session.add(HousingInfo(country_code="FR", city="Paris", category="rental", title="Rent in Paris"))
        db_session.add(HousingInfo(country_code="FR", city=None, category="general", title="Housing"))
        db_session.commit()

        cities = client.get("/housing/cities").json()
        assert cities["data"] == [{"city": "Paris", "country_code": "FR", "entries": 1}]

        response = client.get("/housing/FR/paris")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["count"] == 1

    def test_emergency_numbers_from_database(self, client, db_session, sample_country):
        from api.database import HealthcareInfo

        db_session.add(HealthcareInfo(
            country_code="FR", category="emergency", title="Emergency care",
            emergency_numbers='["Emergency: 112"]',
        ))
        db_session.commit()

        response = client.get("/healthcare/emergency/fr")
        assert response.json() == {"countryCode": "FR", "emergency_numbers": ["Emergency: 112"]}

    def test_emergency_numbers_default_table(self, client):
        response = client.get("/healthcare/emergency/gb")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["emergency_numbers"] == {"emergency": "999", "nhs": "111"}

    def test_emergency_numbers_unknown_country(self, client):
        assert client.get("/healthcare/emergency/BR").status_code == status.HTTP_404_NOT_FOUND


JOB_PAGE = (
    "<section><h2>Work Permit Requirements</h2>"
    "<p>no work permit required for EU citizens</p></section>"
)


@pytest.fixture
def fake_web(monkeypatch):
    """One job source for FR, served without network access."""
    source = Source(name="Example Jobs", url="https://example.com/jobs", type="guide")
    monkeypatch.setattr(
        "scrapers.manager.get_sources",
        lambda category, country_code: [source] if country_code == "FR" else [],
    )

    async def fake_fetch(self, url, **kwargs):
        return FetchResult(document=PageDocument(JOB_PAGE), final_url=url, status_code=200, html=JOB_PAGE)

    monkeypatch.setattr(StaticCrawler, "fetch", fake_fetch)
    return source


class TestScrapeEndpoints:
    """Test triggering scrapes over HTTP."""

    def test_scrape_country_without_sources(self, client):
        response = client.post("/banking/scrape/ma")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "message": "Scraped banking information for MA",
            "itemsScraped": 0,
            "data": [],
        }

    def test_scrape_country_stores_records_and_logs(self, client, sample_country, fake_web):
        response = client.post("/job/scrape/fr")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Scraped job market information for FR"
        assert data["itemsScraped"] == 1
        assert data["data"][0]["category"] == "work_permit"
        assert data["data"][0]["work_permit_required"] is False

        stored = client.get("/job/FR").json()
        assert stored["count"] == 1

        logs = client.get("/scrape-logs").json()
        assert logs["count"] == 1
        assert logs["data"][0]["source_name"] == "Example Jobs"
        assert logs["data"][0]["status"] == "success"
        assert logs["data"][0]["items_scraped"] == 1

    def test_rescrape_appends_rows(self, client, sample_country, fake_web):
        client.post("/job/scrape/FR")
        client.post("/job/scrape/FR")

        assert client.get("/job/FR").json()["count"] == 2

    def test_scrape_all(self, client, sample_country, fake_web):
        response = client.post("/job/scrape-all")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["results"] == [{"country": "FR", "count": 1}]
        assert data["itemsScraped"] == 1

    def test_scrape_failure_returns_500(self, client, monkeypatch):
        from scrapers.manager import ScraperManager

        async def broken(self, category, country_code):
            raise RuntimeError("database is locked")

        monkeypatch.setattr(ScraperManager, "scrape_country", broken)
        response = client.post("/housing/scrape/FR")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"] == "Failed to scrape housing information"

    def test_scrape_logs_filter(self, client, db_session):
        from api.database import ScrapeLog

        db_session.add(ScrapeLog(source_name="A", source_url="https://a.example", status="success", items_scraped=2))
        db_session.add(ScrapeLog(source_name="B", source_url="https://b.example", status="error", error_message="boom"))
        db_session.commit()

        errors = client.get("/scrape-logs?status=error").json()
        assert errors["count"] == 1
        assert errors["data"][0]["error_message"] == "boom"


class TestCountriesEndpoint:
    """Test the countries endpoints."""

    def test_list_countries(self, client, seeded_db):
        data = client.get("/countries").json()

        assert data["count"] == 20
        assert client.get("/countries?region=Asia").json()["count"] == 2

    def test_regions(self, client, seeded_db):
        regions = {r["region"]: r["country_count"] for r in client.get("/countries/regions").json()["data"]}

        assert regions["Europe"] == 10
        assert regions["Oceania"] == 2

    def test_country_detail(self, client, sample_job_info):
        response = client.get("/countries/fr")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["code"] == "FR"
        assert data["available_info"] == {"visa": 0, "job": 1, "housing": 0, "healthcare": 0, "banking": 0}
        assert data["endpoints"]["job"] == "/job/FR"

    def test_country_not_found(self, client):
        assert client.get("/countries/XX").status_code == status.HTTP_404_NOT_FOUND
        assert client.get("/countries/XX/summary").status_code == status.HTTP_404_NOT_FOUND

    def test_country_summary(self, client, sample_job_info):
        data = client.get("/countries/FR/summary").json()

        assert data["country"]["code"] == "FR"
        assert data["summary"]["job"][0]["title"] == "Work Permit Requirements"
        assert data["summary"]["job"][0]["category"] == "work_permit"
        assert data["summary"]["visa"] == []
