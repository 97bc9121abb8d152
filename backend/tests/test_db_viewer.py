"""
Tests for database viewer endpoints.
"""

import pytest
from fastapi import status


class TestDatabaseViewer:
    """Test the database viewer endpoints."""

    def test_get_tables(self, client):
        """Test getting list of tables."""
        response = client.get("/db/tables")

        assert response.status_code == status.HTTP_200_OK
        names = {table["name"] for table in response.json()["tables"]}
        assert {"countries", "visa_info", "job_info", "scrape_logs"} <= names

    def test_get_table_data_valid(self, client, sample_job_info):
        """Test getting data from a valid table."""
        response = client.get("/db/table/job_info")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["table"] == "job_info"
        assert data["total_count"] == 1
        assert "country_code" in data["columns"]
        assert data["data"][0]["title"] == "Work Permit Requirements"

    def test_get_table_data_pagination(self, client, seeded_db):
        response = client.get("/db/table/countries?page=2&page_size=15")

        data = response.json()
        assert data["total_pages"] == 2
        assert len(data["data"]) == 5

    def test_get_table_data_country_filter(self, client, seeded_db):
        data = client.get("/db/table/countries?country=fr").json()

        assert data["total_count"] == 1
        assert data["data"][0]["code"] == "FR"

    def test_country_filter_on_table_without_country_column(self, client):
        response = client.get("/db/table/scrape_logs?country=FR")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_tables_report_row_counts(self, client, sample_job_info):
        tables = {t["name"]: t["row_count"] for t in client.get("/db/tables").json()["tables"]}

        assert tables["job_info"] == 1
        assert tables["visa_info"] == 0

    def test_get_table_data_invalid(self, client):
        """Test getting data from an invalid table."""
        response = client.get("/db/table/nonexistent_table")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Invalid table name" in response.json()["detail"]

    def test_get_table_data_sql_injection_attempt(self, client):
        """Test that SQL injection attempts are blocked."""
        response = client.get("/db/table/countries; DROP TABLE countries;--")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_get_db_stats(self, client, sample_country):
        """Test getting row counts."""
        response = client.get("/db/stats")

        assert response.status_code == status.HTTP_200_OK
        stats = response.json()
        assert stats["countries"] == 1
        assert stats["scrape_logs"] == 0

    def test_get_logs(self, client):
        """Log endpoint answers whether or not the file exists yet."""
        response = client.get("/db/logs?lines=5")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert "logs" in data
        assert len(data["logs"]) <= 5
