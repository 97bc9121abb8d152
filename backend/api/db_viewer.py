"""
Database Viewer Endpoints
Read-only browsing of the relocation tables, the scrape history and the backend log.
"""

from typing import Optional, Set

from fastapi import APIRouter, Depends, Query, HTTPException
from sqlalchemy import inspect, text
from sqlalchemy.orm import Session

from api.config import settings
from api.database import get_db
from scrapers.utils.normalizers import normalize_country_code
import logging

router = APIRouter(prefix="/db", tags=["Database Viewer"])

logger = logging.getLogger(__name__)


def get_allowed_tables(db: Session) -> Set[str]:
    """Table names present in the live schema."""
    return set(inspect(db.get_bind()).get_table_names())


def validate_table_name(table_name: str, db: Session) -> str:
    """
    Only names found in the schema are ever interpolated into SQL.
    Raises a 400 for anything else.
    """
    allowed = get_allowed_tables(db)
    if table_name not in allowed:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid table name: '{table_name}'. Allowed tables: {sorted(allowed)}"
        )
    return table_name


def count_rows(db: Session, table_name: str) -> int:
    return db.execute(text(f"SELECT COUNT(*) FROM {table_name}")).scalar()


@router.get("/tables")
async def get_tables(db: Session = Depends(get_db)):
    """Tables with their columns and row counts"""
    inspector = inspect(db.get_bind())
    tables = []
    for table_name in sorted(inspector.get_table_names()):
        tables.append({
            "name": table_name,
            "row_count": count_rows(db, table_name),
            "columns": [
                {"name": col["name"], "type": str(col["type"])}
                for col in inspector.get_columns(table_name)
            ],
        })
    return {"tables": tables}


@router.get("/table/{table_name}")
async def get_table_data(
    table_name: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
    country: Optional[str] = Query(None, description="Only rows for this country code"),
    db: Session = Depends(get_db)
):
    """Rows of one table, newest first, optionally narrowed to a country"""
    table_name = validate_table_name(table_name, db)
    columns = [col["name"] for col in inspect(db.get_bind()).get_columns(table_name)]

    where = ""
    params = {}
    if country:
        # countries has `code`, the info tables `country_code`
        country_column = next((c for c in ("country_code", "code") if c in columns), None)
        if country_column is None:
            raise HTTPException(status_code=400, detail=f"Table '{table_name}' has no country column")
        where = f" WHERE {country_column} = :country"
        params["country"] = normalize_country_code(country)

    total_count = db.execute(text(f"SELECT COUNT(*) FROM {table_name}{where}"), params).scalar()
    order = " ORDER BY id DESC" if "id" in columns else ""
    result = db.execute(
        text(f"SELECT * FROM {table_name}{where}{order} LIMIT :limit OFFSET :offset"),
        {**params, "limit": page_size, "offset": (page - 1) * page_size}
    )
    rows = [dict(row._mapping) for row in result]

    return {
        "table": table_name,
        "total_count": total_count,
        "page": page,
        "page_size": page_size,
        "total_pages": (total_count + page_size - 1) // page_size,
        "columns": columns,
        "data": rows
    }


@router.get("/stats")
async def get_db_stats(db: Session = Depends(get_db)):
    """Row count per table"""
    return {table_name: count_rows(db, table_name) for table_name in sorted(get_allowed_tables(db))}


@router.get("/logs")
async def get_logs(
    lines: int = Query(100, ge=1, le=1000, description="Number of lines to retrieve"),
):
    """Tail of the backend log file"""
    log_file = settings.log_file
    if not log_file.exists():
        return {"logs": [], "total_lines": 0, "file_exists": False}

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.read().splitlines()
    except OSError as e:
        logger.warning(f"Could not read {log_file}: {e}")
        raise HTTPException(status_code=500, detail=f"Error reading logs: {e}")

    return {
        "logs": all_lines[-lines:],
        "total_lines": len(all_lines),
        "file_exists": True,
    }
