from contextlib import asynccontextmanager
from datetime import datetime, timezone
import asyncio
import logging
import re

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from api.config import settings
from api.database import init_db, engine
from api import db_viewer, routes

API_VERSION = "1.0.0"


class ColorStripFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes so the log file stays readable."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

    def format(self, record):
        return self.ansi_escape.sub('', super().format(record))


class PollingEndpointFilter(logging.Filter):
    """Drops uvicorn access lines for endpoints the dashboard polls."""
    SUPPRESSED_ENDPOINTS = ('/db/logs', '/health')

    def filter(self, record):
        msg = record.getMessage()
        return not any(endpoint in msg for endpoint in self.SUPPRESSED_ENDPOINTS)


def setup_logging():
    """Colored console output, plain text in the log file."""
    settings.log_dir.mkdir(exist_ok=True)

    file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
    file_handler.setFormatter(ColorStripFormatter(settings.log_format))
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(settings.log_format))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        handlers=[file_handler, console_handler],
        force=True
    )
    logging.getLogger("uvicorn.access").addFilter(PollingEndpointFilter())


setup_logging()
logger = logging.getLogger(__name__)


async def dispose_engine(timeout: float = 2.0):
    """Close pooled connections without blocking shutdown."""
    loop = asyncio.get_running_loop()
    try:
        await asyncio.wait_for(loop.run_in_executor(None, engine.dispose), timeout=timeout)
        logger.info("Database connections closed")
    except asyncio.TimeoutError:
        logger.warning("Database cleanup timed out")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 60)
    logger.info(f"CasaNova API {API_VERSION} starting")
    logger.info("=" * 60)
    logger.info(f"Database: {settings.database_url}")
    logger.info(f"Per-domain request interval: {settings.scraper_rate_limit_seconds}s")
    init_db()
    logger.info("Database ready, reference countries seeded")

    yield

    logger.info("CasaNova API shutting down")
    await dispose_engine()


app = FastAPI(
    title="CasaNova API",
    description="Relocation information for people moving abroad",
    version=API_VERSION,
    lifespan=lifespan
)

for router in routes.CATEGORY_ROUTERS:
    app.include_router(router)
app.include_router(routes.countries_router)
app.include_router(routes.logs_router)
app.include_router(db_viewer.router)

# allow_credentials must stay False while allow_origins is ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    return Response(status_code=204)


@app.get("/")
async def root():
    """Entry point listing what the API serves"""
    return {
        "name": "CasaNova API",
        "version": API_VERSION,
        "description": "International mobility information aggregator",
        "endpoints": {
            **{f"/{category}": text for category, text in routes.CATEGORY_DESCRIPTIONS.items()},
            "/countries": "List of supported countries",
            "/scrape-logs": "History of source fetch attempts",
        },
    }


@app.get("/health")
async def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_config=None,
        timeout_graceful_shutdown=5.0,
    )
