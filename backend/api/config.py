"""
Application Configuration
Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    database_url: str = "sqlite:///./data/casanova.db"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False

    # CORS Configuration
    cors_origins: List[str] = ["*"]

    # Scraper Configuration
    scraper_timeout: float = 30.0           # Per-request timeout (seconds)
    scraper_robots_timeout: float = 5.0     # robots.txt fetch timeout (seconds)
    scraper_rate_limit_seconds: float = 2.0  # Minimum gap between requests to one domain
    scraper_max_redirects: int = 5
    scraper_user_agent: str = (
        "CasaNova-Bot/1.0 (International Mobility Info Aggregator; contact@casanova.app)"
    )
    scraper_accept_language: str = "en-US,en;q=0.5,fr;q=0.3"
    # Update rows matching (country_code, source_url, title) instead of appending
    scraper_upsert_records: bool = False

    # Logging Configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Paths
    @property
    def log_dir(self) -> Path:
        """Get the log directory path."""
        return Path(__file__).parent.parent.parent / "logs"

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.log_dir / "backend.log"

    @property
    def data_dir(self) -> Path:
        """Get the data directory path."""
        return Path(__file__).parent.parent / "data"

    class Config:
        env_file = ".env" if Path(".env").exists() else None
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra environment variables


# Global settings instance
settings = Settings()
