"""
Configuration management using environment variables.
Handles all scraper and forecaster settings with proper validation and defaults.
"""

from typing import List, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings
from pathlib import Path


DEFAULT_PROXY_TRANSPORTS = [
    "https://api.allorigins.win/raw?url=",
    "https://corsproxy.io/?",
    "https://api.codetabs.com/v1/proxy?quest=",
    "https://thingproxy.freeboard.io/fetch/",
]


class ScraperConfig(BaseSettings):
    """
    Configuration class for scraper settings.
    Uses pydantic BaseSettings for environment variable management.
    """

    # MongoDB Configuration
    mongodb_url: str = Field(default="mongodb://localhost:27017", env="MONGODB_URL")
    mongodb_database: str = Field(default="anime_schedule", env="MONGODB_DATABASE")
    snapshot_collection: str = Field(default="scrapes", env="SNAPSHOT_COLLECTION")
    forecast_collection: str = Field(default="schedules", env="FORECAST_COLLECTION")

    # Source Configuration
    source_url: str = Field(default="https://aniwatch.com.cv/schedule/", env="SOURCE_URL")
    proxy_transports: List[str] = Field(
        default_factory=lambda: list(DEFAULT_PROXY_TRANSPORTS),
        env="PROXY_TRANSPORTS"
    )

    # Fetch Policy
    request_timeout: float = Field(default=15.0, env="REQUEST_TIMEOUT")
    max_retries: int = Field(default=3, env="MAX_RETRIES")
    retry_base_delay: float = Field(default=1.0, env="RETRY_BASE_DELAY")
    min_body_length: int = Field(default=1000, env="MIN_BODY_LENGTH")

    # Broadcast Calendar
    broadcast_timezone: str = Field(default="Asia/Tokyo", env="BROADCAST_TIMEZONE")
    timezone_label: str = Field(default="JST", env="TIMEZONE_LABEL")

    # Enrichment (MyAnimeList)
    mal_client_id: Optional[str] = Field(default=None, env="MAL_CLIENT_ID")
    mal_api_url: str = Field(default="https://api.myanimelist.net/v2/anime", env="MAL_API_URL")
    enable_enrichment: bool = Field(default=False, env="ENABLE_ENRICHMENT")
    enrichment_rate_limit: float = Field(default=2.0, env="ENRICHMENT_RATE_LIMIT")

    # Logging Configuration
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_format: str = Field(default="json", env="LOG_FORMAT")
    log_file: Optional[str] = Field(default="logs/scraper.log", env="LOG_FILE")

    # Development/Testing
    debug: bool = Field(default=False, env="DEBUG")

    @validator('proxy_transports')
    def validate_proxy_transports(cls, v):
        """Require at least one transport."""
        if not v:
            raise ValueError('proxy_transports must contain at least one transport prefix')
        return v

    @validator('request_timeout')
    def validate_timeout(cls, v):
        """Ensure timeout is reasonable."""
        if v < 1 or v > 120:
            raise ValueError('request_timeout must be between 1 and 120 seconds')
        return v

    @validator('max_retries')
    def validate_max_retries(cls, v):
        """Ensure retry count is reasonable."""
        if v < 1 or v > 10:
            raise ValueError('max_retries must be between 1 and 10')
        return v

    @validator('retry_base_delay')
    def validate_retry_base_delay(cls, v):
        if v < 0 or v > 60:
            raise ValueError('retry_base_delay must be between 0 and 60 seconds')
        return v

    @validator('min_body_length')
    def validate_min_body_length(cls, v):
        if v < 0:
            raise ValueError('min_body_length cannot be negative')
        return v

    @validator('enrichment_rate_limit')
    def validate_rate_limit(cls, v):
        """Ensure rate limit is reasonable."""
        if v < 0.1 or v > 10:
            raise ValueError('enrichment_rate_limit must be between 0.1 and 10')
        return v

    @validator('log_level')
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @validator('log_format')
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Ignore extra fields from .env

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None

    def enrichment_enabled(self) -> bool:
        """Enrichment needs both the switch and a MyAnimeList client id."""
        return self.enable_enrichment and bool(self.mal_client_id)

    def get_headers(self) -> dict:
        """Get default headers for schedule page requests."""
        return {
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }


# Global configuration instance
config = ScraperConfig()
