from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """
    Configuration settings for the aggregation engine.
    """

    class Config:
        env_file = BASE_DIR / ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    # Browser settings
    HEADLESS: bool = True
    # Some sources serve broken certificate chains through corporate proxies.
    IGNORE_HTTPS_ERRORS: bool = True
    BROWSER_USER_AGENT: Optional[str] = None  # None = rotate with fake-useragent

    # Timeouts
    NAVIGATION_TIMEOUT: int = 60000  # ms
    SELECTOR_TIMEOUT: int = 20000  # ms
    CONSENT_SETTLE_MS: int = 2000
    HTTP_TIMEOUT: float = 30.0  # seconds

    # NHS Jobs XML API
    NHS_JOBS_API_URL: str = "https://www.jobs.nhs.uk/api/v1/search_xml"
    NHS_JOBS_USER_AGENT: str = "HealthHire Portal - Healthcare Career Platform"
    NHS_LOOKUP_MAX_PAGES: int = 10

    # Category crawl
    CRAWL_MAX_PAGES: int = 50  # per category

    # Response cache
    CACHE_TTL_SECONDS: float = 600.0
    CACHE_MAX_ENTRIES: int = 50

    # Aggregation
    MAX_CONCURRENT_DETAIL_LOOKUPS: int = 3
    SOURCE_DEADLINE: Optional[float] = None  # seconds, None = wait for every source
    DEDUPLICATE_ACROSS_SOURCES: bool = False
    FEATURED_PER_SOURCE: int = 3
    FEATURED_LIMIT: int = 9

    LOG_LEVEL: str = "INFO"


settings = Settings()
