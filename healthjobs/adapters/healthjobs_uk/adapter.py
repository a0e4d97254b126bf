"""
HealthJobsUkAdapter - source adapter for HealthJobsUK.

There is no API: every uncached search opens a browser and runs the full
category crawl (crawl.py). Keyword and location filters apply client-side
to the cached crawl, so one crawl serves every query until it expires.
"""

import logging
from typing import List, Optional

from healthjobs.browser.session import BrowserSession
from healthjobs.config.settings import Settings, settings as default_settings
from healthjobs.core.cache import ResponseCache
from healthjobs.core.errors import NavigationTimeout, UpstreamUnavailable
from healthjobs.core.models import HealthJobsUkVacancy, Listing, SearchFilters, SourceResult
from healthjobs.core.normalizer import convert_healthjobs_uk_vacancy
from healthjobs.adapters.base import PageFactory
from healthjobs.adapters.utils import by_salary_desc, filter_vacancies
from healthjobs.adapters.healthjobs_uk.config import CACHE_SOURCE, ID_PREFIX, SOURCE_NAME
from healthjobs.adapters.healthjobs_uk.crawl import CategoryCrawl
from healthjobs.adapters.healthjobs_uk.extraction import extract_detail, url_from_external_id
from healthjobs.adapters.healthjobs_uk.selectors import DETAIL_TITLE_SELECTORS

logger = logging.getLogger(__name__)

# The crawl ignores filters, so every query shares one cache entry
CRAWL_CACHE_PARAMS = {"crawl": "all-categories"}


class HealthJobsUkAdapter:
    """
    Category-crawl adapter. search() never raises; a browser that cannot
    launch or a home page that never loads yields a degraded result.
    """

    name = SOURCE_NAME
    id_prefix = ID_PREFIX

    def __init__(
        self,
        cache: ResponseCache,
        page_factory: Optional[PageFactory] = None,
        settings: Settings = default_settings,
    ):
        self.cache = cache
        self.settings = settings
        self.page_factory = page_factory or (lambda: BrowserSession(settings))

    async def _crawl(self) -> List[HealthJobsUkVacancy]:
        cache_key = self.cache.make_key(CACHE_SOURCE, CRAWL_CACHE_PARAMS)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"{self.name} cache hit: {len(cached)} jobs")
            return cached

        async with self.page_factory() as driver:
            vacancies = await CategoryCrawl(driver, self.settings).run()

        # An empty crawl is most likely a layout change or a blocked session
        if vacancies:
            self.cache.set(cache_key, vacancies)
        return vacancies

    async def search(self, filters: SearchFilters) -> SourceResult:
        try:
            vacancies = await self._crawl()
        except (UpstreamUnavailable, NavigationTimeout) as e:
            logger.error(f"{self.name} search failed: {e}")
            return SourceResult.degraded(f"{self.name} temporarily unavailable")
        except Exception as e:
            logger.error(f"{self.name} crawl aborted: {e}")
            return SourceResult.degraded(f"{self.name} temporarily unavailable")

        matched = filter_vacancies(
            vacancies,
            filters,
            title=lambda v: v.title,
            location=lambda v: v.location,
            employer=lambda v: v.employer,
        )
        logger.info(f"{self.name}: {len(matched)} of {len(vacancies)} jobs match")
        return SourceResult(total_pages=1, total_results=len(matched), vacancies=matched)

    async def get_by_id(self, job_id: str) -> Optional[HealthJobsUkVacancy]:
        url = url_from_external_id(job_id)
        try:
            async with self.page_factory() as driver:
                await driver.goto(url)
                await driver.wait_for(", ".join(DETAIL_TITLE_SELECTORS))
                return await extract_detail(driver, url, job_id)
        except (UpstreamUnavailable, NavigationTimeout) as e:
            logger.error(f"{self.name}: failed to load job {job_id}: {e}")
            return None
        except Exception as e:
            logger.error(f"{self.name}: error reading job {job_id}: {e}")
            return None

    async def get_featured(self, limit: int) -> List[HealthJobsUkVacancy]:
        result = await self.search(SearchFilters())
        return by_salary_desc(result.vacancies, salary=lambda v: v.salary)[:limit]

    def normalize(self, record: HealthJobsUkVacancy) -> Listing:
        return convert_healthjobs_uk_vacancy(record, source=self.name)
