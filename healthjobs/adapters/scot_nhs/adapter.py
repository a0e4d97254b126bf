"""
ScotNhsAdapter - source adapter for NHS Scotland.

Every listing sits on one page, so a search is a single navigation and one
extraction pass. The unfiltered extraction is cached; closed listings and
the keyword/location/employer filters are applied per call.
"""

import logging
from typing import List, Optional
from urllib.parse import quote

from healthjobs.browser.session import BrowserSession
from healthjobs.config.settings import Settings, settings as default_settings
from healthjobs.core.cache import ResponseCache
from healthjobs.core.errors import NavigationTimeout, UpstreamUnavailable
from healthjobs.core.models import Listing, ScotNhsVacancy, SearchFilters, SourceResult
from healthjobs.core.normalizer import convert_scot_nhs_vacancy
from healthjobs.adapters.base import PageFactory
from healthjobs.adapters.utils import by_salary_desc, filter_vacancies, is_closed
from healthjobs.adapters.scot_nhs.config import (
    CACHE_SOURCE,
    DETAIL_URL,
    ID_PREFIX,
    LISTING_URL,
    SOURCE_NAME,
)
from healthjobs.adapters.scot_nhs.extraction import extract_detail, strip_prefix, vacancy_from_card
from healthjobs.adapters.scot_nhs.selectors import (
    CARD_FIELDS,
    CARD_LINK_SELECTOR,
    DETAIL_READY_SELECTOR,
    JOB_CARD_SELECTOR,
)

logger = logging.getLogger(__name__)

LISTING_CACHE_PARAMS = {"page": "all-jobs"}


class ScotNhsAdapter:
    """
    Single-page adapter. search() never raises; a failed load yields a
    degraded result.
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

    async def _load_listing_page(self) -> List[ScotNhsVacancy]:
        cache_key = self.cache.make_key(CACHE_SOURCE, LISTING_CACHE_PARAMS)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"{self.name} cache hit: {len(cached)} jobs")
            return cached

        logger.info(f"Fetching {self.name} listings: {LISTING_URL}")
        async with self.page_factory() as driver:
            await driver.goto(LISTING_URL)
            if not await driver.wait_for(JOB_CARD_SELECTOR):
                logger.warning(f"{self.name}: no job cards visible")
            cards = await driver.extract_cards(
                JOB_CARD_SELECTOR, CARD_FIELDS, CARD_LINK_SELECTOR
            )

        vacancies = [vacancy_from_card(card) for card in cards]
        vacancies = [v for v in vacancies if v.title]
        if vacancies:
            self.cache.set(cache_key, vacancies)
        return vacancies

    async def search(self, filters: SearchFilters) -> SourceResult:
        try:
            vacancies = await self._load_listing_page()
        except (UpstreamUnavailable, NavigationTimeout) as e:
            logger.error(f"{self.name} search failed: {e}")
            return SourceResult.degraded(f"{self.name} temporarily unavailable")
        except Exception as e:
            logger.error(f"{self.name} listing extraction failed: {e}")
            return SourceResult.degraded(f"{self.name} temporarily unavailable")

        open_jobs = [v for v in vacancies if not is_closed(v.close_date)]
        matched = filter_vacancies(
            open_jobs,
            filters,
            title=lambda v: v.title,
            location=lambda v: v.location,
            employer=lambda v: v.employer,
        )
        logger.info(f"{self.name}: {len(matched)} of {len(vacancies)} jobs match")
        return SourceResult(total_pages=1, total_results=len(matched), vacancies=matched)

    async def get_by_id(self, job_id: str) -> Optional[ScotNhsVacancy]:
        # Ids without a JobId fall back to the reference or the title
        url = DETAIL_URL.format(job_id=quote(strip_prefix(job_id).strip(), safe=""))
        try:
            async with self.page_factory() as driver:
                await driver.goto(url)
                if not await driver.wait_for(DETAIL_READY_SELECTOR):
                    logger.warning(f"{self.name}: detail page for {job_id} never rendered")
                    return None
                return await extract_detail(driver, job_id)
        except (UpstreamUnavailable, NavigationTimeout) as e:
            logger.error(f"{self.name}: failed to fetch job {job_id}: {e}")
            return None
        except Exception as e:
            logger.error(f"{self.name}: error reading job {job_id}: {e}")
            return None

    async def get_featured(self, limit: int) -> List[ScotNhsVacancy]:
        result = await self.search(SearchFilters())
        return by_salary_desc(result.vacancies, salary=lambda v: v.salary)[:limit]

    def normalize(self, record: ScotNhsVacancy) -> Listing:
        return convert_scot_nhs_vacancy(record, source=self.name)
