"""
NhsJobsAdapter - source adapter for the NHS Jobs England XML API.

One HTTP request per uncached search. There is no detail endpoint, so
get_by_id falls back through paged search, keyword search and the cache.
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional

import httpx

from healthjobs.config.settings import Settings, settings as default_settings
from healthjobs.core.cache import ResponseCache
from healthjobs.core.errors import MalformedResponse, UpstreamUnavailable
from healthjobs.core.models import Listing, NhsVacancy, SearchFilters, SourceResult
from healthjobs.core.normalizer import convert_nhs_vacancy
from healthjobs.adapters.nhs_jobs.config import (
    CACHE_SOURCE,
    FEATURED_SORT,
    QUERY_FIELDS,
    SOURCE_NAME,
)
from healthjobs.adapters.nhs_jobs.parsing import parse_search_response

logger = logging.getLogger(__name__)


class NhsJobsAdapter:
    """
    NHS Jobs England adapter. Never raises from search(): network, status
    and XML failures come back as a degraded SourceResult.
    """

    name = SOURCE_NAME
    id_prefix = None

    def __init__(
        self,
        cache: ResponseCache,
        client: Optional[httpx.AsyncClient] = None,
        settings: Settings = default_settings,
    ):
        self.cache = cache
        self.settings = settings
        self._client = client
        self._owns_client = client is None

    def _client_or_default(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.HTTP_TIMEOUT)
        return self._client

    async def close(self):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def build_query(self, filters: SearchFilters) -> Dict[str, str]:
        """Query-string parameters for the set filter fields only."""
        values = {
            "keyword": filters.keyword,
            "location": filters.location,
            "distance": filters.distance,
            "band": filters.band_filter,
            "contract_type": filters.contract_type,
            "page": filters.page,
            "sort": filters.sort,
        }
        return {
            QUERY_FIELDS[name]: str(value)
            for name, value in values.items()
            if value not in (None, "", 0)
        }

    async def _fetch(self, params: Dict[str, str]) -> SourceResult:
        try:
            response = await self._client_or_default().get(
                self.settings.NHS_JOBS_API_URL,
                params=params,
                headers={"User-Agent": self.settings.NHS_JOBS_USER_AGENT},
            )
        except httpx.TimeoutException as e:
            raise UpstreamUnavailable(f"{self.name} request timed out") from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"{self.name} request failed: {e}") from e

        if not response.is_success:
            raise UpstreamUnavailable(
                f"{self.name} API error: {response.status_code} {response.reason_phrase}"
            )
        return parse_search_response(response.text)

    async def search(self, filters: SearchFilters) -> SourceResult:
        params = self.build_query(filters)
        cache_key = self.cache.make_key(CACHE_SOURCE, params)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"{self.name} cache hit: {cache_key}")
            return cached

        try:
            result = await self._fetch(params)
        except (UpstreamUnavailable, MalformedResponse) as e:
            logger.error(f"{self.name} search failed: {e}")
            return SourceResult.degraded(f"{self.name} temporarily unavailable")

        logger.info(f"{self.name}: {len(result.vacancies)} vacancies (page {filters.page})")
        self.cache.set(cache_key, result)
        return result

    # --- Detail lookup strategies, tried in order ---

    async def _scan_pages(self, job_id: str) -> Optional[NhsVacancy]:
        for page in range(1, self.settings.NHS_LOOKUP_MAX_PAGES + 1):
            result = await self.search(SearchFilters(page=page))
            for vacancy in result.vacancies:
                if vacancy.id == job_id:
                    return vacancy
            if not result.vacancies:
                break
        return None

    async def _search_by_keyword(self, job_id: str) -> Optional[NhsVacancy]:
        result = await self.search(SearchFilters(keyword=job_id))
        for vacancy in result.vacancies:
            if vacancy.id == job_id:
                return vacancy
            if vacancy.reference == job_id:
                # Callers look the listing up again by the id they asked for
                return replace(vacancy, id=job_id)
        return None

    def _scan_cache(self, job_id: str) -> Optional[NhsVacancy]:
        for cached in self.cache.valid_items(CACHE_SOURCE):
            for vacancy in getattr(cached, "vacancies", []):
                if vacancy.id == job_id:
                    return vacancy
        return None

    async def get_by_id(self, job_id: str) -> Optional[NhsVacancy]:
        vacancy = (
            await self._scan_pages(job_id)
            or await self._search_by_keyword(job_id)
            or self._scan_cache(job_id)
        )
        if vacancy is None:
            logger.warning(f"{self.name}: job {job_id} not found after all lookup strategies")
        return vacancy

    async def get_featured(self, limit: int) -> List[NhsVacancy]:
        result = await self.search(SearchFilters(sort=FEATURED_SORT, page=1))
        return result.vacancies[:limit]

    def normalize(self, record: NhsVacancy) -> Listing:
        return convert_nhs_vacancy(record, source=self.name)
