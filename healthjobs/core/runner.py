import logging
from typing import List, Optional, Sequence

from healthjobs.config.settings import Settings, settings as default_settings
from healthjobs.core.cache import ResponseCache
from healthjobs.core.models import Listing, SearchFilters
from healthjobs.core.pipeline import AggregationPipeline
from healthjobs.core.rate_limit import RateLimiter
from healthjobs.core.resolver import DetailResolver
from healthjobs.core.store import JobStore
from healthjobs.adapters.base import SourceAdapter
from healthjobs.adapters.healthjobs_uk.adapter import HealthJobsUkAdapter
from healthjobs.adapters.nhs_jobs.adapter import NhsJobsAdapter
from healthjobs.adapters.scot_nhs.adapter import ScotNhsAdapter

logger = logging.getLogger(__name__)


class JobAggregator:
    """
    Entry point for consumers: search, detail lookup and featured listings
    over the store plus every source.
    """

    def __init__(
        self,
        store: JobStore,
        adapters: Sequence[SourceAdapter],
        settings: Settings = default_settings,
    ):
        self.store = store
        self.adapters = list(adapters)
        self.settings = settings
        self.pipeline = AggregationPipeline(store, self.adapters, settings)
        self.resolver = DetailResolver(
            store, self.adapters, RateLimiter(settings.MAX_CONCURRENT_DETAIL_LOOKUPS)
        )

    @classmethod
    def create(cls, store: JobStore, settings: Settings = default_settings) -> "JobAggregator":
        """
        Wire one shared cache and the three sources, in merge order.
        """
        cache = ResponseCache(
            max_entries=settings.CACHE_MAX_ENTRIES, ttl=settings.CACHE_TTL_SECONDS
        )
        adapters = [
            NhsJobsAdapter(cache, settings=settings),
            ScotNhsAdapter(cache, settings=settings),
            HealthJobsUkAdapter(cache, settings=settings),
        ]
        logger.info(f"Aggregating from: {', '.join(a.name for a in adapters)}")
        return cls(store, adapters, settings)

    async def search(self, filters: Optional[SearchFilters] = None) -> List[Listing]:
        return await self.pipeline.search(filters or SearchFilters())

    async def get_by_id(self, job_id: str) -> Optional[Listing]:
        return await self.resolver.get_by_id(job_id)

    async def get_featured(self, limit: Optional[int] = None) -> List[Listing]:
        return await self.pipeline.get_featured(limit)

    async def close(self):
        for adapter in self.adapters:
            close = getattr(adapter, "close", None)
            if close is not None:
                await close()

    async def __aenter__(self) -> "JobAggregator":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
