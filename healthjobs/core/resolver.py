"""
DetailResolver - finds one listing by id across the store and the sources.
"""

import logging
from typing import List, Optional, Sequence

from healthjobs.core.errors import NotFound
from healthjobs.core.models import Listing, SearchFilters
from healthjobs.core.rate_limit import RateLimiter
from healthjobs.core.store import JobStore
from healthjobs.adapters.base import SourceAdapter

logger = logging.getLogger(__name__)


class DetailResolver:
    """
    Store first, then the adapter whose id prefix the id carries. Ids with
    no known prefix go to the untagged adapters, then to the prefixed ones
    in declared order. Every adapter call runs under the shared
    RateLimiter, since a scrape lookup opens a browser.
    """

    def __init__(
        self,
        store: JobStore,
        adapters: Sequence[SourceAdapter],
        limiter: RateLimiter,
    ):
        self.store = store
        self.adapters = list(adapters)
        self.limiter = limiter

    def candidates_for(self, job_id: str) -> List[SourceAdapter]:
        tagged = [a for a in self.adapters if a.id_prefix and job_id.startswith(a.id_prefix)]
        if tagged:
            return tagged
        untagged = [a for a in self.adapters if not a.id_prefix]
        return untagged + [a for a in self.adapters if a.id_prefix]

    async def _from_store(self, job_id: str) -> Optional[Listing]:
        try:
            jobs = await self.store.get_jobs(SearchFilters())
        except Exception as e:
            logger.error(f"Store lookup failed for {job_id}: {e}")
            return None
        for job in jobs:
            if job.id == job_id or (job.external_id and job.external_id == job_id):
                return job
        return None

    async def _from_adapter(self, adapter: SourceAdapter, job_id: str) -> Optional[Listing]:
        try:
            async with self.limiter:
                record = await adapter.get_by_id(job_id)
            if record is None:
                return None
            listing = adapter.normalize(record)
        except Exception as e:
            logger.error(f"{adapter.name} lookup failed for {job_id}: {e}")
            return None
        listing.source = adapter.name
        return listing

    async def get_by_id(self, job_id: str) -> Optional[Listing]:
        job_id = (job_id or "").strip()
        if not job_id:
            return None

        listing = await self._from_store(job_id)
        if listing is not None:
            return listing

        for adapter in self.candidates_for(job_id):
            listing = await self._from_adapter(adapter, job_id)
            if listing is not None:
                logger.info(f"Resolved {job_id} from {adapter.name}")
                return listing

        logger.info(f"Job {job_id} not found in the store or any source")
        return None

    async def require(self, job_id: str) -> Listing:
        listing = await self.get_by_id(job_id)
        if listing is None:
            raise NotFound(f"Job {job_id} not found")
        return listing
