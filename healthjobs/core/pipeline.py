"""
AggregationPipeline - merges the job store with every source adapter.

    store.get_jobs ─┐
    store.search_jobs (keyword only) ─┤
    adapter.search × N (concurrent) ──┴─> normalize -> merge -> filter -> sort

A source that raises, times out or returns a degraded result contributes
nothing; only a store that fails twice surfaces to the caller.
"""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Iterable, List, Optional, Sequence

from healthjobs.config.settings import Settings, settings as default_settings
from healthjobs.core.errors import StoreUnavailable
from healthjobs.core.models import Listing, SearchFilters, SourceResult
from healthjobs.core.normalizer import mentions_visa
from healthjobs.core.store import JobStore
from healthjobs.adapters.base import SourceAdapter

logger = logging.getLogger(__name__)

SEARCH_SOURCE = "Database Search"


class AggregationPipeline:
    def __init__(
        self,
        store: JobStore,
        adapters: Sequence[SourceAdapter],
        settings: Settings = default_settings,
    ):
        self.store = store
        self.adapters = list(adapters)
        self.settings = settings

    async def search(self, filters: SearchFilters) -> List[Listing]:
        """
        Aggregated, filtered and sorted listings for one query.

        Raises:
            StoreUnavailable: the aggregation failed and the fallback store
                fetch failed too.
        """
        try:
            return await self._aggregate(filters)
        except Exception as e:
            logger.error(f"Aggregation failed, falling back to stored jobs: {e}")

        try:
            return await self.store.get_jobs(self._store_filters(filters))
        except Exception as e:
            raise StoreUnavailable(f"Job store unavailable: {e}") from e

    @staticmethod
    def _store_filters(filters: SearchFilters) -> SearchFilters:
        if filters.band_filter is None and filters.band is not None:
            return replace(filters, band=None)
        return filters

    async def _aggregate(self, filters: SearchFilters) -> List[Listing]:
        store_filters = self._store_filters(filters)
        listings = list(await self.store.get_jobs(store_filters))

        if filters.keyword:
            listings.extend(await self._keyword_matches(filters.keyword, store_filters, listings))

        results = await self._fan_out(filters)
        for adapter, result in zip(self.adapters, results):
            listings.extend(self._normalize_all(adapter, result.vacancies))

        if self.settings.DEDUPLICATE_ACROSS_SOURCES:
            listings = deduplicate(listings)

        filtered = apply_filters(listings, filters)
        logger.info(
            f"Aggregated {len(filtered)} of {len(listings)} listings "
            f"from the store and {len(self.adapters)} sources"
        )
        return sort_listings(filtered)

    async def _keyword_matches(
        self, keyword: str, filters: SearchFilters, existing: List[Listing]
    ) -> List[Listing]:
        seen = {job.id for job in existing} | {job.external_id for job in existing if job.external_id}
        try:
            matches = await self.store.search_jobs(keyword, filters)
        except Exception as e:
            logger.error(f"Store keyword search failed for '{keyword}': {e}")
            return []

        added = []
        for job in matches:
            if job.id in seen or (job.external_id and job.external_id in seen):
                continue
            seen.add(job.id)
            added.append(replace(job, source=SEARCH_SOURCE))
        return added

    async def _search_one(self, adapter: SourceAdapter, filters: SearchFilters) -> SourceResult:
        try:
            if self.settings.SOURCE_DEADLINE is None:
                return await adapter.search(filters)
            return await asyncio.wait_for(
                adapter.search(filters), timeout=self.settings.SOURCE_DEADLINE
            )
        except asyncio.TimeoutError:
            logger.error(f"{adapter.name} exceeded {self.settings.SOURCE_DEADLINE}s deadline")
            return SourceResult.degraded(f"{adapter.name} timed out")
        except Exception as e:
            logger.error(f"{adapter.name} search raised: {e}")
            return SourceResult.degraded(f"{adapter.name} temporarily unavailable")

    async def _fan_out(self, filters: SearchFilters) -> List[SourceResult]:
        return await asyncio.gather(
            *(self._search_one(adapter, filters) for adapter in self.adapters)
        )

    def _normalize_all(self, adapter: SourceAdapter, records: Iterable[Any]) -> List[Listing]:
        listings = []
        for record in records:
            try:
                listing = adapter.normalize(record)
            except Exception as e:
                logger.warning(f"{adapter.name}: skipping unconvertible record: {e}")
                continue
            listing.source = adapter.name
            listings.append(listing)
        return listings

    async def _featured_one(self, adapter: SourceAdapter) -> List[Any]:
        try:
            return await adapter.get_featured(self.settings.FEATURED_PER_SOURCE)
        except Exception as e:
            logger.error(f"{adapter.name} featured lookup raised: {e}")
            return []

    async def get_featured(self, limit: Optional[int] = None) -> List[Listing]:
        """
        Highest-paid listings across every source, marked featured.
        Falls back to the store's featured rows when no source has any.
        """
        limit = self.settings.FEATURED_LIMIT if limit is None else limit
        batches = await asyncio.gather(*(self._featured_one(a) for a in self.adapters))

        featured: List[Listing] = []
        for adapter, records in zip(self.adapters, batches):
            for listing in self._normalize_all(adapter, records):
                listing.featured = True
                featured.append(listing)

        if featured:
            featured.sort(key=lambda job: job.salary_min or 0, reverse=True)
            return featured[:limit]

        logger.info("No featured listings from any source, using stored featured jobs")
        try:
            return await self.store.get_featured_jobs(limit)
        except Exception as e:
            raise StoreUnavailable(f"Job store unavailable: {e}") from e


def _dedup_key(job: Listing):
    return (job.title.strip().lower(), job.employer.strip().lower(), job.location.strip().lower())


def deduplicate(listings: Iterable[Listing]) -> List[Listing]:
    """Keep the first listing for each title/employer/location triple."""
    seen = set()
    unique = []
    for job in listings:
        key = _dedup_key(job)
        if key in seen:
            continue
        seen.add(key)
        unique.append(job)
    return unique


def apply_filters(listings: Iterable[Listing], filters: SearchFilters) -> List[Listing]:
    band = filters.band_filter
    location = (filters.location or "").lower()

    results = []
    for job in listings:
        if band and job.band != band:
            continue
        if location and location not in (job.location or "").lower():
            continue
        if filters.visa_sponsorship and not mentions_visa(job):
            continue
        results.append(job)
    return results


def _salary_ordered(group: List[Listing]) -> List[Listing]:
    # Listings without a salary hold their slot; the rest are reordered
    # among the remaining slots, highest first, ties in original order.
    slots = [i for i, job in enumerate(group) if job.salary_min is not None]
    ranked = sorted((group[i] for i in slots), key=lambda job: job.salary_min, reverse=True)
    ordered = list(group)
    for slot, job in zip(slots, ranked):
        ordered[slot] = job
    return ordered


def sort_listings(listings: Iterable[Listing]) -> List[Listing]:
    """
    Featured listings first. Within each group, listings with a minimum
    salary are ordered highest first; everything else keeps its place.
    """
    listings = list(listings)
    featured = [job for job in listings if job.featured]
    regular = [job for job in listings if not job.featured]
    return _salary_ordered(featured) + _salary_ordered(regular)
