"""
Persisted job store collaborator.

The aggregation engine treats the store as ground truth and merges live
source data on top of it. Production wires a database-backed implementation
of JobStore; InMemoryJobStore is the reference implementation used by the
CLI and the tests.
"""

import itertools
import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Protocol

from healthjobs.core.models import Listing, SearchFilters
from healthjobs.core.normalizer import parse_date

logger = logging.getLogger(__name__)

STORE_SOURCE = "Database"
STORE_RESULT_LIMIT = 50


class JobStore(Protocol):
    async def get_jobs(self, filters: SearchFilters) -> List[Listing]: ...

    async def search_jobs(self, text: str, filters: SearchFilters) -> List[Listing]: ...

    async def create_job(self, data: Mapping[str, Any]) -> Listing: ...

    async def get_featured_jobs(self, limit: int = 10) -> List[Listing]: ...


@dataclass
class _StoredJob:
    listing: Listing
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    sequence: int = 0


class InMemoryJobStore:
    """
    Dict-backed JobStore. Only active rows are returned, newest first,
    capped at STORE_RESULT_LIMIT rows per query.
    """

    def __init__(self, limit: int = STORE_RESULT_LIMIT):
        self.limit = limit
        self._rows: Dict[str, _StoredJob] = {}
        self._sequence = itertools.count()

    async def create_job(self, data: Mapping[str, Any]) -> Listing:
        job_id = str(data.get("id") or uuid.uuid4())
        listing = Listing(
            id=job_id,
            external_id=str(data.get("external_id") or ""),
            title=str(data.get("title") or ""),
            employer=str(data.get("employer") or ""),
            location=str(data.get("location") or ""),
            source=STORE_SOURCE,
            url=str(data.get("url") or ""),
            band=str(data.get("band") or ""),
            salary_min=data.get("salary_min"),
            salary_max=data.get("salary_max"),
            description=str(data.get("description") or ""),
            closing_date=parse_date(data.get("closing_date")),
            visa_sponsorship=bool(data.get("visa_sponsorship", False)),
            featured=bool(data.get("featured", False)),
            reference=str(data.get("reference") or ""),
            contract_type=str(data.get("contract_type") or ""),
        )
        self._rows[job_id] = _StoredJob(
            listing=listing,
            is_active=bool(data.get("is_active", True)),
            sequence=next(self._sequence),
        )
        logger.debug(f"Stored job {job_id}: {listing.title}")
        return replace(listing)

    def _active(self) -> List[_StoredJob]:
        rows = [row for row in self._rows.values() if row.is_active]
        return sorted(rows, key=lambda row: (row.created_at, row.sequence), reverse=True)

    async def get_jobs(self, filters: Optional[SearchFilters] = None) -> List[Listing]:
        filters = filters or SearchFilters()
        band = filters.band_filter
        location = (filters.location or "").lower()

        results = []
        for row in self._active():
            job = row.listing
            if band and job.band != band:
                continue
            if location and location not in job.location.lower():
                continue
            if filters.visa_sponsorship and not job.visa_sponsorship:
                continue
            results.append(replace(job))
        return results[: self.limit]

    async def search_jobs(
        self, text: str, filters: Optional[SearchFilters] = None
    ) -> List[Listing]:
        needle = text.lower()
        band = filters.band_filter if filters else None

        results = []
        for row in self._active():
            job = row.listing
            haystacks = (job.title, job.description, job.employer)
            if not any(needle in value.lower() for value in haystacks):
                continue
            if band and job.band != band:
                continue
            results.append(replace(job))
        return results[: self.limit]

    async def get_featured_jobs(self, limit: int = 10) -> List[Listing]:
        featured = [replace(row.listing) for row in self._active() if row.listing.featured]
        return featured[:limit]
