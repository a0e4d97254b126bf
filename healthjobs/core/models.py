from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional

ALL_BANDS = {"", "all", "all-bands"}


@dataclass
class Listing:
    """
    Canonical Listing model every source is converted into.
    """

    id: str
    external_id: str
    title: str
    employer: str
    location: str
    source: str
    url: str = ""
    band: str = ""
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    description: str = ""
    closing_date: Optional[datetime] = None
    post_date: Optional[datetime] = None
    visa_sponsorship: bool = False
    featured: bool = False
    reference: str = ""
    contract_type: str = ""


@dataclass
class SearchFilters:
    """
    Query accepted by the pipeline, the store and every adapter.
    """

    keyword: Optional[str] = None
    location: Optional[str] = None
    band: Optional[str] = None
    visa_sponsorship: bool = False
    page: int = 1
    distance: Optional[int] = None
    contract_type: Optional[str] = None
    sort: Optional[str] = None
    employer: Optional[str] = None

    @property
    def band_filter(self) -> Optional[str]:
        """The band to filter on, or None when every band is wanted."""
        if self.band is None or self.band.strip().lower() in ALL_BANDS:
            return None
        return self.band


@dataclass
class SourceResult:
    """
    What an adapter's search returns: raw records plus paging totals.
    A failing source returns a degraded result with `error` set.
    """

    total_pages: int = 0
    total_results: int = 0
    vacancies: List[Any] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def degraded(cls, reason: str) -> "SourceResult":
        return cls(total_pages=0, total_results=0, vacancies=[], error=reason)


# --- Raw source records, kept exactly as extracted ---


@dataclass
class NhsVacancy:
    """One vacancyDetails node from the NHS Jobs XML API."""

    id: str = ""
    title: str = ""
    employer: str = ""
    description: str = ""
    close_date: str = ""
    post_date: str = ""
    locations: List[str] = field(default_factory=list)
    reference: str = ""
    salary: str = ""
    type: str = ""
    url: str = ""


@dataclass
class HealthJobsUkVacancy:
    """One li.hj-job card (or detail page) from HealthJobsUK."""

    id: str = ""
    title: str = ""
    employer: str = ""
    location: str = ""
    salary: str = ""
    grade: str = ""
    speciality: str = ""
    url: str = ""
    description: str = ""
    close_date: str = ""


@dataclass
class ScotNhsVacancy:
    """One job card (or detail page) from NHS Scotland."""

    id: str = ""
    title: str = ""
    employer: str = ""
    description: str = ""
    close_date: str = ""
    post_date: str = ""
    location: str = ""
    reference: str = ""
    salary: str = ""
    band: str = ""
    job_family: str = ""
    employment_type: str = ""
    hours_per_week: str = ""
    department: str = ""
    url: str = ""
