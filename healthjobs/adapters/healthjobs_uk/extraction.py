"""
Field extraction for HealthJobsUK result cards and job detail pages.
"""

import logging
from typing import Dict, Optional
from urllib.parse import urlparse

from healthjobs.browser.driver import PageDriver
from healthjobs.core.models import HealthJobsUkVacancy
from healthjobs.adapters.utils import absolute_url, safe_extract, strip_label
from healthjobs.adapters.healthjobs_uk.config import BASE_URL, ID_PREFIX
from healthjobs.adapters.healthjobs_uk.selectors import (
    DETAIL_DESCRIPTION_SELECTORS,
    DETAIL_EMPLOYER_SELECTORS,
    DETAIL_GRADE_SELECTORS,
    DETAIL_LOCATION_SELECTORS,
    DETAIL_SALARY_SELECTORS,
    DETAIL_SPECIALITY_SELECTORS,
    DETAIL_TITLE_SELECTORS,
)

logger = logging.getLogger(__name__)


def external_id_from_url(url: str) -> str:
    """hjuk_ + the listing path, reversible by url_from_external_id."""
    if not url:
        return ""
    parsed = urlparse(url)
    path = parsed.path.lstrip("/")
    if parsed.query:
        path = f"{path}?{parsed.query}"
    return f"{ID_PREFIX}{path}"


def url_from_external_id(job_id: str) -> str:
    rest = job_id[len(ID_PREFIX):] if job_id.startswith(ID_PREFIX) else job_id
    if rest.startswith("http"):
        return rest
    return f"{BASE_URL}/{rest.lstrip('/')}"


def vacancy_from_card(card: Dict[str, str]) -> HealthJobsUkVacancy:
    url = absolute_url(card.get("href", ""), BASE_URL)
    return HealthJobsUkVacancy(
        id=external_id_from_url(url),
        title=card.get("title", ""),
        employer=card.get("employer", ""),
        location=card.get("location", ""),
        salary=strip_label(card.get("salary", ""), "Salary:"),
        grade=strip_label(card.get("grade", ""), "Grade:"),
        speciality=strip_label(card.get("speciality", ""), "Speciality:"),
        url=url,
    )


async def extract_detail(
    driver: PageDriver, url: str, job_id: str
) -> Optional[HealthJobsUkVacancy]:
    """
    Read a loaded detail page using primary-then-fallback selectors.
    Returns None when the page has no recognisable title.
    """
    title = await safe_extract(driver, DETAIL_TITLE_SELECTORS, "title")
    if not title:
        logger.warning(f"No job title found on {url}")
        return None

    return HealthJobsUkVacancy(
        id=job_id,
        title=title,
        employer=await safe_extract(driver, DETAIL_EMPLOYER_SELECTORS, "employer"),
        location=await safe_extract(driver, DETAIL_LOCATION_SELECTORS, "location"),
        salary=strip_label(
            await safe_extract(driver, DETAIL_SALARY_SELECTORS, "salary"), "Salary:"
        ),
        grade=strip_label(
            await safe_extract(driver, DETAIL_GRADE_SELECTORS, "grade"), "Grade:"
        ),
        speciality=strip_label(
            await safe_extract(driver, DETAIL_SPECIALITY_SELECTORS, "speciality"),
            "Speciality:",
        ),
        description=await safe_extract(
            driver, DETAIL_DESCRIPTION_SELECTORS, "description", html=True
        ),
        url=url,
    )
