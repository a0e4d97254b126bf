"""
Field extraction for NHS Scotland listing cards and job detail pages.
"""

import logging
from typing import Dict, Optional
from urllib.parse import parse_qs, urlparse

from healthjobs.browser.driver import PageDriver
from healthjobs.core.models import ScotNhsVacancy
from healthjobs.core.normalizer import split_band_from_salary
from healthjobs.adapters.utils import absolute_url, safe_extract, strip_label
from healthjobs.adapters.scot_nhs.config import BASE_URL, DEFAULT_EMPLOYER, ID_PREFIX
from healthjobs.adapters.scot_nhs.selectors import (
    CARD_LABELS,
    DETAIL_CLOSE_DATE_SELECTORS,
    DETAIL_DEPARTMENT_SELECTORS,
    DETAIL_DESCRIPTION_HTML_SELECTOR,
    DETAIL_DESCRIPTION_TEXT_SELECTOR,
    DETAIL_EMPLOYER_SELECTORS,
    DETAIL_EMPLOYMENT_TYPE_SELECTORS,
    DETAIL_HOURS_SELECTORS,
    DETAIL_JOB_FAMILY_SELECTORS,
    DETAIL_LOCATION_SELECTORS,
    DETAIL_POST_DATE_SELECTORS,
    DETAIL_REFERENCE_SELECTORS,
    DETAIL_SALARY_SELECTORS,
    DETAIL_TITLE_SELECTORS,
)

logger = logging.getLogger(__name__)


def job_id_from_url(url: str) -> str:
    """The JobId query parameter of a listing link, or ""."""
    values = parse_qs(urlparse(url).query).get("JobId")
    return values[0] if values else ""


def external_id_for(url: str, reference: str, title: str) -> str:
    return f"{ID_PREFIX}{job_id_from_url(url) or reference or title}"


def strip_prefix(job_id: str) -> str:
    return job_id[len(ID_PREFIX):] if job_id.startswith(ID_PREFIX) else job_id


def _field(card: Dict[str, str], name: str) -> str:
    return strip_label(card.get(name, ""), CARD_LABELS.get(name, ""))


def vacancy_from_card(card: Dict[str, str]) -> ScotNhsVacancy:
    url = absolute_url(card.get("href", ""), BASE_URL)
    title = _field(card, "title")
    reference = _field(card, "reference")
    band, salary = split_band_from_salary(_field(card, "salary"))
    return ScotNhsVacancy(
        id=external_id_for(url, reference, title),
        title=title,
        employer=_field(card, "employer") or DEFAULT_EMPLOYER,
        close_date=_field(card, "close_date"),
        post_date=_field(card, "post_date"),
        location=_field(card, "location"),
        reference=reference,
        salary=salary,
        band=band,
        job_family=_field(card, "job_family"),
        employment_type=_field(card, "employment_type"),
        hours_per_week=_field(card, "hours_per_week"),
        department=_field(card, "department"),
        url=url,
    )


async def _labelled(driver: PageDriver, selectors, name: str) -> str:
    value = await safe_extract(driver, selectors, name)
    return strip_label(value, CARD_LABELS.get(name, ""))


async def _description(driver: PageDriver) -> str:
    markup = await safe_extract(
        driver, [DETAIL_DESCRIPTION_HTML_SELECTOR], "description", html=True
    )
    if markup:
        return markup
    return await safe_extract(driver, [DETAIL_DESCRIPTION_TEXT_SELECTOR], "description")


async def extract_detail(driver: PageDriver, job_id: str) -> Optional[ScotNhsVacancy]:
    """
    Read a loaded detail page. data-testid selectors are tried first, the
    listing-card classes second. Returns None when no title is found.
    """
    title = await safe_extract(driver, DETAIL_TITLE_SELECTORS, "title")
    if not title:
        logger.warning(f"No job title found for {job_id}")
        return None

    band, salary = split_band_from_salary(
        await _labelled(driver, DETAIL_SALARY_SELECTORS, "salary")
    )
    employer = await _labelled(driver, DETAIL_EMPLOYER_SELECTORS, "employer")
    return ScotNhsVacancy(
        id=job_id,
        title=title,
        employer=employer or DEFAULT_EMPLOYER,
        description=await _description(driver),
        close_date=await _labelled(driver, DETAIL_CLOSE_DATE_SELECTORS, "close_date"),
        post_date=await _labelled(driver, DETAIL_POST_DATE_SELECTORS, "post_date"),
        location=await _labelled(driver, DETAIL_LOCATION_SELECTORS, "location"),
        reference=await _labelled(driver, DETAIL_REFERENCE_SELECTORS, "reference"),
        salary=salary,
        band=band,
        job_family=await _labelled(driver, DETAIL_JOB_FAMILY_SELECTORS, "job_family"),
        employment_type=await _labelled(
            driver, DETAIL_EMPLOYMENT_TYPE_SELECTORS, "employment_type"
        ),
        hours_per_week=await _labelled(driver, DETAIL_HOURS_SELECTORS, "hours_per_week"),
        department=await _labelled(driver, DETAIL_DEPARTMENT_SELECTORS, "department"),
        url=driver.url,
    )
