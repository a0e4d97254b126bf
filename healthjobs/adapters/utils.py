"""
Small helpers shared by the scrape adapters.
No navigation logic, only text processing and selector fallback chains.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar
from urllib.parse import urljoin

from healthjobs.browser.driver import PageDriver
from healthjobs.core.models import SearchFilters
from healthjobs.core.normalizer import parse_date, parse_salary

logger = logging.getLogger(__name__)

T = TypeVar("T")


def absolute_url(href: str, base_url: str) -> str:
    """Make a scraped href absolute against the source's base URL."""
    if not href:
        return ""
    if href.startswith("http"):
        return href
    return urljoin(base_url + "/", href)


def strip_label(text: str, label: str) -> str:
    """Remove a visible label such as "Salary:" from a card field."""
    return (text or "").replace(label, "").strip()


async def safe_extract(
    driver: PageDriver, selectors: Sequence[str], field_name: str, html: bool = False
) -> str:
    """
    Try multiple selectors in order, return the first non-empty match or "".
    """
    for selector in selectors:
        try:
            value = await (driver.html(selector) if html else driver.text(selector))
            if value and value.strip():
                return value.strip()
        except Exception as e:
            logger.debug(f"Selector '{selector}' failed for {field_name}: {e}")
            continue

    logger.debug(f"All selectors failed for {field_name}")
    return ""


def is_closed(close_date: str, now: Optional[datetime] = None) -> bool:
    """
    True only when the closing date parses and lies in the past.
    Unparsable dates are treated as still open.
    """
    parsed = parse_date(close_date)
    if parsed is None:
        return False
    return parsed < (now or datetime.now(timezone.utc))


def _contains(value: str, needle: Optional[str]) -> bool:
    return not needle or needle.lower() in (value or "").lower()


def filter_vacancies(
    vacancies: Iterable[T],
    filters: SearchFilters,
    title: Callable[[T], str],
    location: Callable[[T], str],
    employer: Callable[[T], str],
) -> List[T]:
    """Client-side keyword (title), location and employer substring filters."""
    return [
        vacancy
        for vacancy in vacancies
        if _contains(title(vacancy), filters.keyword)
        and _contains(location(vacancy), filters.location)
        and _contains(employer(vacancy), filters.employer)
    ]


def by_salary_desc(vacancies: Iterable[T], salary: Callable[[T], str]) -> List[T]:
    """Highest parsed minimum salary first; unparsable salaries last."""
    return sorted(vacancies, key=lambda v: parse_salary(salary(v))[0] or 0, reverse=True)
