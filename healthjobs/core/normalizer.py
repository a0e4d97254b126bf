"""
Canonical normalization of raw source records.

Pure conversion and heuristic-extraction functions with no I/O. Every
function degrades a malformed field to None or "" instead of raising, so a
single bad value never costs the whole record.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Optional, Tuple

from healthjobs.core.models import (
    HealthJobsUkVacancy,
    Listing,
    NhsVacancy,
    ScotNhsVacancy,
)

logger = logging.getLogger(__name__)

# Salary sanity window (exclusive)
SALARY_FLOOR = 5000
SALARY_CEILING = 300000

NHS_JOB_ADVERT_URL = "https://www.jobs.nhs.uk/candidate/jobadvert/{id}"

_NUMBER = r"(\d+(?:\.\d+)?)"
_SALARY_RANGE_RE = re.compile(
    rf"[£$€]?\s*{_NUMBER}\s*(?:to|-|–)\s*[£$€]?\s*{_NUMBER}", re.IGNORECASE
)
_SALARY_CURRENCY_RE = re.compile(rf"[£$€]\s*{_NUMBER}")
_SALARY_BARE_RE = re.compile(_NUMBER)

_BAND_RE = re.compile(r"\bband\s*(\d+[a-z]?)", re.IGNORECASE)
_BAND_STRIP_RE = re.compile(r"\bband\s*\d+[a-z]?\s*", re.IGNORECASE)

_UK_DATE_RE = re.compile(r"(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})")
_NAMED_DATE_FORMATS = (
    "%d %B %Y",
    "%d %b %Y",
    "%A %d %B %Y",
    "%a, %d %b %Y %H:%M:%S %z",
)

# (lower, upper, label) checked in order, first match wins
_SALARY_BANDS = (
    (20000, 25000, "Band 2-3"),
    (25000, 35000, "Band 4-5"),
    (35000, 45000, "Band 6-7"),
    (45000, 60000, "Band 8a-8b"),
)


def _in_window(value: Optional[int]) -> bool:
    return value is not None and SALARY_FLOOR < value < SALARY_CEILING


def _to_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(float(raw))
    except ValueError:
        return None


def parse_salary(text: Optional[str]) -> Tuple[Optional[int], Optional[int]]:
    """
    Extract (min, max) from free salary text such as "£28,407 to £34,581".

    "Negotiable" salaries and values outside the sanity window come back as
    None. max is only kept when it is greater than the parsed min.
    """
    if not text or not isinstance(text, str):
        return None, None
    if "negotiable" in text.lower():
        return None, None

    cleaned = text.replace(",", "")
    raw_min: Optional[int] = None
    raw_max: Optional[int] = None

    match = _SALARY_RANGE_RE.search(cleaned)
    if match:
        raw_min, raw_max = _to_int(match.group(1)), _to_int(match.group(2))
    else:
        match = _SALARY_CURRENCY_RE.search(cleaned) or _SALARY_BARE_RE.search(
            cleaned
        )
        if match:
            raw_min = _to_int(match.group(1))

    salary_min = raw_min if _in_window(raw_min) else None
    salary_max = None
    if _in_window(raw_max) and (raw_min is None or raw_max > raw_min):
        salary_max = raw_max
    return salary_min, salary_max


def band_from_salary(salary_min: Optional[int]) -> str:
    """Coarse band bucket guessed from the minimum salary."""
    if not salary_min:
        return ""
    for lower, upper, label in _SALARY_BANDS:
        if lower <= salary_min <= upper:
            return label
    if salary_min >= 60000:
        return "Band 8c+"
    return ""


def find_band_token(*texts: Optional[str]) -> str:
    """First explicit "Band N[letter]" token across the given texts."""
    for text in texts:
        if not text:
            continue
        match = _BAND_RE.search(text)
        if match:
            return f"Band {match.group(1).upper()}"
    return ""


def parse_band(
    title: Optional[str],
    salary_text: Optional[str] = None,
    description: Optional[str] = None,
    salary_min: Optional[int] = None,
) -> str:
    """
    Explicit band token from title, salary text, then description; else a
    bucket from salary_min; else "".
    """
    return find_band_token(title, salary_text, description) or band_from_salary(
        salary_min
    )


def split_band_from_salary(salary: Optional[str]) -> Tuple[str, str]:
    """
    Split "Band 5 (£33,247 - £41,424)" into ("Band 5", "(£33,247 - £41,424)").
    """
    if not salary:
        return "", ""
    band = find_band_token(salary)
    clean = _BAND_STRIP_RE.sub("", salary, count=1).strip()
    return band, clean


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date(value) -> Optional[datetime]:
    """
    Parse a closing/posting date. ISO-8601 first, then named-month formats,
    then a DD/MM/YYYY pattern. Returns None for anything else.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)

    text = str(value).strip()
    try:
        return _as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    for fmt in _NAMED_DATE_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue

    match = _UK_DATE_RE.search(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return datetime(year, month, day, tzinfo=timezone.utc)
        except ValueError:
            logger.debug(f"Impossible calendar date: {text}")
            return None

    return None


def mentions_visa(listing: Listing) -> bool:
    """Explicit sponsorship flag, or "visa" anywhere in the description."""
    if listing.visa_sponsorship:
        return True
    return "visa" in (listing.description or "").lower()


# --- Source converters ---


def convert_nhs_vacancy(vacancy: NhsVacancy, source: str = "") -> Listing:
    """NHS Jobs XML vacancy -> canonical Listing."""
    salary_min, salary_max = parse_salary(vacancy.salary)
    band = parse_band(vacancy.title, vacancy.salary, vacancy.description, salary_min)
    return Listing(
        id=vacancy.id,
        external_id=vacancy.id,
        title=vacancy.title,
        employer=vacancy.employer,
        location=vacancy.locations[0] if vacancy.locations else "",
        source=source,
        url=vacancy.url or NHS_JOB_ADVERT_URL.format(id=vacancy.id),
        band=band,
        salary_min=salary_min,
        salary_max=salary_max,
        description=vacancy.description,
        closing_date=parse_date(vacancy.close_date),
        post_date=parse_date(vacancy.post_date),
        reference=vacancy.reference,
        contract_type=vacancy.type,
    )


def convert_healthjobs_uk_vacancy(
    vacancy: HealthJobsUkVacancy, source: str = ""
) -> Listing:
    """HealthJobsUK card -> canonical Listing. The grade stands in for a band."""
    salary_min, salary_max = parse_salary(vacancy.salary)
    band = (
        find_band_token(vacancy.title, vacancy.grade, vacancy.salary, vacancy.description)
        or vacancy.grade.strip()
        or band_from_salary(salary_min)
    )
    return Listing(
        id=vacancy.id,
        external_id=vacancy.id,
        title=vacancy.title,
        employer=vacancy.employer,
        location=vacancy.location,
        source=source,
        url=vacancy.url,
        band=band,
        salary_min=salary_min,
        salary_max=salary_max,
        description=vacancy.description,
        closing_date=parse_date(vacancy.close_date),
    )


def convert_scot_nhs_vacancy(vacancy: ScotNhsVacancy, source: str = "") -> Listing:
    """NHS Scotland card -> canonical Listing."""
    salary_min, salary_max = parse_salary(vacancy.salary)
    band = vacancy.band or parse_band(
        vacancy.title, vacancy.salary, vacancy.description, salary_min
    )
    return Listing(
        id=vacancy.id,
        external_id=vacancy.id,
        title=vacancy.title,
        employer=vacancy.employer,
        location=vacancy.location,
        source=source,
        url=vacancy.url,
        band=band,
        salary_min=salary_min,
        salary_max=salary_max,
        description=vacancy.description,
        closing_date=parse_date(vacancy.close_date),
        post_date=parse_date(vacancy.post_date),
        reference=vacancy.reference,
        contract_type=vacancy.employment_type,
    )
