"""
XML parsing for the NHS Jobs search_xml endpoint.

Every field access falls back to an empty string or list, so a vacancy
with missing nodes still parses. Only a missing document root is fatal.
"""

import logging
from typing import List, Optional
from xml.etree import ElementTree as ET

from healthjobs.core.errors import MalformedResponse
from healthjobs.core.models import NhsVacancy, SourceResult

logger = logging.getLogger(__name__)

ROOT_TAG = "nhsJobs"
VACANCY_TAG = "vacancyDetails"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _find_text(node: ET.Element, tag: str) -> str:
    found = node.find(tag)
    if found is not None and found.text:
        return found.text.strip()
    return ""


def _to_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def _strip_namespaces(root: ET.Element) -> None:
    for el in root.iter():
        if isinstance(el.tag, str):
            el.tag = _local_name(el.tag)


def parse_vacancy(node: ET.Element) -> NhsVacancy:
    # One or many <location> children both come back as a list
    locations: List[str] = [
        loc.text.strip() for loc in node.findall("locations/location") if loc.text
    ]
    return NhsVacancy(
        id=_find_text(node, "id"),
        title=_find_text(node, "title"),
        employer=_find_text(node, "employer"),
        description=_find_text(node, "description"),
        close_date=_find_text(node, "closeDate"),
        post_date=_find_text(node, "postDate"),
        locations=locations,
        reference=_find_text(node, "reference"),
        salary=_find_text(node, "salary"),
        type=_find_text(node, "type"),
        url=_find_text(node, "url"),
    )


def parse_search_response(xml_text: Optional[str]) -> SourceResult:
    """
    Parse a search_xml document into a SourceResult.

    Raises:
        MalformedResponse: the body is not XML or has no nhsJobs root.
    """
    if not xml_text or not xml_text.strip():
        raise MalformedResponse("Empty response body")
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise MalformedResponse(f"Invalid XML: {e}") from e

    _strip_namespaces(root)
    if root.tag != ROOT_TAG:
        raise MalformedResponse(f"Unexpected root element <{root.tag}>")

    vacancies = [parse_vacancy(node) for node in root.findall(VACANCY_TAG)]
    logger.debug(f"Parsed {len(vacancies)} vacancies from XML")

    return SourceResult(
        total_pages=_to_int(_find_text(root, "totalPages")),
        total_results=_to_int(_find_text(root, "totalResults")),
        vacancies=vacancies,
    )
