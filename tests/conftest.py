"""Shared fakes: a controllable clock, a scripted page driver, stub sources."""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import pytest

from healthjobs.config.settings import Settings
from healthjobs.core.errors import NavigationTimeout
from healthjobs.core.models import Listing, SearchFilters, SourceResult
from healthjobs.core.store import InMemoryJobStore


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeDriver:
    """
    PageDriver over a dict of scripted pages.

    Each page may define: "selectors" (present elements), "links", "cards",
    "texts"/"html" (selector -> content), "clicks" (selector -> url the click
    navigates to) and "fail_extract" (extract_cards raises).
    """

    def __init__(self, pages: Dict[str, Dict[str, Any]], failing_urls=()):
        self.pages = pages
        self.failing_urls = set(failing_urls)
        self.current = ""
        self.visited: List[str] = []
        self.clicked: List[str] = []
        self.selected: List[tuple] = []
        self.pauses: List[int] = []

    @property
    def url(self) -> str:
        return self.current

    @property
    def page(self) -> Dict[str, Any]:
        return self.pages.get(self.current, {})

    async def goto(self, url: str) -> None:
        self.visited.append(url)
        if url in self.failing_urls:
            raise NavigationTimeout(f"Timed out loading {url}")
        self.current = url

    async def exists(self, selector: str) -> bool:
        return selector in self.page.get("selectors", set())

    async def wait_for(self, selector: str, timeout: Optional[int] = None) -> bool:
        return await self.exists(selector)

    async def click(self, selector: str) -> None:
        self.clicked.append(selector)
        target = self.page.get("clicks", {}).get(selector)
        if target:
            self.visited.append(target)
            self.current = target

    async def click_and_wait(self, selector: str) -> None:
        await self.click(selector)

    async def select(self, selector: str, value: str) -> None:
        self.selected.append((selector, value))

    async def pause(self, ms: int) -> None:
        self.pauses.append(ms)

    async def text(self, selector: str) -> str:
        return self.page.get("texts", {}).get(selector, "")

    async def html(self, selector: str) -> str:
        return self.page.get("html", {}).get(selector, "")

    async def links(self, selector: str, label_selector: str) -> List[Dict[str, str]]:
        return list(self.page.get("links", []))

    async def extract_cards(self, card_selector, fields, link_selector="a"):
        if self.page.get("fail_extract"):
            raise RuntimeError("card extraction failed")
        return [dict(card) for card in self.page.get("cards", [])]


class FakePageFactory:
    """Hands out the same FakeDriver per session and counts sessions opened."""

    def __init__(self, driver: FakeDriver):
        self.driver = driver
        self.sessions = 0

    def __call__(self):
        return self._session()

    @asynccontextmanager
    async def _session(self):
        self.sessions += 1
        yield self.driver


class StubAdapter:
    """Source adapter whose records are already Listings."""

    def __init__(
        self,
        name: str,
        listings: Optional[List[Listing]] = None,
        id_prefix: Optional[str] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.name = name
        self.id_prefix = id_prefix
        self.listings = listings or []
        self.error = error
        self.delay = delay
        self.searches: List[SearchFilters] = []
        self.lookups: List[str] = []

    async def search(self, filters: SearchFilters) -> SourceResult:
        self.searches.append(filters)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return SourceResult(total_pages=1, total_results=len(self.listings), vacancies=list(self.listings))

    async def get_by_id(self, job_id: str):
        self.lookups.append(job_id)
        if self.error:
            raise self.error
        for listing in self.listings:
            if listing.external_id == job_id:
                return listing
        return None

    async def get_featured(self, limit: int):
        if self.error:
            raise self.error
        return self.listings[:limit]

    def normalize(self, record: Listing) -> Listing:
        return Listing(**vars(record))


class BrokenStore(InMemoryJobStore):
    """Store whose reads fail a set number of times."""

    def __init__(self, failures: int = 1, search_fails: bool = False):
        super().__init__()
        self.failures = failures
        self.search_fails = search_fails
        self.get_calls = 0

    async def get_jobs(self, filters=None):
        self.get_calls += 1
        if self.get_calls <= self.failures:
            raise ConnectionError("database down")
        return await super().get_jobs(filters)

    async def search_jobs(self, text, filters=None):
        if self.search_fails:
            raise ConnectionError("search index down")
        return await super().search_jobs(text, filters)


def make_listing(external_id: str, source: str = "", **overrides) -> Listing:
    fields = dict(
        id=external_id,
        external_id=external_id,
        title=f"Job {external_id}",
        employer="NHS Trust",
        location="London",
        source=source,
    )
    fields.update(overrides)
    return Listing(**fields)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        CONSENT_SETTLE_MS=0,
        CRAWL_MAX_PAGES=5,
        NHS_LOOKUP_MAX_PAGES=3,
        MAX_CONCURRENT_DETAIL_LOOKUPS=2,
    )


@pytest.fixture
def store():
    return InMemoryJobStore()
