"""
Category crawl over HealthJobsUK as an explicit state machine.

    INIT -> HOME_LOADED -> CONSENT_HANDLED (optional) -> CATEGORIES_DISCOVERED
      per category: FORM_SUBMITTED -> RESULTS_LOADED -> PAGE_EXTRACTED
                    -> (next page ? RESULTS_LOADED : CATEGORY_DONE)
    -> ALL_CATEGORIES_DONE

A failure inside one category ends that category only. A failure before any
category is selected ends the crawl with whatever was collected (nothing).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional

from healthjobs.browser.driver import PageDriver
from healthjobs.config.settings import Settings, settings as default_settings
from healthjobs.core.errors import NavigationTimeout
from healthjobs.core.models import HealthJobsUkVacancy
from healthjobs.adapters.utils import absolute_url
from healthjobs.adapters.healthjobs_uk.config import BASE_URL
from healthjobs.adapters.healthjobs_uk.extraction import vacancy_from_card
from healthjobs.adapters.healthjobs_uk.selectors import (
    CARD_FIELDS,
    CARD_LINK_SELECTOR,
    CATEGORY_LINK_SELECTOR,
    CATEGORY_NAME_SELECTOR,
    CONSENT_BUTTON_SELECTOR,
    JOB_CARD_SELECTOR,
    NEXT_PAGE_SELECTOR,
    RESULTS_MARKER_SELECTOR,
    SEARCH_FORM_FIELDS,
    SEARCH_FORM_SELECTOR,
    SUBMIT_SELECTOR,
)

logger = logging.getLogger(__name__)


class CrawlState(Enum):
    INIT = "init"
    HOME_LOADED = "home_loaded"
    CONSENT_HANDLED = "consent_handled"
    CATEGORIES_DISCOVERED = "categories_discovered"
    FORM_SUBMITTED = "form_submitted"
    RESULTS_LOADED = "results_loaded"
    PAGE_EXTRACTED = "page_extracted"
    CATEGORY_DONE = "category_done"
    ALL_CATEGORIES_DONE = "all_categories_done"


@dataclass
class Category:
    name: str
    url: str


class CategoryCrawl:
    """
    One crawl over every category. Drive it with run(); the visited states
    are recorded in history.
    """

    def __init__(self, driver: PageDriver, settings: Settings = default_settings):
        self.driver = driver
        self.settings = settings
        self.state = CrawlState.INIT
        self.history: List[CrawlState] = [CrawlState.INIT]
        self.categories: List[Category] = []
        self.vacancies: List[HealthJobsUkVacancy] = []
        self.failed_categories: List[str] = []
        self._index = -1
        self._current: Optional[Category] = None
        self._pages_in_category = 0
        self._found_in_category = 0
        self._handlers: Dict[CrawlState, Callable[[], Awaitable[CrawlState]]] = {
            CrawlState.INIT: self._load_home,
            CrawlState.HOME_LOADED: self._handle_consent,
            CrawlState.CONSENT_HANDLED: self._discover_categories,
            CrawlState.CATEGORIES_DISCOVERED: self._submit_next_category,
            CrawlState.FORM_SUBMITTED: self._await_results,
            CrawlState.RESULTS_LOADED: self._extract_page,
            CrawlState.PAGE_EXTRACTED: self._follow_next_page,
            CrawlState.CATEGORY_DONE: self._finish_category,
        }

    async def run(self) -> List[HealthJobsUkVacancy]:
        while self.state is not CrawlState.ALL_CATEGORIES_DONE:
            handler = self._handlers[self.state]
            try:
                next_state = await handler()
            except Exception as e:
                next_state = self._recover(e)
            self.state = next_state
            self.history.append(next_state)

        logger.info(
            f"Crawl complete: {len(self.vacancies)} jobs from "
            f"{len(self.categories) - len(self.failed_categories)}/{len(self.categories)} categories"
        )
        return self.vacancies

    def _recover(self, error: Exception) -> CrawlState:
        if self._current is None:
            logger.error(f"Crawl aborted in state {self.state.value}: {error}")
            return CrawlState.ALL_CATEGORIES_DONE
        logger.error(f"Error processing category {self._current.name}: {error}")
        self.failed_categories.append(self._current.name)
        return CrawlState.CATEGORY_DONE

    # --- Home page ---

    async def _load_home(self) -> CrawlState:
        logger.info(f"Navigating to HealthJobsUK homepage: {BASE_URL}")
        await self.driver.goto(f"{BASE_URL}/")
        return CrawlState.HOME_LOADED

    async def _handle_consent(self) -> CrawlState:
        try:
            if await self.driver.exists(CONSENT_BUTTON_SELECTOR):
                await self.driver.click(CONSENT_BUTTON_SELECTOR)
                logger.info("Accepted cookie banner")
                await self.driver.pause(self.settings.CONSENT_SETTLE_MS)
                return CrawlState.CONSENT_HANDLED
        except Exception as e:
            logger.debug(f"Cookie banner not dismissed, continuing: {e}")
        return await self._discover_categories()

    async def _discover_categories(self) -> CrawlState:
        if not await self.driver.wait_for(CATEGORY_LINK_SELECTOR):
            logger.warning("Category list not detected within timeout")

        links = await self.driver.links(CATEGORY_LINK_SELECTOR, CATEGORY_NAME_SELECTOR)
        self.categories = [
            Category(name=link["name"], url=absolute_url(link["href"], BASE_URL))
            for link in links
            if link.get("href")
        ]
        logger.info(f"Found {len(self.categories)} categories")
        return CrawlState.CATEGORIES_DISCOVERED

    # --- Per category ---

    async def _submit_next_category(self) -> CrawlState:
        self._index += 1
        if self._index >= len(self.categories):
            return CrawlState.ALL_CATEGORIES_DONE

        self._current = self.categories[self._index]
        self._pages_in_category = 0
        self._found_in_category = 0
        logger.info(f"Visiting category: {self._current.name}")

        await self.driver.goto(self._current.url)
        if not await self.driver.wait_for(SEARCH_FORM_SELECTOR):
            raise NavigationTimeout(f"Search form missing for {self._current.name}")

        for selector, value in SEARCH_FORM_FIELDS:
            await self._safe_select(selector, value)

        await self.driver.click(SUBMIT_SELECTOR)
        return CrawlState.FORM_SUBMITTED

    async def _safe_select(self, selector: str, value: str) -> None:
        if not await self.driver.exists(selector):
            logger.debug(f"Form control '{selector}' not present, skipping")
            return
        try:
            await self.driver.select(selector, value)
        except Exception as e:
            logger.debug(f"Could not set '{selector}': {e}")

    async def _await_results(self) -> CrawlState:
        if not await self.driver.wait_for(RESULTS_MARKER_SELECTOR):
            logger.warning(f"No jobs visible or slow load for {self._current.name}")
        return CrawlState.RESULTS_LOADED

    async def _extract_page(self) -> CrawlState:
        await self.driver.wait_for(JOB_CARD_SELECTOR)
        cards = await self.driver.extract_cards(
            JOB_CARD_SELECTOR, CARD_FIELDS, CARD_LINK_SELECTOR
        )
        page_jobs = [vacancy_from_card(card) for card in cards]
        page_jobs = [job for job in page_jobs if job.title or job.url]

        self.vacancies.extend(page_jobs)
        self._found_in_category += len(page_jobs)
        self._pages_in_category += 1
        logger.info(f"Extracted {len(page_jobs)} jobs on page {self._pages_in_category}")
        return CrawlState.PAGE_EXTRACTED

    async def _follow_next_page(self) -> CrawlState:
        if self._pages_in_category >= self.settings.CRAWL_MAX_PAGES:
            logger.warning(
                f"Page limit {self.settings.CRAWL_MAX_PAGES} reached for {self._current.name}"
            )
            return CrawlState.CATEGORY_DONE
        if not await self.driver.exists(NEXT_PAGE_SELECTOR):
            return CrawlState.CATEGORY_DONE

        await self.driver.click_and_wait(NEXT_PAGE_SELECTOR)
        return CrawlState.RESULTS_LOADED

    async def _finish_category(self) -> CrawlState:
        if self._current is not None:
            logger.info(f"Found {self._found_in_category} jobs in {self._current.name}")
        self._current = None
        return CrawlState.CATEGORIES_DISCOVERED
