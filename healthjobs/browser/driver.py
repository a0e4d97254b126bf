"""
Page automation interface used by the scrape adapters.

Crawl and extraction logic only talks to PageDriver, so it can be driven by
a scripted fake in tests. PlaywrightDriver is the real implementation.
"""

import logging
from typing import Dict, List, Mapping, Optional, Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from healthjobs.config.settings import Settings, settings as default_settings
from healthjobs.core.errors import NavigationTimeout, UpstreamUnavailable

logger = logging.getLogger(__name__)


class PageDriver(Protocol):
    @property
    def url(self) -> str: ...

    async def goto(self, url: str) -> None: ...

    async def exists(self, selector: str) -> bool: ...

    async def wait_for(self, selector: str, timeout: Optional[int] = None) -> bool: ...

    async def click(self, selector: str) -> None: ...

    async def click_and_wait(self, selector: str) -> None: ...

    async def select(self, selector: str, value: str) -> None: ...

    async def pause(self, ms: int) -> None: ...

    async def text(self, selector: str) -> str: ...

    async def html(self, selector: str) -> str: ...

    async def links(self, selector: str, label_selector: str) -> List[Dict[str, str]]: ...

    async def extract_cards(
        self,
        card_selector: str,
        fields: Mapping[str, str],
        link_selector: str = "a",
    ) -> List[Dict[str, str]]: ...


class PlaywrightDriver:
    """
    PageDriver over a Playwright page. Navigation timeouts raise
    NavigationTimeout; selector waits return False instead of raising.
    """

    def __init__(self, page: Page, settings: Settings = default_settings):
        self.page = page
        self.settings = settings

    @property
    def url(self) -> str:
        return self.page.url

    async def goto(self, url: str) -> None:
        try:
            await self.page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=self.settings.NAVIGATION_TIMEOUT,
            )
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout(f"Timed out loading {url}") from e
        except PlaywrightError as e:
            raise UpstreamUnavailable(f"Failed to load {url}: {e}") from e

    async def exists(self, selector: str) -> bool:
        try:
            return await self.page.locator(selector).count() > 0
        except PlaywrightError as e:
            logger.debug(f"Selector '{selector}' probe failed: {e}")
            return False

    async def wait_for(self, selector: str, timeout: Optional[int] = None) -> bool:
        try:
            await self.page.wait_for_selector(
                selector, timeout=timeout or self.settings.SELECTOR_TIMEOUT
            )
            return True
        except PlaywrightTimeoutError:
            logger.debug(f"Timed out waiting for '{selector}'")
            return False

    async def click(self, selector: str) -> None:
        await self.page.locator(selector).first.click(
            timeout=self.settings.SELECTOR_TIMEOUT
        )

    async def click_and_wait(self, selector: str) -> None:
        try:
            async with self.page.expect_navigation(
                wait_until="domcontentloaded",
                timeout=self.settings.NAVIGATION_TIMEOUT,
            ):
                await self.click(selector)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout(f"Timed out following '{selector}'") from e

    async def select(self, selector: str, value: str) -> None:
        await self.page.select_option(
            selector, value, timeout=self.settings.SELECTOR_TIMEOUT
        )

    async def pause(self, ms: int) -> None:
        await self.page.wait_for_timeout(ms)

    async def text(self, selector: str) -> str:
        loc = self.page.locator(selector)
        if await loc.count() == 0:
            return ""
        return ((await loc.first.text_content()) or "").strip()

    async def html(self, selector: str) -> str:
        loc = self.page.locator(selector)
        if await loc.count() == 0:
            return ""
        return ((await loc.first.inner_html()) or "").strip()

    async def links(self, selector: str, label_selector: str) -> List[Dict[str, str]]:
        """Every matching anchor as {"name", "href"}; name prefers label_selector."""
        results = []
        for anchor in await self.page.locator(selector).all():
            try:
                label = anchor.locator(label_selector)
                if await label.count() > 0:
                    name = await label.first.text_content()
                else:
                    name = await anchor.text_content()
                href = await anchor.get_attribute("href")
                results.append({"name": (name or "").strip(), "href": href or ""})
            except PlaywrightError as e:
                logger.debug(f"Failed to read link under '{selector}': {e}")
        return results

    async def extract_cards(
        self,
        card_selector: str,
        fields: Mapping[str, str],
        link_selector: str = "a",
    ) -> List[Dict[str, str]]:
        """
        One dict per card with each named field's text plus "href".
        A missing or unreadable field falls back to "".
        """
        cards = []
        for card in await self.page.locator(card_selector).all():
            data: Dict[str, str] = {}
            for name, selector in fields.items():
                try:
                    loc = card.locator(selector)
                    if await loc.count() > 0:
                        data[name] = ((await loc.first.text_content()) or "").strip()
                    else:
                        data[name] = ""
                except PlaywrightError as e:
                    logger.debug(f"Field '{name}' failed: {e}")
                    data[name] = ""
            try:
                link = card.locator(link_selector)
                data["href"] = (
                    (await link.first.get_attribute("href")) or ""
                    if await link.count() > 0
                    else ""
                )
            except PlaywrightError:
                data["href"] = ""
            cards.append(data)
        return cards
