import logging
from typing import Optional
from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
)

from healthjobs.config.settings import Settings, settings as default_settings
from healthjobs.core.errors import UpstreamUnavailable
from healthjobs.browser.context import create_context
from healthjobs.browser.driver import PlaywrightDriver
from healthjobs.browser.launch import create_browser
from healthjobs.browser.user_agent import UserAgentProvider

logger = logging.getLogger(__name__)


class BrowserSession:
    """
    Manages the lifecycle of one Playwright browser for a single adapter call.

    Sessions are never pooled or shared: every scrape call opens its own and
    tears it down on exit.

        async with BrowserSession() as driver:
            await driver.goto(url)
    """

    def __init__(self, settings: Settings = default_settings):
        self.settings = settings
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def start(self) -> PlaywrightDriver:
        """
        Launch Playwright, a browser, a context and one page.
        Any launch failure is raised as UpstreamUnavailable.
        """
        try:
            self._playwright = await async_playwright().start()
            self._browser = await create_browser(self._playwright, self.settings)

            user_agent = UserAgentProvider.for_session(self.settings)
            logger.debug(f"Using User Agent: {user_agent}")
            self._context = await create_context(
                self._browser, user_agent, self.settings
            )
            self._page = await self._context.new_page()
        except PlaywrightError as e:
            await self.close()
            raise UpstreamUnavailable(f"Browser launch failed: {e}") from e

        return PlaywrightDriver(self._page, self.settings)

    async def close(self):
        """
        Closes the context and browser and stops Playwright.
        """
        try:
            if self._context:
                await self._context.close()
            if self._browser:
                await self._browser.close()
                logger.debug("Browser closed.")
        except PlaywrightError as e:
            logger.debug(f"Error closing browser: {e}")
        finally:
            self._context = None
            self._browser = None
            self._page = None
            if self._playwright:
                await self._playwright.stop()
                self._playwright = None

    async def __aenter__(self) -> PlaywrightDriver:
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
