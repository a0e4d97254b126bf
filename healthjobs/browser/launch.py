import logging
from playwright.async_api import Browser, Playwright

from healthjobs.config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

# Sandbox flags are needed when running as root inside containers
LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]


async def create_browser(
    playwright: Playwright, settings: Settings = default_settings
) -> Browser:
    """
    Launch a Chromium browser instance for one scrape session.
    """
    browser = await playwright.chromium.launch(
        headless=settings.HEADLESS,
        args=LAUNCH_ARGS,
    )
    logger.info(f"Browser launched (Headless: {settings.HEADLESS}).")
    return browser
