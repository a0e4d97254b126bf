"""
Browser context for the UK job boards: British locale and timezone, a
desktop viewport, and the configured timeouts applied as context defaults
so every page wait is bounded even outside PlaywrightDriver.
"""

import logging
from typing import Optional
from playwright.async_api import Browser, BrowserContext

from healthjobs.config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

UK_LOCALE = "en-GB"
UK_TIMEZONE = "Europe/London"
DESKTOP_VIEWPORT = {"width": 1280, "height": 800}


def context_options(user_agent: Optional[str], settings: Settings) -> dict:
    options = {
        "viewport": DESKTOP_VIEWPORT,
        "locale": UK_LOCALE,
        "timezone_id": UK_TIMEZONE,
        "ignore_https_errors": settings.IGNORE_HTTPS_ERRORS,
        "extra_http_headers": {"Accept-Language": "en-GB,en;q=0.9"},
    }
    if user_agent:
        options["user_agent"] = user_agent
    return options


async def create_context(
    browser: Browser,
    user_agent: Optional[str] = None,
    settings: Settings = default_settings,
) -> BrowserContext:
    context = await browser.new_context(**context_options(user_agent, settings))
    context.set_default_navigation_timeout(settings.NAVIGATION_TIMEOUT)
    context.set_default_timeout(settings.SELECTOR_TIMEOUT)

    logger.debug(f"Browser context created ({UK_LOCALE}, {UK_TIMEZONE})")
    return context
