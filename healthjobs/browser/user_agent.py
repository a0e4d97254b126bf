import logging
from typing import Optional

from fake_useragent import UserAgent

from healthjobs.config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

FALLBACK_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
)


class UserAgentProvider:
    """
    Picks the user agent for each scrape session: BROWSER_USER_AGENT when it
    is configured, otherwise a random agent from fake-useragent.
    """

    _generator: Optional[UserAgent] = None
    _unavailable = False

    @classmethod
    def _load(cls) -> Optional[UserAgent]:
        if cls._generator is None and not cls._unavailable:
            try:
                cls._generator = UserAgent(fallback=FALLBACK_UA)
            except Exception as e:
                # Only retried on the next process start
                cls._unavailable = True
                logger.warning(f"fake-useragent unavailable, using fallback agent: {e}")
        return cls._generator

    @classmethod
    def for_session(cls, settings: Settings = default_settings) -> str:
        if settings.BROWSER_USER_AGENT:
            return settings.BROWSER_USER_AGENT
        generator = cls._load()
        return generator.random if generator else FALLBACK_UA
