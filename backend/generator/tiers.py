"""Caller tiers: who pays for the scrape decides how much gets scraped."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from backend.config import Settings
from backend.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TIER = "default"
UNLIMITED_TIER = "unlimited"


@dataclass(frozen=True)
class Tier:
    name: str
    page_limit: int
    unlimited: bool
    api_key: str

    def cap(self, urls: list[str]) -> list[str]:
        """First ``page_limit`` URLs of *urls*, order preserved."""
        return list(urls[: self.page_limit])


def resolve_tier(settings: Settings, caller_api_key: str | None) -> Tier:
    """Pick the tier for a request.

    A caller-supplied Firecrawl key unlocks the unlimited tier; otherwise the
    shared key from the environment is used with the default page cap.

    Raises:
        ConfigurationError: If neither key is available.
    """
    if caller_api_key:
        logger.info(
            "[SERVICE] using caller Firecrawl key, limit %d", settings.unlimited_page_limit
        )
        return Tier(
            name=UNLIMITED_TIER,
            page_limit=settings.unlimited_page_limit,
            unlimited=True,
            api_key=caller_api_key,
        )

    if not settings.firecrawl_api_key:
        raise ConfigurationError("FIRECRAWL_API_KEY is not set")
    logger.info("[SERVICE] using shared Firecrawl key, limit %d", settings.default_page_limit)
    return Tier(
        name=DEFAULT_TIER,
        page_limit=settings.default_page_limit,
        unlimited=False,
        api_key=settings.firecrawl_api_key,
    )
