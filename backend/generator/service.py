"""Request handler for llms.txt generation.

``LlmsTxtService.generate`` runs one request end to end::

    resolve tier → cap page list → cache lookup
        ├─ fresh hit → return cached documents
        └─ miss / stale / read error
              ├─ repository host → one proxy fetch
              └─ otherwise       → batch scrape → summarise each page → assemble
          → disclaimer (default tier) → cache write → return

Every step is blocking and the first failure aborts the request; nothing is
retried and no partial result is returned.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Any, Optional

from backend.config import Settings
from backend.db.cache import lookup_cache, store_cache
from backend.db.models import CacheError, CacheHit, CacheMiss
from backend.errors import MissingFieldError
from backend.generator.assembler import (
    apply_disclaimer,
    build_llms_full_txt,
    build_llms_txt,
    build_repository_docs,
)
from backend.generator.tiers import Tier, resolve_tier
from backend.llm.summarizer import summarize_pages
from backend.scraper.firecrawl import FirecrawlClient
from backend.scraper.repository import fetch_repository_markdown, parse_repository, stem_host

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScrapeRequest:
    url: str
    urls: Optional[list[str]] = None
    api_key: Optional[str] = None


@dataclass(frozen=True)
class GeneratedDocs:
    llmstxt: str
    llms_fulltxt: str
    cached: bool = False


class LlmsTxtService:
    """Generates (or replays from cache) the two documents for a site."""

    def __init__(
        self,
        settings: Settings,
        conn: sqlite3.Connection,
        llm: Any | None = None,
    ) -> None:
        self.settings = settings
        self.conn = conn
        self.llm = llm

    # ------------------------------------------------------------------
    # Site mapping
    # ------------------------------------------------------------------
    def map_urls(self, url: str, api_key: str | None = None) -> list[str]:
        """Discover the page URLs of *url* with the tier's Firecrawl key."""
        tier = resolve_tier(self.settings, api_key)
        return FirecrawlClient(tier.api_key, self.settings).map_site(url)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def generate(self, request: ScrapeRequest) -> GeneratedDocs:
        tier = resolve_tier(self.settings, request.api_key)

        if not request.urls:
            raise MissingFieldError("URLs are not defined")
        urls = tier.cap(request.urls)
        stem = stem_host(urls[0])

        lookup = lookup_cache(
            self.conn, request.url, tier.unlimited, self.settings.cache_max_age_days
        )
        if isinstance(lookup, CacheHit):
            logger.info("[CACHE] hit for %s", stem)
            return GeneratedDocs(
                llmstxt=lookup.entry.llmstxt,
                llms_fulltxt=lookup.entry.llmsfulltxt,
                cached=True,
            )
        elif isinstance(lookup, CacheMiss):
            if lookup.stale is not None:
                logger.info("[CACHE] stale entry for %s, regenerating", stem)
            else:
                logger.info("[CACHE] no cache hit for %s", stem)
        elif isinstance(lookup, CacheError):
            logger.warning("[CACHE] lookup failed for %s: %s", stem, lookup.reason)
        else:
            raise TypeError(f"unexpected cache lookup result: {lookup!r}")

        llmstxt, llms_fulltxt = self._build(request.url, urls, tier)

        if not tier.unlimited:
            llmstxt = apply_disclaimer(llmstxt, "llms.txt", request.url, self.settings)
            llms_fulltxt = apply_disclaimer(
                llms_fulltxt, "llms-full.txt", request.url, self.settings
            )

        store_cache(self.conn, request.url, tier.unlimited, llmstxt, llms_fulltxt)
        return GeneratedDocs(llmstxt=llmstxt, llms_fulltxt=llms_fulltxt)

    def _build(self, url: str, urls: list[str], tier: Tier) -> tuple[str, str]:
        repository = parse_repository(urls[0])
        if repository is not None:
            owner, repo = repository
            blob = fetch_repository_markdown(owner, repo, self.settings)
            return build_repository_docs(url, blob)

        pages = FirecrawlClient(tier.api_key, self.settings).batch_scrape(urls)
        summaries = summarize_pages(pages, self.settings, llm=self.llm)
        logger.info("[SERVICE] assembled %d page(s) for %s", len(pages), url)
        return build_llms_txt(url, pages, summaries), build_llms_full_txt(url, pages)
