"""Data models for the content fetcher."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PageResult:
    """One successfully scraped page.

    ``url`` is the canonical URL reported in the scrape metadata; it falls
    back to ``source_url`` (the URL that was requested) when absent.
    """

    source_url: str
    markdown: str
    url: str
