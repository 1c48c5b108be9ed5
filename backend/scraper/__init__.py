"""Scraper package — Firecrawl batch scrape and repository-mode fetch."""

from backend.scraper.firecrawl import FirecrawlClient
from backend.scraper.models import PageResult
from backend.scraper.repository import fetch_repository_markdown, parse_repository

__all__ = ["FirecrawlClient", "PageResult", "fetch_repository_markdown", "parse_repository"]
