"""Thin client for the Firecrawl REST API (site map + batch scrape).

Only the two calls the pipeline needs are wrapped:

``POST /v1/map``
    Discover the URLs of a site.

``POST /v1/batch/scrape`` + ``GET /v1/batch/scrape/{id}``
    Submit a batch of URLs and poll until every page has been scraped.

Any non-2xx response or ``success: false`` body becomes an
:class:`~backend.errors.UpstreamError` carrying Firecrawl's own status code
and error detail.  There are no retries.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from backend.config import Settings
from backend.errors import UpstreamError
from backend.scraper.models import PageResult

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> str:
    """Best-effort extraction of Firecrawl's error message from *response*."""
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text or response.reason_phrase


def _to_page_result(item: dict[str, Any]) -> PageResult | None:
    """Convert one batch-scrape ``data`` item; ``None`` if it has no markdown."""
    markdown = item.get("markdown")
    if markdown is None:
        return None
    metadata = item.get("metadata") or {}
    source_url = metadata.get("sourceURL") or metadata.get("url") or ""
    return PageResult(
        source_url=source_url,
        markdown=markdown,
        url=metadata.get("url") or source_url,
    )


class FirecrawlClient:
    """Blocking Firecrawl client bound to one API key."""

    def __init__(self, api_key: str, settings: Settings) -> None:
        self.api_key = api_key
        self.settings = settings
        self.base_url = settings.firecrawl_base_url.rstrip("/")

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------
    def _client(self) -> httpx.Client:
        return httpx.Client(
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.settings.request_timeout,
            follow_redirects=True,
        )

    def _checked_json(self, response: httpx.Response, action: str) -> dict[str, Any]:
        if not response.is_success:
            raise UpstreamError(
                f"Failed to {action}: {_error_detail(response)}",
                status_code=response.status_code,
            )
        data = response.json()
        if data.get("success") is False:
            raise UpstreamError(f"Failed to {action}: {data.get('error')}")
        return data

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def map_site(self, url: str, limit: int | None = None) -> list[str]:
        """Return the URLs Firecrawl discovers for *url*, in its order."""
        payload: dict[str, Any] = {"url": url}
        if limit is not None:
            payload["limit"] = limit

        with self._client() as client:
            response = client.post(f"{self.base_url}/v1/map", json=payload)
        data = self._checked_json(response, "map")
        links = data.get("links") or []
        logger.info("[MAP] %s -> %d url(s)", url, len(links))
        return list(links)

    def batch_scrape(self, urls: list[str]) -> list[PageResult]:
        """Scrape *urls* as markdown (main content only) in one batch job.

        Blocks until the job completes, polling every
        ``settings.batch_poll_interval`` seconds for at most
        ``settings.batch_max_wait`` seconds.

        Returns:
            One :class:`PageResult` per successfully scraped page, in the
            order Firecrawl reports them.

        Raises:
            UpstreamError: On an HTTP error, a ``success: false`` body, a
                ``failed`` job status, or when the job outlives the wait budget
                (status 504).
        """
        payload = {
            "urls": urls,
            "formats": ["markdown"],
            "onlyMainContent": True,
        }
        with self._client() as client:
            response = client.post(f"{self.base_url}/v1/batch/scrape", json=payload)
            job = self._checked_json(response, "scrape")
            job_id = job.get("id")
            if not job_id:
                raise UpstreamError("Failed to scrape: batch job id missing from response")
            logger.info("[SCRAPE] batch %s submitted for %d url(s)", job_id, len(urls))

            items = self._wait_for_batch(client, job_id)

        pages = [p for p in (_to_page_result(i) for i in items) if p is not None]
        logger.info("[SCRAPE] batch %s returned %d page(s)", job_id, len(pages))
        return pages

    def _wait_for_batch(self, client: httpx.Client, job_id: str) -> list[dict[str, Any]]:
        """Poll the batch job until completion and collect every result page."""
        status_url = f"{self.base_url}/v1/batch/scrape/{job_id}"
        deadline = time.monotonic() + self.settings.batch_max_wait

        while True:
            data = self._checked_json(client.get(status_url), "scrape")
            status = data.get("status")
            if status == "completed":
                break
            if status == "failed":
                raise UpstreamError(f"Failed to scrape: {data.get('error') or 'batch job failed'}")
            logger.debug(
                "[SCRAPE] batch %s %s (%s/%s)",
                job_id, status, data.get("completed", 0), data.get("total", "?"),
            )
            if time.monotonic() >= deadline:
                raise UpstreamError(
                    f"Failed to scrape: batch {job_id} did not finish within "
                    f"{self.settings.batch_max_wait:.0f}s",
                    status_code=504,
                )
            time.sleep(self.settings.batch_poll_interval)

        items: list[dict[str, Any]] = list(data.get("data") or [])
        next_url = data.get("next")
        while next_url:
            page = self._checked_json(client.get(next_url), "scrape")
            items.extend(page.get("data") or [])
            next_url = page.get("next")
        return items
