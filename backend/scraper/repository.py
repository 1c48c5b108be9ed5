"""Repository mode: fetch a code repository as markdown in a single call.

Targets hosted on a known code-hosting domain bypass the per-page
scrape/summarise pipeline.  The repository-content proxy (uithub) renders the
repository as one markdown blob capped at ``settings.repo_max_tokens``.
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

import httpx

from backend.config import Settings
from backend.errors import UpstreamError

logger = logging.getLogger(__name__)

REPOSITORY_HOSTS: tuple[str, ...] = ("github.com",)


def normalize_url(url: str) -> str:
    """Return *url* with ``http://`` prepended when it has no scheme."""
    if url.startswith(("http://", "https://", "http:/", "https:/")):
        return url
    return f"http://{url}"


def stem_host(url: str) -> str:
    """Host name of *url*, tolerating a missing scheme."""
    return urlparse(normalize_url(url)).hostname or ""


def is_repository_host(host: str) -> bool:
    return any(known in host for known in REPOSITORY_HOSTS)


def parse_repository(url: str) -> tuple[str, str] | None:
    """Return ``(owner, repo)`` for a repository-host URL, else ``None``.

    The path must contain at least an owner and a repository segment.
    """
    parsed = urlparse(normalize_url(url))
    if not is_repository_host(parsed.hostname or ""):
        return None
    segments = [s for s in parsed.path.split("/") if s]
    if len(segments) < 2:
        return None
    return segments[0], segments[1]


def fetch_repository_markdown(owner: str, repo: str, settings: Settings) -> str:
    """Fetch ``owner/repo`` through the repository-content proxy.

    Only the text before the first ``/`` of the response body is returned.
    This keeps the behaviour of the hosted service this replaces; it most
    likely cuts the rendering short at the first file path and should be
    reviewed before relying on the repository content.

    Raises:
        UpstreamError: If the proxy answers with a non-2xx status.
    """
    proxy_url = f"{settings.repo_proxy_base_url.rstrip('/')}/{owner}/{repo}"
    params = {"maxTokens": settings.repo_max_tokens, "accept": "text/markdown"}

    logger.info("[REPO] fetching %s/%s", owner, repo)
    with httpx.Client(timeout=settings.request_timeout, follow_redirects=True) as client:
        response = client.get(
            proxy_url, params=params, headers={"Accept": "text/markdown"}
        )

    if not response.is_success:
        raise UpstreamError(
            f"Failed to fetch GitHub content: {response.reason_phrase}",
            status_code=response.status_code,
        )
    return response.text.split("/")[0]
