"""Public GET facade: ``/<target url>`` and ``/<target url>/full``.

Routes
------
GET /{target}         → raw ``llms.txt`` text
GET /{target}/full    → raw ``llms-full.txt`` text

The caller's Firecrawl key is read from the ``FIRECRAWL_API_KEY`` query
parameter or header.  The handler maps the site, then runs the generation
service, then strips the JSON envelope from the chosen document.

This router must be mounted last: its path parameter matches everything.
"""

from __future__ import annotations

import logging
from urllib.parse import unquote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from backend.api.deps import get_service
from backend.api.formatting import render_raw_text
from backend.errors import LlmsTxtError
from backend.generator.service import LlmsTxtService, ScrapeRequest

logger = logging.getLogger(__name__)

router = APIRouter()

_KEY_NAME = "FIRECRAWL_API_KEY"


def _split_target(target: str) -> tuple[str, bool]:
    """Return ``(target_url, wants_full)`` for the raw path parameter."""
    segments = target.split("/")
    wants_full = len(segments) > 1 and segments[-1] == "full"
    if wants_full:
        segments = segments[:-1]
    return unquote("/".join(segments)), wants_full


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.get("/{target:path}")
def llmstxt_endpoint(
    target: str,
    request: Request,
    service: LlmsTxtService = Depends(get_service),
) -> Response:
    """Map, generate and return one document as raw text."""
    target_url, wants_full = _split_target(target)
    api_key = request.query_params.get(_KEY_NAME) or request.headers.get(_KEY_NAME)

    try:
        urls = service.map_urls(target_url, api_key)
    except LlmsTxtError as exc:
        return _error(f"Error from /api/map: {exc.message}", exc.status_code)

    try:
        docs = service.generate(ScrapeRequest(url=target_url, urls=urls, api_key=api_key))
    except LlmsTxtError as exc:
        return _error(f"Error from /api/service: {exc.message}", exc.status_code)

    if wants_full:
        if not docs.llms_fulltxt:
            logger.error("llmsfulltxt is undefined in the response")
            return _error("llmsfulltxt is undefined in the response", 500)
        body = render_raw_text("llmsfulltxt", docs.llms_fulltxt)
    else:
        body = render_raw_text("llmstxt", docs.llmstxt)

    return Response(content=body, media_type="application/json")
