"""Generation endpoints.

Routes
------
POST /api/map        Body: {"url", "bringYourOwnFirecrawlApiKey"?}           → {"mapUrls"}
POST /api/service    Body: {"url", "urls", "bringYourOwnFirecrawlApiKey"?}   → {"llmstxt", "llmsFulltxt"}

Pipeline failures are turned into ``{"error": ...}`` responses by the
exception handlers registered in ``app.py``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from backend.api.deps import get_service
from backend.generator.service import LlmsTxtService, ScrapeRequest

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class MapRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    api_key: Optional[str] = Field(default=None, alias="bringYourOwnFirecrawlApiKey")


class MapResponse(BaseModel):
    mapUrls: list[str]


class ServiceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    urls: Optional[list[str]] = None
    api_key: Optional[str] = Field(default=None, alias="bringYourOwnFirecrawlApiKey")


class ServiceResponse(BaseModel):
    llmstxt: str
    llmsFulltxt: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/map", response_model=MapResponse)
def map_endpoint(
    body: MapRequest,
    service: LlmsTxtService = Depends(get_service),
) -> MapResponse:
    """Discover the page URLs of a site through Firecrawl."""
    return MapResponse(mapUrls=service.map_urls(body.url, body.api_key))


@router.post("/service", response_model=ServiceResponse)
def service_endpoint(
    body: ServiceRequest,
    service: LlmsTxtService = Depends(get_service),
) -> ServiceResponse:
    """Generate (or replay from cache) ``llms.txt`` and ``llms-full.txt``."""
    docs = service.generate(
        ScrapeRequest(url=body.url, urls=body.urls, api_key=body.api_key)
    )
    return ServiceResponse(llmstxt=docs.llmstxt, llmsFulltxt=docs.llms_fulltxt)
