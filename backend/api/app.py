"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection to the cache (shared
across all requests via ``request.app.state.db``) and initialises the schema.
On shutdown it closes the connection cleanly.

Routers
-------
    /health          — liveness probe
    /api/map         — site mapping through Firecrawl
    /api/service     — llms.txt / llms-full.txt generation (JSON)
    /{target}[/full] — raw-text facade over the two calls above (mounted last)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.config import Settings, settings as default_settings
from backend.db import get_connection, init_db
from backend.errors import LlmsTxtError, MissingFieldError
from backend.logging_config import configure_logging

from backend.api.routers import generate as generate_router
from backend.api.routers import health as health_router
from backend.api.routers import llmstxt as llmstxt_router

logger = logging.getLogger(__name__)


async def _llmstxt_error_handler(request: Request, exc: LlmsTxtError) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


def _validation_message(exc: RequestValidationError) -> str:
    """Collapse FastAPI's validation details into one line."""
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()) if p != "body") or "body"
        if err.get("type") == "missing":
            parts.append(f"{field} is not defined")
        else:
            parts.append(f"{field}: {err.get('msg')}")
    return "; ".join(parts) or "Invalid request"


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return await _llmstxt_error_handler(
        request, MissingFieldError(_validation_message(exc))
    )


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s crashed", request.method, request.url.path)
    return JSONResponse({"error": "An unexpected error occurred"}, status_code=500)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    cfg = settings or default_settings
    configure_logging(cfg.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Open the cache DB on startup and close it on shutdown."""
        conn = get_connection(settings=cfg)
        init_db(conn, settings=cfg)
        app.state.db = conn
        try:
            yield
        finally:
            conn.close()

    app = FastAPI(
        title="llms.txt Generator API",
        description=(
            "Generates llms.txt and llms-full.txt for a website by mapping and "
            "scraping it with Firecrawl and summarising every page with an LLM. "
            "Results are cached per target URL and caller tier."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = cfg

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LlmsTxtError, _llmstxt_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)

    app.include_router(health_router.router, tags=["health"])
    app.include_router(generate_router.router, prefix="/api", tags=["generate"])
    app.include_router(llmstxt_router.router, tags=["llmstxt"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn backend.api.app:app --reload
app = create_app()
