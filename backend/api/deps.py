"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Request

from backend.generator.service import LlmsTxtService


def get_service(request: Request) -> LlmsTxtService:
    """Build a service bound to the app's settings and DB connection."""
    state = request.app.state
    return LlmsTxtService(state.settings, state.db, llm=getattr(state, "llm", None))
