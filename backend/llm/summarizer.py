"""Per-page title / description generation for ``llms.txt`` bullets.

Each page gets exactly one structured-output completion.  The model must
answer with the :class:`PageSummary` schema (two strings); anything that
cannot be parsed into it aborts the request.

Providers
---------
``gemini`` (default)
    Gemini through its OpenAI-compatible endpoint, via ``ChatOpenAI``.
    Requires ``GEMINI_API_KEY``.

``openai``
    ``ChatOpenAI`` against the OpenAI API (reads ``OPENAI_API_KEY``).

``ollama``
    A local model through ``ChatOllama``.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from pydantic import BaseModel, Field

from backend.config import Settings
from backend.errors import ConfigurationError, UpstreamError
from backend.scraper.models import PageResult

logger = logging.getLogger(__name__)

_PROMPT = (
    "Generate a 9-10 word description and a 3-4 word title of the entire page "
    "based on ALL the content one will find on the page for this url: {url}. "
    "This will help in a user finding the page for its intended purpose. "
    "Here is the content: {markdown}"
)


class PageSummary(BaseModel):
    """Schema the model must answer with."""

    description: str = Field(description="A 9-10 word description of the page.")
    title: str = Field(description="A 3-4 word title for the page.")


# ---------------------------------------------------------------------------
# LLM helper
# ---------------------------------------------------------------------------

def get_llm(settings: Settings) -> Any:
    """Return a configured LangChain chat model based on *settings*."""
    if settings.llm_provider == "ollama":
        from langchain_ollama import ChatOllama

        return ChatOllama(model=settings.ollama_chat_model, temperature=0)

    from langchain_openai import ChatOpenAI

    if settings.llm_provider == "openai":
        return ChatOpenAI(model=settings.openai_chat_model, temperature=0)

    if not settings.gemini_api_key:
        raise ConfigurationError("GEMINI_API_KEY is not set")
    return ChatOpenAI(
        model=settings.gemini_chat_model,
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        temperature=0,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def summarize_page(llm: Any, page: PageResult) -> PageSummary:
    """Ask *llm* for a title and description of *page*.

    Raises:
        UpstreamError: If the call fails or its answer does not fit
            :class:`PageSummary`.
    """
    structured = llm.with_structured_output(PageSummary)
    prompt = _PROMPT.format(url=page.url, markdown=page.markdown)
    try:
        result = structured.invoke([("user", prompt)])
    except Exception as exc:
        raise UpstreamError(
            f"Failed to summarize {page.url}: {exc}",
            status_code=getattr(exc, "status_code", None),
        ) from exc

    if isinstance(result, dict):
        try:
            result = PageSummary.model_validate(result)
        except ValueError as exc:
            raise UpstreamError(f"Failed to parse summary for {page.url}: {exc}") from exc
    if not isinstance(result, PageSummary):
        raise UpstreamError(f"Failed to parse summary for {page.url}")

    logger.debug("[SUMMARIZE] %s -> %r", page.url, result.title)
    return result


def summarize_pages(
    pages: list[PageResult],
    settings: Settings,
    llm: Any | None = None,
) -> list[PageSummary]:
    """Summarise *pages* and return the summaries in page order.

    With ``settings.summary_concurrency <= 1`` the calls run one after the
    other.  Otherwise a bounded thread pool runs them in parallel;
    ``Executor.map`` still yields results in input order.  The first failure
    propagates and aborts the request.
    """
    if not pages:
        return []
    model = llm if llm is not None else get_llm(settings)
    workers = max(1, settings.summary_concurrency)
    logger.info("[SUMMARIZE] %d page(s), %d worker(s)", len(pages), workers)

    if workers == 1:
        return [summarize_page(model, page) for page in pages]

    with ThreadPoolExecutor(max_workers=min(workers, len(pages))) as pool:
        return list(pool.map(lambda page: summarize_page(model, page), pages))
