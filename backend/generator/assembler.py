"""Assembly of the ``llms.txt`` and ``llms-full.txt`` documents.

Layout::

    # <url> llms.txt

    - [Title](https://page): Description
    - ...

    # <url> llms-full.txt

    <page markdown><page markdown>...

Documents produced for the default tier are prefixed with a notice that they
are incomplete, followed by a blank line.
"""

from __future__ import annotations

from typing import Literal
from urllib.parse import urlparse

from backend.config import Settings
from backend.llm.summarizer import PageSummary
from backend.scraper.models import PageResult

DocKind = Literal["llms.txt", "llms-full.txt"]

_NOTICE_NAMES: dict[str, str] = {"llms.txt": "llmstxt.txt", "llms-full.txt": "llms-full.txt"}


def header(url: str, kind: DocKind) -> str:
    return f"# {url} {kind}\n\n"


def build_llms_txt(url: str, pages: list[PageResult], summaries: list[PageSummary]) -> str:
    """Index document: one bullet per page, in fetch order."""
    if len(pages) != len(summaries):
        raise ValueError(
            f"{len(pages)} page(s) but {len(summaries)} summary(ies)"
        )
    lines = [
        f"- [{s.title}]({p.url}): {s.description}\n"
        for p, s in zip(pages, summaries)
    ]
    return header(url, "llms.txt") + "".join(lines)


def build_llms_full_txt(url: str, pages: list[PageResult]) -> str:
    """Full document: every page's markdown back to back, no separator."""
    return header(url, "llms-full.txt") + "".join(p.markdown for p in pages)


def build_repository_docs(url: str, blob: str) -> tuple[str, str]:
    """Repository mode uses the same fetched blob for both documents."""
    return header(url, "llms.txt") + blob, header(url, "llms-full.txt") + blob


def disclaimer(kind: DocKind, url: str, settings: Settings) -> str:
    """Notice prepended to documents generated on the default tier.

    The wording, including "This is llmstxt.txt", is what existing clients
    of the hosted service receive and is kept as is.
    """
    name = _NOTICE_NAMES[kind]
    base = settings.public_base_url.rstrip("/")
    site = urlparse(base).netloc or base
    return (
        f"*Note: This is {name} is not complete, please enter a Firecrawl API key "
        f"to get the entire {name} at {site} or you can access llms.txt via API "
        f"with curl -X GET '{base}/{url}?FIRECRAWL_API_KEY=YOUR_API_KEY' or "
        f"llms-full.txt via API with curl -X GET "
        f"'{base}/{url}/full?FIRECRAWL_API_KEY=YOUR_API_KEY'\n\n"
    )


def apply_disclaimer(document: str, kind: DocKind, url: str, settings: Settings) -> str:
    return disclaimer(kind, url, settings) + document
