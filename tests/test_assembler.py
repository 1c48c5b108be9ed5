"""Tests for document assembly and the default-tier notice."""

from __future__ import annotations

import pytest

from backend.config import Settings
from backend.generator.assembler import (
    apply_disclaimer,
    build_llms_full_txt,
    build_llms_txt,
    build_repository_docs,
    disclaimer,
)
from backend.llm.summarizer import PageSummary
from backend.scraper.models import PageResult

_PAGES = [
    PageResult(source_url="https://a.com", markdown="# Home\n", url="https://a.com/"),
    PageResult(source_url="https://a.com/docs", markdown="# Docs\n", url="https://a.com/docs"),
]
_SUMMARIES = [
    PageSummary(title="Home Page", description="The landing page of the example site."),
    PageSummary(title="Docs Index", description="Entry point to the example documentation."),
]


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(workspace_dir=tmp_path, firecrawl_api_key="fc-shared")


class TestBuildDocuments:
    def test_llms_txt_layout(self) -> None:
        doc = build_llms_txt("https://a.com", _PAGES, _SUMMARIES)
        assert doc == (
            "# https://a.com llms.txt\n\n"
            "- [Home Page](https://a.com/): The landing page of the example site.\n"
            "- [Docs Index](https://a.com/docs): Entry point to the example documentation.\n"
        )

    def test_llms_txt_mismatched_lengths(self) -> None:
        with pytest.raises(ValueError):
            build_llms_txt("https://a.com", _PAGES, _SUMMARIES[:1])

    def test_full_txt_concatenates_without_separator(self) -> None:
        doc = build_llms_full_txt("https://a.com", _PAGES)
        assert doc == "# https://a.com llms-full.txt\n\n# Home\n# Docs\n"

    def test_no_pages_is_header_only(self) -> None:
        assert build_llms_txt("https://a.com", [], []) == "# https://a.com llms.txt\n\n"

    def test_repository_docs_share_blob(self) -> None:
        short, full = build_repository_docs("https://github.com/org/repo", "blob")
        assert short == "# https://github.com/org/repo llms.txt\n\nblob"
        assert full == "# https://github.com/org/repo llms-full.txt\n\nblob"


class TestDisclaimer:
    def test_mentions_both_api_forms(self, settings: Settings) -> None:
        note = disclaimer("llms.txt", "https://a.com", settings)
        assert note.startswith("*Note: This is llmstxt.txt is not complete")
        assert "to get the entire llmstxt.txt at llmstxt.firecrawl.dev or" in note
        assert "llmstxt.firecrawl.dev" in note
        assert "'http://llmstxt.firecrawl.dev/https://a.com?FIRECRAWL_API_KEY=YOUR_API_KEY'" in note
        assert "'http://llmstxt.firecrawl.dev/https://a.com/full?FIRECRAWL_API_KEY=YOUR_API_KEY'" in note
        assert note.endswith("\n\n")

    def test_prefixes_document(self, settings: Settings) -> None:
        doc = apply_disclaimer("# body", "llms-full.txt", "https://a.com", settings)
        assert doc.startswith("*Note: This is llms-full.txt is not complete")
        assert "to get the entire llms-full.txt at llmstxt.firecrawl.dev or" in doc
        assert doc.endswith("\n\n# body")

    def test_full_wording(self, settings: Settings) -> None:
        assert disclaimer("llms.txt", "https://a.com", settings) == (
            "*Note: This is llmstxt.txt is not complete, please enter a Firecrawl API key "
            "to get the entire llmstxt.txt at llmstxt.firecrawl.dev or you can access "
            "llms.txt via API with curl -X GET "
            "'http://llmstxt.firecrawl.dev/https://a.com?FIRECRAWL_API_KEY=YOUR_API_KEY' "
            "or llms-full.txt via API with curl -X GET "
            "'http://llmstxt.firecrawl.dev/https://a.com/full?FIRECRAWL_API_KEY=YOUR_API_KEY'\n\n"
        )
