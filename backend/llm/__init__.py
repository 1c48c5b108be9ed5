"""LLM-backed page summarisation."""

from backend.llm.summarizer import PageSummary, get_llm, summarize_page, summarize_pages

__all__ = ["PageSummary", "get_llm", "summarize_page", "summarize_pages"]
