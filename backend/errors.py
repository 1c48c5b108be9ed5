"""Exception hierarchy for the generation pipeline.

Every error the pipeline raises on purpose derives from :class:`LlmsTxtError`
and carries the HTTP status the API layer should answer with.  Nothing in the
pipeline retries: the first failure aborts the request.
"""

from __future__ import annotations


class LlmsTxtError(Exception):
    """Base class for pipeline failures."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(LlmsTxtError):
    """A required credential (scraping or LLM) is not configured."""


class UpstreamError(LlmsTxtError):
    """An external service (Firecrawl, the LLM, the repository proxy) failed.

    ``status_code`` mirrors the upstream HTTP status when there is one.
    """


class CacheWriteError(LlmsTxtError):
    """Persisting the generated documents failed."""


class MissingFieldError(LlmsTxtError):
    """An expected field is absent from a request or a response."""
