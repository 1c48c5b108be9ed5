"""Document generation: tiers, assembly, and the request handler."""

from backend.generator.service import GeneratedDocs, LlmsTxtService, ScrapeRequest
from backend.generator.tiers import Tier, resolve_tier

__all__ = ["GeneratedDocs", "LlmsTxtService", "ScrapeRequest", "Tier", "resolve_tier"]
