"""Dataclass models for cache rows and cache lookups.

These are plain Python objects, not ORM models.  ``backend.db.cache``
converts between them and ``sqlite3.Row`` values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

_SECONDS_PER_DAY = 60 * 60 * 24


@dataclass(frozen=True)
class CacheEntry:
    url: str
    no_limit: bool
    llmstxt: str
    llmsfulltxt: str
    cached_at: int

    def age_days(self, now: float) -> float:
        """Age of the entry in (fractional) days relative to *now*."""
        return (now - self.cached_at) / _SECONDS_PER_DAY


# ---------------------------------------------------------------------------
# Lookup outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CacheHit:
    entry: CacheEntry


@dataclass(frozen=True)
class CacheMiss:
    stale: CacheEntry | None = None


@dataclass(frozen=True)
class CacheError:
    reason: str


CacheLookup = Union[CacheHit, CacheMiss, CacheError]
