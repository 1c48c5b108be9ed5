"""Read / write helpers for the generated-documents cache.

Rows are keyed by ``(url, no_limit)``: the same target URL is cached
separately for the default and the unlimited tier because only the default
tier carries the truncation notice.

A row older than ``max_age_days`` is treated as absent but is not deleted;
the next successful generation for the same key overwrites it.
"""

from __future__ import annotations

import logging
import sqlite3
from time import time

from backend.db.models import CacheEntry, CacheError, CacheHit, CacheLookup, CacheMiss
from backend.errors import CacheWriteError

logger = logging.getLogger(__name__)


def _row_to_entry(row: sqlite3.Row) -> CacheEntry:
    return CacheEntry(
        url=row["url"],
        no_limit=bool(row["no_limit"]),
        llmstxt=row["llmstxt"],
        llmsfulltxt=row["llmsfulltxt"],
        cached_at=int(row["cached_at"]),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def get_entry(conn: sqlite3.Connection, url: str, no_limit: bool) -> CacheEntry | None:
    """Return the row stored for ``(url, no_limit)`` regardless of age."""
    row = conn.execute(
        """
        SELECT url, no_limit, llmstxt, llmsfulltxt, cached_at
        FROM   cache
        WHERE  url = ? AND no_limit = ?
        """,
        (url, int(no_limit)),
    ).fetchone()
    return _row_to_entry(row) if row else None


def lookup_cache(
    conn: sqlite3.Connection,
    url: str,
    no_limit: bool,
    max_age_days: float,
    now: float | None = None,
) -> CacheLookup:
    """Look up a fresh cache entry for ``(url, no_limit)``.

    Returns:
        :class:`CacheHit` when a row younger than *max_age_days* exists,
        :class:`CacheMiss` when there is no row or only a stale one (the stale
        row is attached for logging), and :class:`CacheError` when the read
        itself failed.  Read failures never raise.
    """
    try:
        entry = get_entry(conn, url, no_limit)
    except sqlite3.Error as exc:
        return CacheError(reason=str(exc))

    if entry is None:
        return CacheMiss()

    current = time() if now is None else now
    if entry.age_days(current) < max_age_days:
        return CacheHit(entry=entry)
    return CacheMiss(stale=entry)


def store_cache(
    conn: sqlite3.Connection,
    url: str,
    no_limit: bool,
    llmstxt: str,
    llmsfulltxt: str,
    now: float | None = None,
) -> CacheEntry:
    """Insert (or replace) the documents cached for ``(url, no_limit)``.

    The ``UNIQUE (url, no_limit)`` constraint keeps a single row per key; a
    stale row is overwritten in place.

    Raises:
        CacheWriteError: If the write fails.  The caller must not swallow it.
    """
    cached_at = int(time() if now is None else now)
    try:
        with conn:
            conn.execute(
                """
                INSERT INTO cache (url, no_limit, llmstxt, llmsfulltxt, cached_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (url, no_limit) DO UPDATE SET
                    llmstxt     = excluded.llmstxt,
                    llmsfulltxt = excluded.llmsfulltxt,
                    cached_at   = excluded.cached_at
                """,
                (url, int(no_limit), llmstxt, llmsfulltxt, cached_at),
            )
    except sqlite3.Error as exc:
        raise CacheWriteError(f"Failed to insert into cache: {exc}") from exc

    logger.info("[CACHE] stored %s (no_limit=%s)", url, no_limit)
    return CacheEntry(
        url=url,
        no_limit=no_limit,
        llmstxt=llmstxt,
        llmsfulltxt=llmsfulltxt,
        cached_at=cached_at,
    )


def list_entries(conn: sqlite3.Connection) -> list[CacheEntry]:
    """Return every cached row, most recently written first."""
    rows = conn.execute(
        """
        SELECT url, no_limit, llmstxt, llmsfulltxt, cached_at
        FROM   cache
        ORDER  BY cached_at DESC
        """
    ).fetchall()
    return [_row_to_entry(r) for r in rows]
