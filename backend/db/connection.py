"""SQLite connection factory for the llms.txt cache.

Usage::

    from backend.db.connection import get_connection

    conn = get_connection()
    row = conn.execute("SELECT COUNT(*) FROM cache").fetchone()
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from backend.config import Settings, settings as default_settings


def get_connection(
    db_path: Optional[Path] = None,
    settings: Optional[Settings] = None,
) -> sqlite3.Connection:
    """Open and configure a SQLite connection.

    The connection is shared across request threads by the API, so it is
    opened with ``check_same_thread=False`` and switched to WAL mode.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.db_path``.
        settings: Settings to resolve the default path from.

    Returns:
        A configured :class:`sqlite3.Connection` with ``row_factory`` set to
        :class:`sqlite3.Row` so columns can be accessed by name.
    """
    cfg = settings or default_settings
    path = db_path or cfg.db_path

    # Create parent directory if needed (no-op for `:memory:`)
    if str(path) != ":memory:":
        cfg.ensure_workspace()

    conn = sqlite3.connect(str(path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")

    return conn
