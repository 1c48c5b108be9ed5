"""Cache database initialisation.

``init_db(conn)`` applies ``schema.sql``; every statement in it uses
``IF NOT EXISTS``, so calling it on an existing cache is a no-op.
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from backend.config import Settings, settings as default_settings


def init_db(conn: sqlite3.Connection, settings: Optional[Settings] = None) -> None:
    """Create the ``cache`` table and its ``cached_at`` index."""
    cfg = settings or default_settings
    conn.executescript(cfg.schema_path.read_text(encoding="utf-8"))
