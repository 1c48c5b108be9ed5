"""Centralised settings for the llms.txt generator backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).

The request pipeline never reads the module-level ``settings`` directly:
``create_app`` and ``LlmsTxtService`` receive a :class:`Settings` instance
at construction so tests can hand in their own.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _optional_env(name: str) -> Optional[str]:
    """Return the env var *name*, treating an empty string as unset."""
    value = os.environ.get(name, "").strip()
    return value or None


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / cache storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("LLMSTXT_WORKSPACE", Path.home() / ".llmstxt_data")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite cache database file."""
        return self.workspace_dir / "cache.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    cache_max_age_days: float = field(
        default_factory=lambda: float(os.environ.get("CACHE_MAX_AGE_DAYS", "3"))
    )

    # ------------------------------------------------------------------
    # Firecrawl (map + batch scrape)
    # ------------------------------------------------------------------
    firecrawl_api_key: Optional[str] = field(
        default_factory=lambda: _optional_env("FIRECRAWL_API_KEY")
    )
    firecrawl_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "FIRECRAWL_BASE_URL", "https://api.firecrawl.dev"
        )
    )
    batch_poll_interval: float = field(
        default_factory=lambda: float(os.environ.get("BATCH_POLL_INTERVAL", "2.0"))
    )
    # The hosting environment gives a request five minutes in total.
    batch_max_wait: float = field(
        default_factory=lambda: float(os.environ.get("BATCH_MAX_WAIT", "300.0"))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "60.0"))
    )

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------
    default_page_limit: int = field(
        default_factory=lambda: int(os.environ.get("DEFAULT_PAGE_LIMIT", "10"))
    )
    unlimited_page_limit: int = field(
        default_factory=lambda: int(os.environ.get("UNLIMITED_PAGE_LIMIT", "100"))
    )
    public_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "PUBLIC_BASE_URL", "http://llmstxt.firecrawl.dev"
        )
    )

    # ------------------------------------------------------------------
    # Summarisation model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "gemini")
    )
    gemini_api_key: Optional[str] = field(
        default_factory=lambda: _optional_env("GEMINI_API_KEY")
    )
    gemini_base_url: str = field(
        default_factory=lambda: os.environ.get(
            "GEMINI_BASE_URL",
            "https://generativelanguage.googleapis.com/v1beta/openai",
        )
    )
    gemini_chat_model: str = field(
        default_factory=lambda: os.environ.get("GEMINI_CHAT_MODEL", "gemini-1.5-flash")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    summary_concurrency: int = field(
        default_factory=lambda: int(os.environ.get("SUMMARY_CONCURRENCY", "1"))
    )

    # ------------------------------------------------------------------
    # Repository-content proxy
    # ------------------------------------------------------------------
    repo_proxy_base_url: str = field(
        default_factory=lambda: os.environ.get("REPO_PROXY_BASE_URL", "https://uithub.com")
    )
    repo_max_tokens: int = field(
        default_factory=lambda: int(os.environ.get("REPO_MAX_TOKENS", "1000"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton used by the CLI and the default app instance:
#   from backend.config import settings
settings = Settings()
