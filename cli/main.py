"""llms.txt generator CLI — entry-point for all backend operations.

Usage:
    llmstxt --help
    python cli/main.py --help

Commands:
    db init     → create the cache schema
    map         → list the URLs Firecrawl discovers for a site
    generate    → build llms.txt / llms-full.txt for a site
    cache       → inspect cached documents
    serve       → run the HTTP API
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from backend.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer

from backend.config import settings
from backend.db import get_connection, init_db
from backend.errors import LlmsTxtError
from backend.generator.service import LlmsTxtService, ScrapeRequest
from backend.logging_config import configure_logging
from cli.commands.cache import cache_app

app = typer.Typer(
    name="llmstxt",
    help="llms.txt generator CLI.",
    no_args_is_help=True,
)
app.add_typer(cache_app, name="cache")


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    configure_logging("DEBUG" if verbose else settings.log_level)


# ---------------------------------------------------------------------------
# DB commands
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Cache database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite cache (create tables if they do not exist)."""
    conn = get_connection()
    init_db(conn)
    conn.close()
    typer.echo(f"[db init] Cache ready at {settings.db_path}")


# ---------------------------------------------------------------------------
# Map / generate
# ---------------------------------------------------------------------------
@app.command("map")
def map_cmd(
    url: str = typer.Argument(..., help="Website to map."),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="Your own Firecrawl API key (unlimited tier)."
    ),
) -> None:
    """Print every URL Firecrawl discovers for a site, one per line."""
    conn = get_connection()
    init_db(conn)
    try:
        urls = LlmsTxtService(settings, conn).map_urls(url, api_key)
    except LlmsTxtError as exc:
        typer.echo(f"[map] Error: {exc.message}", err=True)
        raise typer.Exit(code=1)
    finally:
        conn.close()

    for u in urls:
        typer.echo(u)


@app.command("generate")
def generate(
    url: str = typer.Argument(..., help="Website to generate llms.txt for."),
    full: bool = typer.Option(False, "--full", help="Print llms-full.txt instead of llms.txt."),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="Your own Firecrawl API key (unlimited tier)."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the document to this file instead of stdout."
    ),
) -> None:
    """Map a site, then generate (or replay from cache) its documents."""
    conn = get_connection()
    init_db(conn)
    service = LlmsTxtService(settings, conn)
    try:
        urls = service.map_urls(url, api_key)
        typer.echo(f"[generate] {len(urls)} URL(s) discovered for {url}", err=True)
        docs = service.generate(ScrapeRequest(url=url, urls=urls, api_key=api_key))
    except LlmsTxtError as exc:
        typer.echo(f"[generate] Error: {exc.message}", err=True)
        raise typer.Exit(code=1)
    finally:
        conn.close()

    if docs.cached:
        typer.echo("[generate] Served from cache.", err=True)
    text = docs.llms_fulltxt if full else docs.llmstxt

    if output is not None:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"[generate] Wrote {output}", err=True)
    else:
        typer.echo(text)


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Interface to bind."),
    port: int = typer.Option(8000, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("backend.api.app:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
