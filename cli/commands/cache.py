"""Cache commands for inspecting generated documents."""

from time import time

import typer

from backend.config import settings
from backend.db import get_connection, init_db
from backend.db.cache import get_entry, list_entries

cache_app = typer.Typer(help="Inspect cached llms.txt documents.", no_args_is_help=True)


@cache_app.command("list")
def cache_list() -> None:
    """List cached entries with their tier and age."""
    conn = get_connection()
    init_db(conn)
    try:
        entries = list_entries(conn)
    finally:
        conn.close()

    if not entries:
        typer.echo("[cache list] Cache is empty.")
        return

    now = time()
    for e in entries:
        age = e.age_days(now)
        tier = "unlimited" if e.no_limit else "default"
        flag = "" if age < settings.cache_max_age_days else "  (stale)"
        typer.echo(f"  {e.url}  [{tier}]  {age:.1f}d{flag}")


@cache_app.command("show")
def cache_show(
    url: str = typer.Argument(..., help="Target URL the documents were generated for."),
    unlimited: bool = typer.Option(False, "--unlimited", help="Show the unlimited-tier entry."),
    full: bool = typer.Option(False, "--full", help="Show llms-full.txt instead of llms.txt."),
) -> None:
    """Print a cached document, fresh or stale."""
    conn = get_connection()
    init_db(conn)
    try:
        entry = get_entry(conn, url, unlimited)
    finally:
        conn.close()

    if entry is None:
        typer.echo(f"[cache show] No cached entry for {url!r}.")
        raise typer.Exit(code=1)
    typer.echo(entry.llmsfulltxt if full else entry.llmstxt)
