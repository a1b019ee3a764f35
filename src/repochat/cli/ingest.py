"""repochat ingest — crawl a public GitHub repository into the record store."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from repochat.cli.common import console, emit_json, fail, load_cfg, open_db, spinner
from repochat.db.repository import Store
from repochat.errors import RepoChatError
from repochat.ingest.github import GitHubClient
from repochat.ingest.pipeline import ingest_repository


def ingest_cmd(
    url: Annotated[str, typer.Argument(help="Repository URL, e.g. https://github.com/owner/name.")],
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the record store (created if missing)."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the stored record as JSON."),
    ] = False,
) -> None:
    """Fetch every source/markup/config file of a repository and store it."""
    cfg = load_cfg()
    client = GitHubClient(
        api_base=cfg.ingest.api_base,
        timeout=cfg.ingest.timeout,
        user_agent=cfg.ingest.user_agent,
    )

    conn = open_db(db or Path(cfg.store.path))
    try:
        with spinner(f"Crawling {url}…", enabled=not as_json):
            result = ingest_repository(url, Store(conn), client, cfg.ingest.extensions)
    except RepoChatError as exc:
        fail(exc, as_json, context=url)
    finally:
        conn.close()

    if as_json:
        emit_json(result.to_dict())
        return

    record = result.record
    console.print(f"[green]✓[/] Ingested [bold]{record.full_name}[/] — {result.file_count} files")
    console.print(f"  Repository id: [bold]{record.id}[/]")
    console.print(f"  Ask:  repochat ask {record.id} \"How is this project structured?\"")
