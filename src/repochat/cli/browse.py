"""repochat list / show / history — read-only views over the record store."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.syntax import Syntax
from rich.table import Table

from repochat.cli import errors
from repochat.cli.common import console, fail, load_cfg, open_db
from repochat.db.models import RepositoryRecord, Role
from repochat.db.repository import Store, StoreError

_ROLE_STYLE = {Role.ASKER: "bold cyan", Role.RESPONDER: "bold green"}


def _load_repository(store: Store, repository_id: str) -> RepositoryRecord:
    record = store.get_repository(repository_id)
    if record is None:
        console.print(errors.err_repository_not_found(repository_id))
        raise typer.Exit(1)
    return record


def list_cmd(
    db: Annotated[Path | None, typer.Option("--db", help="Path to the record store.")] = None,
) -> None:
    """List ingested repositories, newest first."""
    cfg = load_cfg()
    conn = open_db(db or Path(cfg.store.path))
    try:
        records = Store(conn).list_repositories()
    except StoreError as exc:
        fail(exc, as_json=False)
    finally:
        conn.close()

    if not records:
        console.print("[yellow]No repositories ingested yet.[/]\n  Run:  repochat ingest <url>")
        return

    table = Table(title="Repositories")
    table.add_column("Id", no_wrap=True)
    table.add_column("Repository")
    table.add_column("Files", justify="right")
    table.add_column("Ingested")
    for r in records:
        table.add_row(r.id, r.full_name, str(len(r.file_structure)), (r.created_at or "")[:19])
    console.print(table)


def show_cmd(
    repository_id: Annotated[str, typer.Argument(help="Repository id.")],
    file: Annotated[
        str | None,
        typer.Option("--file", "-f", help="Print the stored content of one file."),
    ] = None,
    db: Annotated[Path | None, typer.Option("--db", help="Path to the record store.")] = None,
) -> None:
    """List the captured files of a repository, or print one of them."""
    cfg = load_cfg()
    conn = open_db(db or Path(cfg.store.path))
    try:
        record = _load_repository(Store(conn), repository_id)
    except StoreError as exc:
        fail(exc, as_json=False)
    finally:
        conn.close()

    if file is None:
        console.print(f"[bold]{record.full_name}[/] — {len(record.file_structure)} files")
        for path in record.file_structure:
            console.print(f"  {path}", markup=False, highlight=False)
        return

    if file not in record.file_structure:
        console.print(errors.err_file_not_found(file, repository_id))
        raise typer.Exit(1)
    content = record.file_structure[file]
    console.print(f"[bold]{file}[/]")
    console.print(Syntax(content, Syntax.guess_lexer(file, code=content), word_wrap=True))


def history_cmd(
    repository_id: Annotated[str, typer.Argument(help="Repository id.")],
    db: Annotated[Path | None, typer.Option("--db", help="Path to the record store.")] = None,
) -> None:
    """Print the full conversation transcript of a repository."""
    cfg = load_cfg()
    conn = open_db(db or Path(cfg.store.path))
    try:
        store = Store(conn)
        record = _load_repository(store, repository_id)
        turns = store.list_turns(repository_id)
    except StoreError as exc:
        fail(exc, as_json=False)
    finally:
        conn.close()

    if not turns:
        console.print(f"[dim]No conversation yet for {record.full_name}.[/]")
        return

    for turn in turns:
        console.print(f"[{_ROLE_STYLE[turn.role]}]{turn.role.value}[/]  [dim]{turn.created_at}[/]")
        console.print(turn.content, markup=False, highlight=False)
        console.print()
