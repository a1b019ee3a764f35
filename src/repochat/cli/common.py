"""Helpers shared by the repochat commands."""

from __future__ import annotations

import contextlib
import json
import sqlite3
from pathlib import Path
from typing import Iterator, NoReturn

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from repochat.cli import errors
from repochat.config import ConfigError, RepoChatConfig, load_config
from repochat.db.connection import Database
from repochat.db.repository import StoreError
from repochat.db.schema import initialize
from repochat.errors import RepoChatError
from repochat.ingest.github import ListingFailed
from repochat.ingest.resolver import NotAGitHubUrl
from repochat.rag.assembler import RepositoryNotFound
from repochat.rag.chat import MissingCredential
from repochat.rag.llm_client import ProviderError

console = Console()


def load_cfg() -> RepoChatConfig:
    """Load layered config or exit with an error message."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(errors.err_config(str(exc)))
        raise typer.Exit(1)


def open_db(db_path: Path) -> sqlite3.Connection:
    """Open (or create) the record store and run migrations."""
    conn = Database(db_path).connect()
    initialize(conn)
    return conn


@contextlib.contextmanager
def spinner(description: str, enabled: bool = True) -> Iterator[None]:
    if not enabled:
        yield
        return
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
        console=console,
    ) as prog:
        prog.add_task(description, total=None)
        yield


def emit_json(data: dict) -> None:
    typer.echo(json.dumps(data, ensure_ascii=False))


def fail(exc: RepoChatError, as_json: bool, context: str = "") -> NoReturn:
    """Report *exc* (rich message or JSON body) and exit 1."""
    if as_json:
        emit_json(errors.error_payload(exc))
    else:
        console.print(_message_for(exc, context))
    raise typer.Exit(1)


def _message_for(exc: RepoChatError, context: str) -> str:
    if isinstance(exc, NotAGitHubUrl):
        return errors.err_invalid_url(context)
    if isinstance(exc, MissingCredential):
        return errors.err_no_api_key()
    if isinstance(exc, RepositoryNotFound):
        return errors.err_repository_not_found(context)
    if isinstance(exc, ListingFailed):
        return errors.err_listing_failed(str(exc))
    if isinstance(exc, ProviderError):
        return errors.err_provider(str(exc))
    if isinstance(exc, StoreError):
        return errors.err_store(str(exc))
    return f"[red]Error ({exc.status_code}):[/] {exc}"
