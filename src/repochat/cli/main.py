"""repochat CLI entry point."""

from __future__ import annotations

import importlib.metadata
from typing import Annotated

import typer

from repochat.cli.ask import ask_cmd
from repochat.cli.browse import history_cmd, list_cmd, show_cmd
from repochat.cli.ingest import ingest_cmd
from repochat.cli.init_config import init_config_cmd
from repochat.log import configure_logging


def _installed_version() -> str:
    try:
        return importlib.metadata.version("repochat")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"repochat {_installed_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="repochat",
    help=(
        "repochat — ask questions about a public GitHub repository.\n\n"
        "  repochat ingest  Crawl a repository into the local record store.\n"
        "  repochat ask     Answer a question using the stored code as context."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """repochat — ask questions about a public GitHub repository."""
    configure_logging(verbose)


app.command("ingest")(ingest_cmd)
app.command("ask")(ask_cmd)
app.command("history")(history_cmd)
app.command("list")(list_cmd)
app.command("show")(show_cmd)
app.command("init-config")(init_config_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed repochat version."""
    typer.echo(f"repochat {_installed_version()}")


if __name__ == "__main__":
    app()
