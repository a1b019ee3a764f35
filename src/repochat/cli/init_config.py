"""repochat init-config — write the global defaults file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from repochat.cli.common import console
from repochat.config import ensure_global_config, global_config_path


def init_config_cmd(
    path: Annotated[
        Path | None,
        typer.Option("--path", hidden=True, help="Override ~/.repochat/config.yaml (for testing)."),
    ] = None,
) -> None:
    """Create ~/.repochat/config.yaml with defaults (never overwrites)."""
    existed = (path if path is not None else global_config_path()).exists()
    target = ensure_global_config(path)
    if existed:
        console.print(f"[dim]Config already exists:[/] {target}")
    else:
        console.print(f"[green]✓[/] Config: {target}")
    console.print("  API keys go in the environment:  export GEMINI_API_KEY=...")
