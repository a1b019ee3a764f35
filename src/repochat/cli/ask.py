"""repochat ask — answer a question about an ingested repository."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from repochat.cli.common import console, emit_json, fail, load_cfg, open_db, spinner
from repochat.cli.errors import warn_transcript_not_recorded
from repochat.db.repository import Store
from repochat.errors import RepoChatError
from repochat.rag.assembler import AssemblerConfig
from repochat.rag.chat import ask
from repochat.rag.llm_client import GenerationConfig


def ask_cmd(
    repository_id: Annotated[str, typer.Argument(help="Id printed by `repochat ingest`.")],
    question: Annotated[str, typer.Argument(help="Natural-language question.")],
    api_key: Annotated[
        str | None,
        typer.Option("--api-key", envvar="GEMINI_API_KEY", help="LLM provider credential."),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="LiteLLM model string (overrides chat.model)."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the record store."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print {success, answer} as JSON."),
    ] = False,
) -> None:
    """Ask a question; the answer and question are appended to the transcript."""
    cfg = load_cfg()
    chat_cfg = cfg.chat
    if model:
        chat_cfg = replace(chat_cfg, model=model)
    config = AssemblerConfig(
        model=chat_cfg.model,
        history_window=chat_cfg.history_window,
        generation=GenerationConfig(
            temperature=chat_cfg.temperature,
            top_k=chat_cfg.top_k,
            top_p=chat_cfg.top_p,
            max_output_tokens=chat_cfg.max_output_tokens,
        ),
    )

    conn = open_db(db or Path(cfg.store.path))
    try:
        with spinner("Thinking…", enabled=not as_json):
            result = ask(Store(conn), repository_id, question, api_key, config)
    except RepoChatError as exc:
        fail(exc, as_json, context=repository_id)
    finally:
        conn.close()

    if as_json:
        emit_json(result.to_dict())
    else:
        console.print(result.answer, markup=False, highlight=False)

    if result.transcript_error is not None:
        if not as_json:
            console.print(warn_transcript_not_recorded(str(result.transcript_error)))
        raise typer.Exit(1)
