"""repochat rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from repochat.cli.errors import err_no_api_key
    console.print(err_no_api_key())
    raise typer.Exit(1)
"""

from __future__ import annotations

from repochat.errors import RepoChatError


def err_invalid_url(reference: str) -> str:
    """Reference has no github.com/owner/name part."""
    return (
        f"[red]Error (400):[/] Invalid GitHub repository URL: '{reference}'\n"
        "  Use the form:  https://github.com/<owner>/<name>"
    )


def err_no_api_key() -> str:
    """No credential for the model provider."""
    return (
        "[red]Error (400):[/] Gemini API key is required.\n"
        "  Set:  export GEMINI_API_KEY=...  or pass --api-key"
    )


def err_repository_not_found(repository_id: str) -> str:
    """Unknown repository id."""
    return (
        f"[red]Error (404):[/] Repository not found: '{repository_id}'\n"
        "  Run:  repochat list  to see ingested repositories."
    )


def err_file_not_found(path: str, repository_id: str) -> str:
    """Path is not part of the stored file mapping."""
    return (
        f"[red]Error (404):[/] File '{path}' is not part of repository '{repository_id}'.\n"
        f"  Run:  repochat show {repository_id}  to list captured files."
    )


def err_listing_failed(detail: str) -> str:
    """A directory listing failed and ingestion was aborted."""
    return (
        f"[red]Error (500):[/] Ingestion aborted — {detail}\n"
        "  Nothing was stored. Check that the repository is public and retry later."
    )


def err_provider(detail: str) -> str:
    """Model provider failure."""
    return (
        f"[red]Error (500):[/] {detail}\n"
        "  Check the API key and model name (--model or chat.model in repochat.yaml)."
    )


def err_store(detail: str) -> str:
    """Record store write failure."""
    return (
        f"[red]Error (500):[/] {detail}\n"
        "  Check that the database file is writable."
    )


def err_config(detail: str) -> str:
    """Invalid or forbidden configuration."""
    return f"[red]Error:[/] {detail}"


def warn_transcript_not_recorded(detail: str) -> str:
    """Answer delivered but the exchange was not saved."""
    return (
        f"[yellow]Warning (500):[/] The answer above was not saved to the transcript: {detail}"
    )


def error_payload(exc: RepoChatError) -> dict:
    """JSON body for an error, mirroring the HTTP responses: {error, status}."""
    return {"error": str(exc), "status": exc.status_code}
