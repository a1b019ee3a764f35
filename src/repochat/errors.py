"""Base error type shared by every repochat component.

Each subclass carries an HTTP-style ``status_code`` so the CLI (and any
HTTP front-end) can map failures without inspecting messages:
400 for bad input, 404 for unknown records, 500 for downstream failures.
"""

from __future__ import annotations


class RepoChatError(Exception):
    """Root of the repochat error taxonomy."""

    status_code: int = 500
