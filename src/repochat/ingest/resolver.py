"""Repository reference resolver: 'github.com/owner/name' → (owner, name)."""

from __future__ import annotations

import re
from typing import NamedTuple

from repochat.errors import RepoChatError

# First two path segments after the host marker. No existence check is made.
_GITHUB_RE = re.compile(r"github\.com/([^/]+)/([^/]+)")
_GIT_SUFFIX = ".git"


class NotAGitHubUrl(RepoChatError, ValueError):
    """The reference does not contain a github.com/owner/name pattern."""

    status_code = 400


class RepoRef(NamedTuple):
    owner: str
    name: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


def resolve(reference: str) -> RepoRef:
    """Extract (owner, name) from *reference*, stripping a trailing ``.git``.

    Raises:
        NotAGitHubUrl: If the host/owner/name pattern is absent.
    """
    match = _GITHUB_RE.search(reference or "")
    if not match:
        raise NotAGitHubUrl(f"Invalid GitHub repository URL: {reference!r}")
    owner, name = match.groups()
    if name.endswith(_GIT_SUFFIX):
        name = name[: -len(_GIT_SUFFIX)]
    return RepoRef(owner=owner, name=name)
