"""GitHub contents API client — directory listings and raw file downloads.

Requests are plain urllib.request calls, one at a time. No authentication
is sent, so only public repositories are reachable. No timeout is applied
unless one is configured.
"""

from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any

from repochat.config import DEFAULT_GITHUB_API
from repochat.errors import RepoChatError

_ACCEPT = "application/vnd.github.v3+json"


class ListingFailed(RepoChatError):
    """A directory listing request failed; the whole crawl is aborted."""

    status_code = 500


class FetchFailed(RepoChatError):
    """A raw file download failed; callers skip the file."""

    status_code = 500


@dataclass(frozen=True)
class RemoteEntry:
    """One item of a contents listing."""

    name: str
    path: str
    kind: str  # "file" | "dir" | "symlink" | "submodule"
    download_url: str | None = None

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> RemoteEntry:
        return cls(
            name=str(item.get("name", "")),
            path=str(item.get("path", "")),
            kind=str(item.get("type", "")),
            download_url=item.get("download_url") or None,
        )


class GitHubClient:
    """Thin client for ``GET /repos/{owner}/{name}/contents/{path}``."""

    def __init__(
        self,
        api_base: str = DEFAULT_GITHUB_API,
        timeout: float | None = None,
        user_agent: str = "repochat/0.1",
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent

    def contents_url(self, owner: str, name: str, path: str = "") -> str:
        quoted = urllib.parse.quote(path.strip("/"))
        return f"{self.api_base}/repos/{owner}/{name}/contents/{quoted}"

    def list_directory(self, owner: str, name: str, path: str = "") -> list[RemoteEntry]:
        """Return the entries of one directory, in API order.

        Raises:
            ListingFailed: On transport error, non-2xx status, or a body that
                is not a JSON list.
        """
        url = self.contents_url(owner, name, path)
        try:
            body = self._get(url, accept=_ACCEPT)
        except urllib.error.HTTPError as exc:
            raise ListingFailed(
                f"GitHub API error: {exc.code} {exc.reason} ({owner}/{name}/{path})"
            ) from exc
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise ListingFailed(f"GitHub API error: {exc} ({owner}/{name}/{path})") from exc

        try:
            items = json.loads(body)
        except json.JSONDecodeError as exc:
            raise ListingFailed(f"GitHub API returned invalid JSON for '{path or '/'}'") from exc
        if not isinstance(items, list):
            raise ListingFailed(f"GitHub API did not return a directory listing for '{path or '/'}'")
        return [RemoteEntry.from_api(i) for i in items if isinstance(i, dict)]

    def fetch_raw(self, url: str) -> str:
        """Download a raw file and decode it as UTF-8 (invalid bytes replaced).

        Raises:
            FetchFailed: On transport error or non-2xx status.
        """
        try:
            body = self._get(url)
        except urllib.error.HTTPError as exc:
            raise FetchFailed(f"{exc.code} {exc.reason}") from exc
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise FetchFailed(str(exc)) from exc
        return body.decode("utf-8", errors="replace")

    def _get(self, url: str, accept: str | None = None) -> bytes:
        headers = {"User-Agent": self.user_agent}
        if accept:
            headers["Accept"] = accept
        request = urllib.request.Request(url, headers=headers)
        kwargs: dict[str, Any] = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        with urllib.request.urlopen(request, **kwargs) as response:
            status = getattr(response, "status", 200)
            if not 200 <= status < 300:
                raise urllib.error.HTTPError(url, status, "Unexpected status", response.headers, None)
            return response.read()
