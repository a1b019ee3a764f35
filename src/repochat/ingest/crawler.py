"""Depth-first repository tree crawler.

Walks the remote tree with an explicit stack of open listings, so nesting
depth is not bounded by the interpreter's recursion limit. A directory is
expanded as soon as it is encountered, before the rest of its parent's
listing, which reproduces recursive depth-first order exactly.

Failure policy:
- directory listing failure → ListingFailed propagates, crawl aborted.
- file download failure     → logged and skipped, crawl continues.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol

from repochat.config import DEFAULT_EXTENSIONS
from repochat.ingest.github import FetchFailed, RemoteEntry
from repochat.log import get_logger

logger = get_logger(__name__)

_FILE = "file"
_DIR = "dir"


class ContentsClient(Protocol):
    def list_directory(self, owner: str, name: str, path: str = "") -> list[RemoteEntry]: ...

    def fetch_raw(self, url: str) -> str: ...


@dataclass(frozen=True)
class CrawledFile:
    path: str
    content: str


def file_extension(filename: str) -> str | None:
    """Text after the last '.', case-folded. None if the name has no '.'."""
    if "." not in filename:
        return None
    ext = filename.rsplit(".", 1)[1].casefold()
    return ext or None


class TreeCrawler:
    """Collect the text of every allowlisted file in a repository."""

    def __init__(
        self,
        client: ContentsClient,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    ) -> None:
        self.client = client
        self.extensions = frozenset(e.casefold().lstrip(".") for e in extensions)

    def is_selected(self, entry: RemoteEntry) -> bool:
        """True if *entry* is a file with an allowlisted extension and a raw URL."""
        if entry.kind != _FILE or not entry.download_url:
            return False
        return file_extension(entry.name) in self.extensions

    def crawl(self, owner: str, name: str) -> list[CrawledFile]:
        """Return (path, content) for every selected file, in traversal order.

        Raises:
            ListingFailed: If any directory listing fails.
        """
        files: list[CrawledFile] = []
        stack: list[Iterator[RemoteEntry]] = [self._listing(owner, name, "")]

        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue
            if entry.kind == _DIR:
                stack.append(self._listing(owner, name, entry.path))
            elif self.is_selected(entry):
                crawled = self._fetch(entry)
                if crawled is not None:
                    files.append(crawled)

        logger.info("Crawled %s/%s: %d files captured", owner, name, len(files))
        return files

    def _listing(self, owner: str, name: str, path: str) -> Iterator[RemoteEntry]:
        logger.debug("Listing %s/%s:/%s", owner, name, path)
        return iter(self.client.list_directory(owner, name, path))

    def _fetch(self, entry: RemoteEntry) -> CrawledFile | None:
        try:
            content = self.client.fetch_raw(entry.download_url)
        except FetchFailed as exc:
            logger.warning("Error fetching %s: %s — skipped", entry.path, exc)
            return None
        return CrawledFile(path=entry.path, content=content)
