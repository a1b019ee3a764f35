"""Fold crawled files into the two persisted artifacts.

- mapping: path → content, insertion (traversal) order, last write wins.
- blob:    every file as ``\\n\\n--- FILE: <path> ---\\n<content>``, concatenated
           in the same order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from repochat.ingest.crawler import CrawledFile

FILE_MARKER = "--- FILE: {path} ---"


@dataclass
class Aggregate:
    mapping: dict[str, str]
    blob: str

    @property
    def file_count(self) -> int:
        return len(self.mapping)


def file_header(path: str) -> str:
    return FILE_MARKER.format(path=path)


def aggregate(files: Iterable[CrawledFile]) -> Aggregate:
    """Build the path→content mapping and the concatenated blob."""
    mapping: dict[str, str] = {}
    parts: list[str] = []
    for f in files:
        mapping[f.path] = f.content
        parts.append(f"\n\n{file_header(f.path)}\n{f.content}")
    return Aggregate(mapping=mapping, blob="".join(parts))
