"""Ingestion pipeline: resolve → crawl → aggregate → persist (once).

Any failure before the insert leaves the store untouched; there is no
partially ingested repository state.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from repochat.config import DEFAULT_EXTENSIONS
from repochat.db.models import RepositoryRecord
from repochat.db.repository import Store
from repochat.ingest.aggregator import aggregate
from repochat.ingest.crawler import ContentsClient, TreeCrawler
from repochat.ingest.resolver import resolve
from repochat.log import get_logger

logger = get_logger(__name__)


@dataclass
class IngestResult:
    record: RepositoryRecord
    file_count: int

    def to_dict(self) -> dict:
        return {
            "success": True,
            "repository": self.record.to_dict(),
            "fileCount": self.file_count,
        }


def ingest_repository(
    reference: str,
    store: Store,
    client: ContentsClient,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> IngestResult:
    """Crawl the repository behind *reference* and store one RepositoryRecord.

    Raises:
        NotAGitHubUrl: *reference* is not a github.com/owner/name URL.
        ListingFailed: A directory listing failed.
        StoreError: The record could not be written.
    """
    ref = resolve(reference)
    logger.info("Ingesting %s", ref)

    files = TreeCrawler(client, extensions).crawl(ref.owner, ref.name)
    agg = aggregate(files)

    record = store.insert_repository(
        RepositoryRecord(
            repo_url=reference,
            repo_owner=ref.owner,
            repo_name=ref.name,
            code_content=agg.blob,
            file_structure=agg.mapping,
        )
    )
    logger.info("Stored %s as %s (%d files)", ref, record.id, agg.file_count)
    return IngestResult(record=record, file_count=agg.file_count)
