"""Repository ingestion: reference resolution, tree crawl, aggregation."""

from repochat.ingest.aggregator import Aggregate, aggregate
from repochat.ingest.crawler import CrawledFile, TreeCrawler
from repochat.ingest.github import FetchFailed, GitHubClient, ListingFailed, RemoteEntry
from repochat.ingest.pipeline import IngestResult, ingest_repository
from repochat.ingest.resolver import NotAGitHubUrl, RepoRef, resolve

__all__ = [
    "Aggregate",
    "CrawledFile",
    "FetchFailed",
    "GitHubClient",
    "IngestResult",
    "ListingFailed",
    "NotAGitHubUrl",
    "RemoteEntry",
    "RepoRef",
    "TreeCrawler",
    "aggregate",
    "ingest_repository",
    "resolve",
]
