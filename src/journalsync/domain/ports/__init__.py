"""Domain port definitions for adapters."""

from __future__ import annotations

from .documents import DocumentParser, ResourceDownloader
from .journal import CollectionCodec, JournalClient
from .persistence import CollectionRegistry, LocalResourceStore, ResourceStores
from .unit_of_work import (
    RepositoryCollection,
    SyncRepositories,
    SyncUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "CollectionCodec",
    "CollectionRegistry",
    "DocumentParser",
    "JournalClient",
    "LocalResourceStore",
    "RepositoryCollection",
    "ResourceDownloader",
    "ResourceStores",
    "SyncRepositories",
    "SyncUnitOfWork",
    "UnitOfWork",
]
