"""Session state threaded through the sync phases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from journalsync.domain.model import SyncTrigger

if TYPE_CHECKING:
    from journalsync.domain.model import Account, CollectionInfo
    from journalsync.domain.ports import (
        DocumentParser,
        JournalClient,
        LocalResourceStore,
        ResourceDownloader,
        SyncUnitOfWork,
    )


@dataclass(slots=True)
class SyncStats:
    """Counters accumulated while replaying one session."""

    inserts: int = 0
    updates: int = 0


@dataclass(slots=True)
class PendingMemberships:
    """Group memberships seen during replay, applied once the batch is materialized."""

    _members_by_group: dict[str, tuple[str, ...]] = field(default_factory=dict[str, tuple[str, ...]])

    def __len__(self) -> int:
        return len(self._members_by_group)

    def queue(self, group_uid: str, member_uids: tuple[str, ...]) -> None:
        # later entries for the same group replace earlier ones
        self._members_by_group.pop(group_uid, None)
        self._members_by_group[group_uid] = member_uids

    def discard(self, group_uid: str) -> None:
        self._members_by_group.pop(group_uid, None)

    def drain(self) -> list[tuple[str, tuple[str, ...]]]:
        drained = list(self._members_by_group.items())
        self._members_by_group.clear()
        return drained


@dataclass(slots=True, kw_only=True)
class SyncContext:
    account: Account
    collection: CollectionInfo
    journal: JournalClient
    uow: SyncUnitOfWork
    parser: DocumentParser
    downloader: ResourceDownloader | None = None
    trigger: SyncTrigger = SyncTrigger.PERIODIC
    stats: SyncStats = field(default_factory=SyncStats)
    memberships: PendingMemberships = field(default_factory=PendingMemberships)
    store: LocalResourceStore | None = None

    @property
    def local(self) -> LocalResourceStore:
        if self.store is None:
            raise RuntimeError("Sync context has no bound resource store; run prepare() first")
        return self.store

    @property
    def journal_uid(self) -> str:
        if self.collection.url is None:
            raise ValueError("Collection has no journal url")
        return self.collection.url


@dataclass(slots=True, kw_only=True)
class SyncResult:
    """Outcome of one sync session."""

    collection_url: str
    stats: SyncStats
    pulled: int = 0
    pushed: int = 0
    memberships: int = 0
    skipped: bool = False
