"""Ports for the remote journal service."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from journalsync.domain.model import CollectionInfo, JournalRef, SyncEntry


@runtime_checkable
class JournalClient(Protocol):
    """Lists journals and reads or appends their entry streams.

    Implementations raise ``HttpError`` for transport failures and
    ``InvalidAccountError`` when the service rejects the credentials.
    """

    def list_journals(self) -> list[JournalRef]: ...

    def put_journal(self, content: bytes) -> JournalRef: ...

    def fetch_entries(self, journal_uid: str, since: str | None = None) -> list[SyncEntry]: ...

    def append_entries(
        self,
        journal_uid: str,
        since: str | None,
        entries: Sequence[SyncEntry],
    ) -> list[str]: ...


@runtime_checkable
class CollectionCodec(Protocol):
    """Translates between journal content payloads and collection records."""

    def decode(self, payload: bytes) -> CollectionInfo: ...

    def encode(self, info: CollectionInfo) -> bytes: ...


__all__ = ["CollectionCodec", "JournalClient"]
