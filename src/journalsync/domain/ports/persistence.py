"""Ports for persisting collections and local resources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from journalsync.domain.model import (
        Account,
        CollectionInfo,
        LocalResource,
        ServiceType,
    )


@runtime_checkable
class CollectionRegistry(Protocol):
    """Known collections, scoped to one account and service type."""

    def get_service_id(self, account: Account, service_type: ServiceType) -> int: ...

    def list_collections(self, service_id: int) -> list[CollectionInfo]: ...

    def replace_collections(self, service_id: int, collections: Iterable[CollectionInfo]) -> None:
        """Delete every record of the scope, then insert ``collections``."""
        ...


@runtime_checkable
class LocalResourceStore(Protocol):
    """Uid-indexed resources of one collection."""

    @property
    def collection_url(self) -> str: ...

    def find_by_uid(self, uid: str) -> LocalResource | None: ...

    def create(self, resource: LocalResource) -> LocalResource: ...

    def update(self, resource: LocalResource) -> None: ...

    def delete(self, resource: LocalResource) -> None: ...

    def mark_dirty(self, resource: LocalResource, *, content: str | None = None) -> None: ...

    def mark_deleted(self, resource: LocalResource) -> None: ...

    def list_dirty(self) -> list[LocalResource]: ...

    def list_deleted(self) -> list[LocalResource]: ...

    def verify_dirty(self) -> int:
        """Clear dirty flags that do not stand for a content change; return the rest."""
        ...

    def mark_synced(self, resource: LocalResource) -> None: ...

    def purge(self, resource: LocalResource) -> None: ...

    def set_members(self, group: LocalResource, members: Iterable[LocalResource]) -> None: ...

    def list_members(self, group: LocalResource) -> list[LocalResource]: ...

    def get_cursor(self) -> str | None: ...

    def set_cursor(self, entry_uid: str | None) -> None: ...


@runtime_checkable
class ResourceStores(Protocol):
    """Hands out stores bound to one collection."""

    def bind(self, collection_url: str) -> LocalResourceStore: ...


__all__ = ["CollectionRegistry", "LocalResourceStore", "ResourceStores"]
