"""In-memory registry, resource stores and unit of work."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Literal

from journalsync.domain.errors import StoreError
from journalsync.domain.ports import SyncRepositories

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

    from journalsync.domain.model import Account, CollectionInfo, LocalResource, ServiceType


@dataclass
class FakeDatabase:
    services: dict[tuple[str, ServiceType], int] = field(default_factory=dict)
    collections: dict[int, list[CollectionInfo]] = field(default_factory=dict)
    resources: dict[int, LocalResource] = field(default_factory=dict)
    collection_of: dict[int, str] = field(default_factory=dict)
    memberships: dict[int, list[int]] = field(default_factory=dict)
    cursors: dict[str, str] = field(default_factory=dict)
    next_id: int = 1


class FakeCollectionRegistry:
    def __init__(self, database: FakeDatabase) -> None:
        self.database = database

    def get_service_id(self, account: Account, service_type: ServiceType) -> int:
        key = (account.name, service_type)
        return self.database.services.setdefault(key, len(self.database.services) + 1)

    def list_collections(self, service_id: int) -> list[CollectionInfo]:
        return [replace(info) for info in self.database.collections.get(service_id, [])]

    def replace_collections(self, service_id: int, collections: Iterable[CollectionInfo]) -> None:
        self.database.collections[service_id] = [replace(info) for info in collections]


class FakeResourceStore:
    def __init__(self, database: FakeDatabase, collection_url: str) -> None:
        self.database = database
        self._collection_url = collection_url

    @property
    def collection_url(self) -> str:
        return self._collection_url

    def find_by_uid(self, uid: str) -> LocalResource | None:
        for resource in self._own():
            if resource.uid == uid:
                return replace(resource)
        return None

    def create(self, resource: LocalResource) -> LocalResource:
        if self.find_by_uid(resource.uid) is not None:
            raise StoreError(f"Record {resource.uid} already exists")
        resource.id = self.database.next_id
        self.database.next_id += 1
        self.database.resources[resource.id] = replace(resource)
        self.database.collection_of[resource.id] = self._collection_url
        return resource

    def update(self, resource: LocalResource) -> None:
        if resource.id not in self.database.resources:
            raise StoreError(f"Record {resource.uid} vanished")
        self.database.resources[resource.id] = replace(resource)

    def mark_dirty(self, resource: LocalResource, *, content: str | None = None) -> None:
        if content is not None:
            resource.content = content
        resource.dirty = True
        self.update(resource)

    def mark_deleted(self, resource: LocalResource) -> None:
        resource.deleted = True
        self.update(resource)

    def delete(self, resource: LocalResource) -> None:
        self._remove(resource)

    def purge(self, resource: LocalResource) -> None:
        self._remove(resource)

    def list_dirty(self) -> list[LocalResource]:
        return [replace(r) for r in self._own() if r.dirty and not r.deleted]

    def list_deleted(self) -> list[LocalResource]:
        return [replace(r) for r in self._own() if r.deleted]

    def verify_dirty(self) -> int:
        return len(self.list_dirty())

    def mark_synced(self, resource: LocalResource) -> None:
        resource.e_tag = resource.uid
        resource.dirty = False
        self.update(resource)

    def set_members(self, group: LocalResource, members: Iterable[LocalResource]) -> None:
        assert group.id is not None
        self.database.memberships[group.id] = [m.id for m in members if m.id is not None]

    def list_members(self, group: LocalResource) -> list[LocalResource]:
        assert group.id is not None
        return [
            replace(self.database.resources[member_id])
            for member_id in self.database.memberships.get(group.id, [])
        ]

    def member_uids(self, group_uid: str) -> list[str]:
        group = self.find_by_uid(group_uid)
        assert group is not None
        return [member.uid for member in self.list_members(group)]

    def get_cursor(self) -> str | None:
        return self.database.cursors.get(self._collection_url)

    def set_cursor(self, entry_uid: str | None) -> None:
        if entry_uid is None:
            self.database.cursors.pop(self._collection_url, None)
        else:
            self.database.cursors[self._collection_url] = entry_uid

    def all(self) -> list[LocalResource]:
        return [replace(r) for r in self._own()]

    def _own(self) -> list[LocalResource]:
        return [
            resource
            for resource_id, resource in self.database.resources.items()
            if self.database.collection_of[resource_id] == self._collection_url
        ]

    def _remove(self, resource: LocalResource) -> None:
        assert resource.id is not None
        self.database.resources.pop(resource.id, None)
        self.database.collection_of.pop(resource.id, None)
        self.database.memberships.pop(resource.id, None)
        for members in self.database.memberships.values():
            if resource.id in members:
                members.remove(resource.id)


class FakeResourceStores:
    def __init__(self, database: FakeDatabase) -> None:
        self.database = database

    def bind(self, collection_url: str) -> FakeResourceStore:
        return FakeResourceStore(self.database, collection_url)


class FakeUnitOfWork:
    """Shares one :class:`FakeDatabase`; counts commits and rollbacks."""

    def __init__(self, database: FakeDatabase) -> None:
        self.database = database
        self.commits = 0
        self.rollbacks = 0
        self._repositories = SyncRepositories(
            collections=FakeCollectionRegistry(database),
            resources=FakeResourceStores(database),
        )

    @property
    def repositories(self) -> SyncRepositories:
        return self._repositories

    def __enter__(self) -> FakeUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1
