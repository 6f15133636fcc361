"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import hashlib
from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from journalsync.adapters.sqlalchemy.mappings import (
    collection_table,
    group_membership_table,
    resource_table,
    service_table,
    sync_state_table,
)
from journalsync.domain.errors import StoreError
from journalsync.domain.model import CollectionInfo, LocalResource

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from sqlalchemy import Row, Select
    from sqlalchemy.orm import Session

    from journalsync.domain.model import Account, ServiceType
    from journalsync.domain.ports import CollectionRegistry, LocalResourceStore, ResourceStores

log = getLogger(__name__)


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StoreError(f"Could not {action}: {exc}") from exc


def content_hash(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class SqlAlchemyCollectionRegistry:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_service_id(self, account: Account, service_type: ServiceType) -> int:
        stmt = (
            select(service_table.c.id)
            .where(service_table.c.account_name == account.name)
            .where(service_table.c.service_type == service_type)
        )
        with _store_errors(f"resolve service {service_type} of {account.name}"):
            service_id = self.session.execute(stmt).scalar_one_or_none()
            if service_id is not None:
                return service_id
            result = self.session.execute(
                insert(service_table).values(account_name=account.name, service_type=service_type)
            )
        log.debug(f"Registered service {service_type} for account {account.name}")
        return result.inserted_primary_key[0]

    def list_collections(self, service_id: int) -> list[CollectionInfo]:
        stmt = (
            select(collection_table, service_table.c.service_type)
            .join(service_table, service_table.c.id == collection_table.c.service_id)
            .where(collection_table.c.service_id == service_id)
            .order_by(collection_table.c.id)
        )
        with _store_errors(f"list collections of service {service_id}"):
            rows = self.session.execute(stmt).all()
        return [
            CollectionInfo(
                url=row.url,
                service_type=row.service_type,
                display_name=row.display_name,
                description=row.description,
                color=row.color,
                read_only=row.read_only,
            )
            for row in rows
        ]

    def replace_collections(self, service_id: int, collections: Iterable[CollectionInfo]) -> None:
        values = [
            {
                "service_id": service_id,
                "url": info.url,
                "display_name": info.display_name,
                "description": info.description,
                "color": info.color,
                "read_only": info.read_only,
            }
            for info in collections
        ]
        with _store_errors(f"replace collections of service {service_id}"):
            self.session.execute(
                delete(collection_table).where(collection_table.c.service_id == service_id)
            )
            if values:
                self.session.execute(insert(collection_table), values)


class SqlAlchemyResourceStore:
    """Resources of a single collection; rows of other collections are never touched."""

    def __init__(self, session: Session, collection_url: str) -> None:
        self.session = session
        self._collection_url = collection_url

    @property
    def collection_url(self) -> str:
        return self._collection_url

    def find_by_uid(self, uid: str) -> LocalResource | None:
        stmt = self._select().where(resource_table.c.uid == uid)
        with _store_errors(f"look up {uid}"):
            row = self.session.execute(stmt).first()
        return _to_resource(row) if row is not None else None

    def create(self, resource: LocalResource) -> LocalResource:
        if self.find_by_uid(resource.uid) is not None:
            raise StoreError(f"Record {resource.uid} already exists in {self._collection_url}")
        values = _values(resource)
        values["collection_url"] = self._collection_url
        with _store_errors(f"create {resource.uid}"):
            result = self.session.execute(insert(resource_table).values(**values))
        resource.id = result.inserted_primary_key[0]
        return resource

    def update(self, resource: LocalResource) -> None:
        with _store_errors(f"update {resource.uid}"):
            result = self.session.execute(
                update(resource_table)
                .where(resource_table.c.id == self._require_id(resource))
                .where(resource_table.c.collection_url == self._collection_url)
                .values(**_values(resource))
            )
        if result.rowcount == 0:
            raise StoreError(f"Record {resource.uid} vanished from {self._collection_url}")

    def mark_dirty(self, resource: LocalResource, *, content: str | None = None) -> None:
        """Record a local edit so the next session uploads it."""

        if content is not None:
            resource.content = content
        resource.dirty = True
        self.update(resource)

    def mark_deleted(self, resource: LocalResource) -> None:
        """Record a local deletion so the next session uploads it."""

        resource.deleted = True
        self.update(resource)

    def delete(self, resource: LocalResource) -> None:
        self._remove(resource)

    def purge(self, resource: LocalResource) -> None:
        self._remove(resource)

    def list_dirty(self) -> list[LocalResource]:
        stmt = (
            self._select()
            .where(resource_table.c.dirty.is_(True))
            .where(resource_table.c.deleted.is_(False))
        )
        return self._fetch(stmt, "list dirty records")

    def list_deleted(self) -> list[LocalResource]:
        stmt = self._select().where(resource_table.c.deleted.is_(True))
        return self._fetch(stmt, "list deleted records")

    def verify_dirty(self) -> int:
        really_dirty = 0
        for resource, sync_hash in self._dirty_with_hashes():
            if sync_hash is not None and sync_hash == content_hash(resource.content):
                log.debug(f"Record {resource.uid} is flagged dirty without changes")
                resource.dirty = False
                self.update(resource)
            else:
                really_dirty += 1
        return really_dirty

    def mark_synced(self, resource: LocalResource) -> None:
        resource.e_tag = resource.uid
        resource.dirty = False
        self.update(resource)

    def set_members(self, group: LocalResource, members: Iterable[LocalResource]) -> None:
        group_id = self._require_id(group)
        values = [{"group_id": group_id, "member_id": self._require_id(m)} for m in members]
        with _store_errors(f"assign members of {group.uid}"):
            self.session.execute(
                delete(group_membership_table).where(group_membership_table.c.group_id == group_id)
            )
            if values:
                self.session.execute(insert(group_membership_table), values)

    def list_members(self, group: LocalResource) -> list[LocalResource]:
        stmt = (
            self._select()
            .join(group_membership_table, group_membership_table.c.member_id == resource_table.c.id)
            .where(group_membership_table.c.group_id == self._require_id(group))
        )
        return self._fetch(stmt, f"list members of {group.uid}")

    def get_cursor(self) -> str | None:
        stmt = select(sync_state_table.c.last_entry_uid).where(
            sync_state_table.c.collection_url == self._collection_url
        )
        with _store_errors(f"read sync state of {self._collection_url}"):
            return self.session.execute(stmt).scalar_one_or_none()

    def set_cursor(self, entry_uid: str | None) -> None:
        with _store_errors(f"write sync state of {self._collection_url}"):
            self.session.execute(
                delete(sync_state_table).where(
                    sync_state_table.c.collection_url == self._collection_url
                )
            )
            if entry_uid is not None:
                self.session.execute(
                    insert(sync_state_table).values(
                        collection_url=self._collection_url,
                        last_entry_uid=entry_uid,
                    )
                )

    def _select(self) -> Select[Any]:
        return (
            select(resource_table)
            .where(resource_table.c.collection_url == self._collection_url)
            .order_by(resource_table.c.id)
        )

    def _fetch(self, stmt: Select[Any], action: str) -> list[LocalResource]:
        with _store_errors(action):
            rows = self.session.execute(stmt).all()
        return [_to_resource(row) for row in rows]

    def _dirty_with_hashes(self) -> list[tuple[LocalResource, str | None]]:
        stmt = (
            self._select()
            .where(resource_table.c.dirty.is_(True))
            .where(resource_table.c.deleted.is_(False))
        )
        with _store_errors("list dirty records"):
            rows = self.session.execute(stmt).all()
        return [(_to_resource(row), row.sync_hash) for row in rows]

    def _remove(self, resource: LocalResource) -> None:
        resource_id = self._require_id(resource)
        with _store_errors(f"delete {resource.uid}"):
            self.session.execute(
                delete(group_membership_table).where(
                    or_(
                        group_membership_table.c.group_id == resource_id,
                        group_membership_table.c.member_id == resource_id,
                    )
                )
            )
            self.session.execute(
                delete(resource_table)
                .where(resource_table.c.id == resource_id)
                .where(resource_table.c.collection_url == self._collection_url)
            )

    @staticmethod
    def _require_id(resource: LocalResource) -> int:
        if resource.id is None:
            raise StoreError(f"Record {resource.uid} has not been stored yet")
        return resource.id


class SqlAlchemyResourceStores:
    def __init__(self, session: Session) -> None:
        self.session = session

    def bind(self, collection_url: str) -> SqlAlchemyResourceStore:
        return SqlAlchemyResourceStore(self.session, collection_url)


def _values(resource: LocalResource) -> dict[str, Any]:
    values: dict[str, Any] = {
        "uid": resource.uid,
        "kind": resource.kind,
        "content": resource.content,
        "e_tag": resource.e_tag,
        "display_name": resource.display_name,
        "photo": resource.photo,
        "dirty": resource.dirty,
        "deleted": resource.deleted,
    }
    if not resource.dirty:
        values["sync_hash"] = content_hash(resource.content)
    return values


def _to_resource(row: Row[Any]) -> LocalResource:
    return LocalResource(
        id=row.id,
        uid=row.uid,
        kind=row.kind,
        content=row.content,
        e_tag=row.e_tag,
        display_name=row.display_name,
        photo=row.photo,
        dirty=row.dirty,
        deleted=row.deleted,
    )


if TYPE_CHECKING:

    def _protocol_checks(session: Session) -> None:
        _registry: CollectionRegistry = SqlAlchemyCollectionRegistry(session)
        _store: LocalResourceStore = SqlAlchemyResourceStore(session, "")
        _stores: ResourceStores = SqlAlchemyResourceStores(session)
