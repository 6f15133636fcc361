"""Collection discovery: reconcile the server's journal listing with the registry."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from journalsync.domain.model import CollectionInfo

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from journalsync.domain.model import Account, ServiceType
    from journalsync.domain.ports import CollectionCodec, JournalClient, SyncUnitOfWork

log = getLogger(__name__)


def discover_collections(
    account: Account,
    service_type: ServiceType,
    *,
    journal: JournalClient,
    codec: CollectionCodec,
    unit_of_work_factory: Callable[[], SyncUnitOfWork],
) -> list[CollectionInfo]:
    """Refresh the registered collections of ``service_type`` for ``account``.

    When the server holds no journal of the requested type, a default collection
    is created on the server first so every account has something to sync into.
    The registry scope is replaced in a single transaction; on failure the
    previously registered set stays in place.
    """

    log.info(f"Refreshing {service_type} collections of account {account.name}")

    collections = _collections_of_type(journal, codec, service_type)
    if not collections:
        collections = [_provision_default(journal, codec, service_type)]

    with unit_of_work_factory() as uow:
        registry = uow.repositories.collections
        service_id = registry.get_service_id(account, service_type)
        _warn_vanished(registry.list_collections(service_id), collections)
        registry.replace_collections(service_id, collections)
        uow.commit()

    return collections


def list_collections(
    account: Account,
    service_type: ServiceType,
    *,
    unit_of_work_factory: Callable[[], SyncUnitOfWork],
) -> list[CollectionInfo]:
    """Return the collections currently registered for the scope."""

    with unit_of_work_factory() as uow:
        registry = uow.repositories.collections
        return registry.list_collections(registry.get_service_id(account, service_type))


def _collections_of_type(
    journal: JournalClient,
    codec: CollectionCodec,
    service_type: ServiceType,
) -> list[CollectionInfo]:
    by_url: dict[str, CollectionInfo] = {}
    for ref in journal.list_journals():
        info = codec.decode(ref.get_content())
        info.url = ref.uid
        info.read_only = info.read_only or ref.read_only
        if info.service_type == service_type:
            by_url[ref.uid] = info
    return list(by_url.values())


def _provision_default(
    journal: JournalClient,
    codec: CollectionCodec,
    service_type: ServiceType,
) -> CollectionInfo:
    info = CollectionInfo.default_for(service_type)
    ref = journal.put_journal(codec.encode(info))
    info.url = ref.uid
    log.info(f"Created default {service_type} journal {ref.uid}")
    return info


def _warn_vanished(previous: Iterable[CollectionInfo], current: Iterable[CollectionInfo]) -> None:
    # Collections removed on the server keep their local resources for now.
    current_urls = {info.url for info in current}
    for info in previous:
        if info.url not in current_urls:
            log.warning(
                "Collection %s is no longer listed by the server; its local resources are kept",
                info.url,
            )
