"""Phases of a sync session for one collection.

PREPARE -> (stop) -> PULL/REPLAY -> PUSH-DIRTY -> POST-PROCESS. Each phase is a
plain function of the :class:`SyncContext`; committed work of earlier phases and
earlier entries survives a later failure.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from journalsync.domain.model import Capability, SyncAction, SyncEntry, SyncTrigger
from journalsync.domain.sync.context import SyncContext, SyncResult
from journalsync.domain.sync.replay import replay_entry

if TYPE_CHECKING:
    from collections.abc import Callable

    from journalsync.domain.model import Account, CollectionInfo, LocalResource
    from journalsync.domain.ports import (
        DocumentParser,
        JournalClient,
        ResourceDownloader,
        SyncUnitOfWork,
    )

log = getLogger(__name__)


def run_sync_session(
    *,
    account: Account,
    collection: CollectionInfo,
    journal: JournalClient,
    unit_of_work_factory: Callable[[], SyncUnitOfWork],
    parser: DocumentParser,
    downloader: ResourceDownloader | None = None,
    trigger: SyncTrigger = SyncTrigger.PERIODIC,
) -> SyncResult:
    """Run every phase for ``collection`` and return the session summary."""

    with unit_of_work_factory() as uow:
        context = SyncContext(
            account=account,
            collection=collection,
            journal=journal,
            uow=uow,
            parser=parser,
            downloader=downloader,
            trigger=trigger,
        )
        result = SyncResult(collection_url=context.journal_uid, stats=context.stats)

        if not prepare(context):
            result.skipped = True
            return result

        result.pulled = pull(context)
        result.pushed = push_dirty(context)
        result.memberships = post_process(context)

    log.info(
        "Finished sync of %s: pulled=%s, pushed=%s, inserts=%s, updates=%s",
        result.collection_url,
        result.pulled,
        result.pushed,
        result.stats.inserts,
        result.stats.updates,
    )
    return result


def prepare(context: SyncContext) -> bool:
    """Bind the store to the collection; return ``False`` when there is nothing to do."""

    store = context.uow.repositories.resources.bind(context.journal_uid)
    context.store = store

    # some hosts flag records dirty on metadata-only changes
    really_dirty = store.verify_dirty()
    deleted = len(store.list_deleted())
    context.uow.commit()

    if context.trigger is SyncTrigger.UPLOAD and really_dirty == 0 and deleted == 0:
        log.info(
            "This sync was called to up-sync dirty/deleted records, "
            "but no records have been changed"
        )
        return False
    return True


def pull(context: SyncContext) -> int:
    """Fetch entries past the read cursor and replay them in stream order."""

    store = context.local
    entries = context.journal.fetch_entries(context.journal_uid, store.get_cursor())
    log.info(f"Fetched {len(entries)} entries for {context.journal_uid}")

    for entry in entries:
        replay_entry(context, entry)
        if entry.uid is not None:
            store.set_cursor(entry.uid)
        context.uow.commit()
    return len(entries)


def push_dirty(context: SyncContext) -> int:
    """Upload locally changed and deleted records as new journal entries."""

    store = context.local
    if context.collection.read_only:
        log.info(f"Collection {context.journal_uid} is read-only, not pushing local changes")
        return 0

    pending: list[tuple[LocalResource, SyncEntry]] = []
    for resource in store.list_deleted():
        if resource.e_tag is None:
            # never reached the server
            store.purge(resource)
            continue
        pending.append((resource, SyncEntry(action=SyncAction.DELETE, content=resource.content)))
    for resource in store.list_dirty():
        action = SyncAction.ADD if resource.e_tag is None else SyncAction.CHANGE
        pending.append((resource, SyncEntry(action=action, content=resource.content)))

    if not pending:
        context.uow.commit()
        return 0

    log.info(f"Pushing {len(pending)} local changes to {context.journal_uid}")
    entry_uids = context.journal.append_entries(
        context.journal_uid,
        store.get_cursor(),
        [entry for _, entry in pending],
    )
    for resource, entry in pending:
        if entry.is_action(SyncAction.DELETE):
            store.purge(resource)
        else:
            store.mark_synced(resource)
    if entry_uids:
        store.set_cursor(entry_uids[-1])
    context.uow.commit()
    return len(pending)


def post_process(context: SyncContext) -> int:
    """Apply group memberships queued during replay; return the number assigned."""

    store = context.local
    pending = context.memberships.drain()
    if pending:
        log.info("Assigning memberships of downloaded contact groups")

    assigned = 0
    for group_uid, member_uids in pending:
        group = store.find_by_uid(group_uid)
        if group is None or not group.supports(Capability.MEMBERSHIP):
            continue
        members: list[LocalResource] = []
        for member_uid in member_uids:
            member = store.find_by_uid(member_uid)
            if member is None:
                log.warning(f"Group {group_uid} lists unknown member {member_uid}, skipping")
                continue
            members.append(member)
        store.set_members(group, members)
        assigned += len(members)

    context.uow.commit()
    return assigned
