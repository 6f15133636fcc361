"""Replay of journal entries against the local resource store."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from journalsync.domain.model import Capability, LocalResource, SyncAction

if TYPE_CHECKING:
    from journalsync.domain.model import ResourceDocument, SyncEntry
    from journalsync.domain.sync.context import SyncContext

log = getLogger(__name__)


def replay_entry(context: SyncContext, entry: SyncEntry) -> LocalResource | None:
    """Apply one entry to the bound store; return the surviving record, if any.

    Undecodable or empty payloads are skipped with a warning. Store failures
    propagate and end the session.
    """

    documents = context.parser(entry.content, downloader=context.downloader)
    if not documents:
        log.warning("Received entry %s without data, ignoring", entry.uid)
        return None
    if len(documents) > 1:
        log.warning("Received %d documents in entry %s, using first one", len(documents), entry.uid)

    document = documents[0]
    local = context.local.find_by_uid(document.uid)

    if entry.is_action(SyncAction.DELETE):
        remove_resource(context, document, local)
        return None
    return reconcile_resource(context, document, local)


def reconcile_resource(
    context: SyncContext,
    document: ResourceDocument,
    local: LocalResource | None,
) -> LocalResource:
    store = context.local

    if local is not None:
        if local.matches(document):
            log.info(f"Updating {document.uid} in local collection {store.collection_url}")
            local.apply_document(document)
            store.update(local)
            context.stats.updates += 1
            _queue_memberships(context, document)
            return local

        # the uid switched between variants, e.g. a group became an individual contact
        if not local.supports(Capability.DELETE):
            log.warning(
                "Cannot replace %s record %s with a %s; keeping the local record",
                local.kind,
                local.uid,
                document.kind,
            )
            return local
        log.info(f"Replacing {local.kind} {local.uid} with a {document.kind}")
        store.delete(local)
        context.memberships.discard(local.uid)

    log.info(f"Creating local {document.kind} {document.uid}")
    created = store.create(LocalResource.from_document(document))
    context.stats.inserts += 1
    _queue_memberships(context, document)
    return created


def remove_resource(
    context: SyncContext,
    document: ResourceDocument,
    local: LocalResource | None,
) -> None:
    if local is None:
        log.warning("Tried deleting a non-existent record: %s", document.uid)
        return
    log.info(f"Removing local record #{local.id} which has been deleted on the server")
    context.local.delete(local)
    context.memberships.discard(local.uid)


def _queue_memberships(context: SyncContext, document: ResourceDocument) -> None:
    if document.is_group:
        context.memberships.queue(document.uid, document.member_uids)
