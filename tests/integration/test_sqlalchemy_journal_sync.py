from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from journalsync.adapters.documents import parse_documents
from journalsync.adapters.journal import JsonCollectionCodec
from journalsync.adapters.sqlalchemy.repositories import SqlAlchemyResourceStore
from journalsync.domain.discovery import discover_collections
from journalsync.domain.model import Account, ResourceKind, ServiceType, SyncAction
from journalsync.domain.sync import run_sync_session
from tests.helpers.documents import make_calendar, make_vcard
from tests.helpers.journal import FakeJournalClient, make_journal

if TYPE_CHECKING:
    from collections.abc import Callable

    from journalsync.adapters.sqlalchemy.unit_of_work import SqlAlchemySyncUnitOfWork
    from journalsync.domain.sync import SyncResult

ACCOUNT = Account("alice@example.com")


@pytest.mark.integration
def test_contacts_round_trip_through_sqlite(
    sqlite_unit_of_work: Callable[[], SqlAlchemySyncUnitOfWork],
) -> None:
    journal = FakeJournalClient([make_journal("contacts", ServiceType.ADDRESS_BOOK)])
    journal.add_entry(
        "contacts",
        SyncAction.ADD,
        make_vcard("g1", "Friends", group=True, members=["c1", "c2"]),
    )
    journal.add_entry("contacts", SyncAction.ADD, make_vcard("c1", "Ada"))
    journal.add_entry("contacts", SyncAction.ADD, make_vcard("c2", "Grace"))
    journal.add_entry("contacts", SyncAction.CHANGE, make_vcard("c2", "Grace Hopper"))
    journal.add_entry("contacts", SyncAction.ADD, "not a vcard at all")

    [collection] = discover_collections(
        ACCOUNT,
        ServiceType.ADDRESS_BOOK,
        journal=journal,
        codec=JsonCollectionCodec(),
        unit_of_work_factory=sqlite_unit_of_work,
    )
    result = run_sync_session(
        account=ACCOUNT,
        collection=collection,
        journal=journal,
        unit_of_work_factory=sqlite_unit_of_work,
        parser=parse_documents,
    )

    assert result.pulled == 5
    assert result.stats.inserts == 3
    assert result.stats.updates == 1
    assert result.memberships == 2

    with sqlite_unit_of_work() as uow:
        store = uow.repositories.resources.bind("contacts")
        assert isinstance(store, SqlAlchemyResourceStore)
        group = store.find_by_uid("g1")
        grace = store.find_by_uid("c2")
        assert group is not None
        assert group.kind is ResourceKind.GROUP
        assert grace is not None
        assert grace.display_name == "Grace Hopper"
        assert sorted(m.uid for m in store.list_members(group)) == ["c1", "c2"]
        assert store.get_cursor() == journal.entries["contacts"][-1].uid

        store.mark_dirty(grace, content=make_vcard("c2", "Rear Admiral Hopper"))
        uow.commit()

    second = run_sync_session(
        account=ACCOUNT,
        collection=collection,
        journal=journal,
        unit_of_work_factory=sqlite_unit_of_work,
        parser=parse_documents,
    )

    assert second.pulled == 0
    assert second.pushed == 1
    pushed = journal.entries["contacts"][-1]
    assert pushed.action is SyncAction.CHANGE
    assert "Rear Admiral Hopper" in pushed.content

    with sqlite_unit_of_work() as uow:
        store = uow.repositories.resources.bind("contacts")
        assert store.list_dirty() == []
        assert store.get_cursor() == pushed.uid


@pytest.mark.integration
def test_calendar_entries_land_in_their_own_collection(
    sqlite_unit_of_work: Callable[[], SqlAlchemySyncUnitOfWork],
) -> None:
    journal = FakeJournalClient(
        [
            make_journal("home", ServiceType.CALENDAR),
            make_journal("contacts", ServiceType.ADDRESS_BOOK),
        ]
    )
    journal.add_entry("home", SyncAction.ADD, make_calendar(("VEVENT", "ev1", "Dentist")))

    collections = discover_collections(
        ACCOUNT,
        ServiceType.CALENDAR,
        journal=journal,
        codec=JsonCollectionCodec(),
        unit_of_work_factory=sqlite_unit_of_work,
    )
    for collection in collections:
        run_sync_session(
            account=ACCOUNT,
            collection=collection,
            journal=journal,
            unit_of_work_factory=sqlite_unit_of_work,
            parser=parse_documents,
        )

    with sqlite_unit_of_work() as uow:
        event = uow.repositories.resources.bind("home").find_by_uid("ev1")
        assert event is not None
        assert event.kind is ResourceKind.EVENT
        assert event.display_name == "Dentist"
        assert uow.repositories.resources.bind("contacts").find_by_uid("ev1") is None


def _sync_contacts(
    journal: FakeJournalClient,
    sqlite_unit_of_work: Callable[[], SqlAlchemySyncUnitOfWork],
) -> SyncResult:
    [collection] = discover_collections(
        ACCOUNT,
        ServiceType.ADDRESS_BOOK,
        journal=journal,
        codec=JsonCollectionCodec(),
        unit_of_work_factory=sqlite_unit_of_work,
    )
    return run_sync_session(
        account=ACCOUNT,
        collection=collection,
        journal=journal,
        unit_of_work_factory=sqlite_unit_of_work,
        parser=parse_documents,
    )


@pytest.mark.integration
def test_server_change_wins_over_local_edit_without_echo(
    sqlite_unit_of_work: Callable[[], SqlAlchemySyncUnitOfWork],
) -> None:
    journal = FakeJournalClient([make_journal("contacts", ServiceType.ADDRESS_BOOK)])
    journal.add_entry("contacts", SyncAction.ADD, make_vcard("c1", "Ada"))
    _sync_contacts(journal, sqlite_unit_of_work)

    with sqlite_unit_of_work() as uow:
        store = uow.repositories.resources.bind("contacts")
        local = store.find_by_uid("c1")
        assert local is not None
        store.mark_dirty(local, content=make_vcard("c1", "Local Ada"))
        uow.commit()

    journal.add_entry("contacts", SyncAction.CHANGE, make_vcard("c1", "Server Ada"))
    entries_before = len(journal.entries["contacts"])

    result = _sync_contacts(journal, sqlite_unit_of_work)

    assert result.pulled == 1
    assert result.stats.updates == 1
    assert result.pushed == 0
    assert len(journal.entries["contacts"]) == entries_before

    with sqlite_unit_of_work() as uow:
        store = uow.repositories.resources.bind("contacts")
        stored = store.find_by_uid("c1")
        assert stored is not None
        assert stored.display_name == "Server Ada"
        assert store.list_dirty() == []
        assert store.verify_dirty() == 0


@pytest.mark.integration
def test_server_change_revives_locally_deleted_record(
    sqlite_unit_of_work: Callable[[], SqlAlchemySyncUnitOfWork],
) -> None:
    journal = FakeJournalClient([make_journal("contacts", ServiceType.ADDRESS_BOOK)])
    journal.add_entry("contacts", SyncAction.ADD, make_vcard("c1", "Ada"))
    _sync_contacts(journal, sqlite_unit_of_work)

    with sqlite_unit_of_work() as uow:
        store = uow.repositories.resources.bind("contacts")
        local = store.find_by_uid("c1")
        assert local is not None
        store.mark_deleted(local)
        uow.commit()

    journal.add_entry("contacts", SyncAction.CHANGE, make_vcard("c1", "Ada Lovelace"))

    result = _sync_contacts(journal, sqlite_unit_of_work)

    assert result.pushed == 0
    assert all(entry.action is not SyncAction.DELETE for entry in journal.entries["contacts"])
    with sqlite_unit_of_work() as uow:
        store = uow.repositories.resources.bind("contacts")
        stored = store.find_by_uid("c1")
        assert stored is not None
        assert stored.deleted is False
        assert stored.display_name == "Ada Lovelace"
        assert store.list_deleted() == []
