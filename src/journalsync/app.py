"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from journalsync.adapters.documents import HttpResourceDownloader, parse_documents
from journalsync.adapters.journal import HttpJournalClient, JsonCollectionCodec
from journalsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySyncUnitOfWork,
    is_started,
    startup,
)
from journalsync.config import (
    AccountConfig,
    MissingConfigurationError,
    get_account_config,
    get_journal_config,
    get_sync_config,
)
from journalsync.domain.discovery import discover_collections, list_collections
from journalsync.domain.errors import InvalidAccountError, SyncError
from journalsync.domain.model import Account, SyncTrigger
from journalsync.domain.sync import run_sync_session

if TYPE_CHECKING:
    from collections.abc import Callable

    from journalsync.domain.model import CollectionInfo, ServiceType
    from journalsync.domain.ports import (
        DocumentParser,
        JournalClient,
        ResourceDownloader,
        SyncUnitOfWork,
    )
    from journalsync.domain.sync import SyncResult

type UnitOfWorkFactory = Callable[[], SyncUnitOfWork]

log = getLogger(__name__)


@dataclass(slots=True)
class CollectionOutcome:
    collection: CollectionInfo
    result: SyncResult | None = None
    error: SyncError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class AccountSyncReport:
    """Per-collection outcomes of one account sync."""

    account: Account
    service_type: ServiceType
    outcomes: list[CollectionOutcome] = field(default_factory=list[CollectionOutcome])

    @property
    def failed(self) -> list[CollectionOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


def resolve_account(
    account_config: AccountConfig | None = None,
    *,
    account_name: str | None = None,
) -> AccountConfig:
    """Return the configured account, optionally checking it is ``account_name``."""

    if account_config is None:
        try:
            account_config = get_account_config()
        except MissingConfigurationError as exc:
            raise InvalidAccountError(f"No usable account configured: {exc}") from exc
    if account_name is not None and account_name != account_config.account_name:
        raise InvalidAccountError(
            f"Account {account_name} is not configured "
            f"(configured: {account_config.account_name})"
        )
    return account_config


def discover_account_collections(
    service_type: ServiceType,
    *,
    account_config: AccountConfig | None = None,
    journal: JournalClient | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[CollectionInfo]:
    """Refresh the registered collections of ``service_type`` from the server."""

    resolved = resolve_account(account_config)
    _ensure_started()
    return discover_collections(
        Account(resolved.account_name),
        service_type,
        journal=journal or _build_journal_client(resolved),
        codec=JsonCollectionCodec(),
        unit_of_work_factory=unit_of_work_factory or SqlAlchemySyncUnitOfWork,
    )


def registered_collections(
    service_type: ServiceType,
    *,
    account_config: AccountConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[CollectionInfo]:
    """Return the collections known locally without contacting the server."""

    resolved = resolve_account(account_config)
    _ensure_started()
    return list_collections(
        Account(resolved.account_name),
        service_type,
        unit_of_work_factory=unit_of_work_factory or SqlAlchemySyncUnitOfWork,
    )


def sync_account(
    service_type: ServiceType,
    *,
    trigger: SyncTrigger = SyncTrigger.PERIODIC,
    account_config: AccountConfig | None = None,
    journal: JournalClient | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    parser: DocumentParser | None = None,
    downloader: ResourceDownloader | None = None,
) -> AccountSyncReport:
    """Discover collections of ``service_type`` and run a sync session for each.

    An upload-only trigger reuses the registered collections so that nothing
    touches the network unless local records changed. A failing collection is
    reported and the remaining ones still sync; rejected credentials end the run.
    """

    resolved = resolve_account(account_config)
    _ensure_started()
    account = Account(resolved.account_name)
    uow_factory = unit_of_work_factory or SqlAlchemySyncUnitOfWork
    effective_journal = journal or _build_journal_client(resolved)
    log.info(f"Starting {trigger} sync of {service_type} for account {account.name}")

    collections: list[CollectionInfo] = []
    if trigger is SyncTrigger.UPLOAD:
        collections = list_collections(account, service_type, unit_of_work_factory=uow_factory)
    if not collections:
        collections = discover_collections(
            account,
            service_type,
            journal=effective_journal,
            codec=JsonCollectionCodec(),
            unit_of_work_factory=uow_factory,
        )

    report = AccountSyncReport(account=account, service_type=service_type)
    effective_parser = parser or parse_documents
    effective_downloader = downloader or HttpResourceDownloader()
    for collection in collections:
        outcome = CollectionOutcome(collection=collection)
        try:
            outcome.result = run_sync_session(
                account=account,
                collection=collection,
                journal=effective_journal,
                unit_of_work_factory=uow_factory,
                parser=effective_parser,
                downloader=effective_downloader,
                trigger=trigger,
            )
        except InvalidAccountError:
            raise
        except SyncError as exc:
            log.exception(f"Sync of collection {collection.url} failed")
            outcome.error = exc
        report.outcomes.append(outcome)

    log.info(
        "Finished sync of %s for account %s: collections=%s, failed=%s",
        service_type,
        account.name,
        len(report.outcomes),
        len(report.failed),
    )
    return report


def _ensure_started() -> None:
    if not is_started():
        startup()


def _build_journal_client(account_config: AccountConfig) -> HttpJournalClient:
    return HttpJournalClient(
        config=get_journal_config(account=account_config),
        batch_limit=get_sync_config().entry_batch_limit,
    )
