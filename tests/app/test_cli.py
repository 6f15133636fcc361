from __future__ import annotations

import pytest

from journalsync.app import AccountSyncReport, CollectionOutcome
from journalsync.domain.errors import HttpError, InvalidAccountError
from journalsync.domain.model import Account, CollectionInfo, ServiceType, SyncTrigger
from journalsync.ui import cli


def _report(*, failed: bool = False) -> AccountSyncReport:
    collection = CollectionInfo(url="contacts", service_type=ServiceType.ADDRESS_BOOK)
    outcome = CollectionOutcome(
        collection=collection,
        error=HttpError("unavailable") if failed else None,
    )
    return AccountSyncReport(
        account=Account("alice@example.com"),
        service_type=ServiceType.ADDRESS_BOOK,
        outcomes=[outcome],
    )


def test_cli_sync_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_sync(service_type: ServiceType, **kwargs: object) -> AccountSyncReport:
        captured["service_type"] = service_type
        captured.update(kwargs)
        return _report()

    monkeypatch.setattr(cli, "sync_account", fake_sync)

    cli.main(["sync"])

    assert captured == {"service_type": ServiceType.ADDRESS_BOOK, "trigger": SyncTrigger.PERIODIC}


def test_cli_sync_upload_only_for_calendars(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_sync(service_type: ServiceType, **kwargs: object) -> AccountSyncReport:
        captured["service_type"] = service_type
        captured.update(kwargs)
        return _report()

    monkeypatch.setattr(cli, "sync_account", fake_sync)

    cli.main(["--service", "calendar", "sync", "--upload-only"])

    assert captured["service_type"] is ServiceType.CALENDAR
    assert captured["trigger"] is SyncTrigger.UPLOAD


def test_cli_discover_uses_selected_service(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: list[ServiceType] = []

    def fake_discover(service_type: ServiceType) -> list[CollectionInfo]:
        seen.append(service_type)
        return []

    monkeypatch.setattr(cli, "discover_account_collections", fake_discover)

    cli.main(["--service", "tasks", "discover"])

    assert seen == [ServiceType.TASKS]


def test_cli_exits_with_error_when_a_collection_failed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "sync_account", lambda *_, **__: _report(failed=True))

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["sync"])

    assert excinfo.value.code == 1


def test_cli_exits_with_error_on_invalid_account(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_discover(_service_type: ServiceType) -> list[CollectionInfo]:
        raise InvalidAccountError("no account")

    monkeypatch.setattr(cli, "discover_account_collections", fake_discover)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["discover"])

    assert excinfo.value.code == 1


def test_cli_rejects_unknown_service() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--service", "notes", "sync"])

    assert excinfo.value.code == 2


def test_cli_rejects_conflicting_sync_modes() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["sync", "--upload-only", "--manual"])

    assert excinfo.value.code == 2
