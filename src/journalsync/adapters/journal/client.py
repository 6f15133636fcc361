"""HTTP client for the journal service."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Final
from uuid import uuid4

import httpx
from pydantic import ValidationError

from journalsync.adapters.http_resilience import ResilientClient, default_client_factory
from journalsync.config.sync import DEFAULT_ENTRY_BATCH_LIMIT
from journalsync.domain.errors import HttpError, InvalidAccountError
from journalsync.domain.model import JournalRef

from .codec import encode_content, entry_from_payload, entry_to_payload, journal_from_payload
from .schema import ENTRY_LIST, JOURNAL_LIST

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from journalsync.config.http_resilience import ResilienceConfig
    from journalsync.config.journal import JournalConfig
    from journalsync.domain.model import SyncEntry
    from journalsync.domain.ports import JournalClient

log = getLogger(__name__)

_REJECTED_CREDENTIALS: Final[frozenset[int]] = frozenset({401, 403})


class HttpJournalClient:
    """Journal service client; every public call blocks until the request finishes."""

    def __init__(
        self,
        *,
        config: JournalConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        batch_limit: int = DEFAULT_ENTRY_BATCH_LIMIT,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or default_client_factory
        self._batch_limit = batch_limit

    def list_journals(self) -> list[JournalRef]:
        return asyncio.run(self._list_journals_async())

    def put_journal(self, content: bytes) -> JournalRef:
        return asyncio.run(self._put_journal_async(content))

    def fetch_entries(self, journal_uid: str, since: str | None = None) -> list[SyncEntry]:
        return asyncio.run(self._fetch_entries_async(journal_uid, since))

    def append_entries(
        self,
        journal_uid: str,
        since: str | None,
        entries: Sequence[SyncEntry],
    ) -> list[str]:
        return asyncio.run(self._append_entries_async(journal_uid, since, entries))

    async def _list_journals_async(self) -> list[JournalRef]:
        async with self._client_factory(self._resilience) as client:
            response = await self._perform_request(client, "GET", "journals/")
        try:
            payloads = JOURNAL_LIST.validate_json(response.content)
        except ValidationError as exc:
            raise HttpError("Unexpected journal listing payload") from exc
        return [journal_from_payload(payload) for payload in payloads]

    async def _put_journal_async(self, content: bytes) -> JournalRef:
        journal = JournalRef(uid=uuid4().hex, content=encode_content(content))
        body = {"uid": journal.uid, "content": journal.content, "version": journal.version}
        async with self._client_factory(self._resilience) as client:
            await self._perform_request(client, "POST", "journals/", json=body)
        log.info(f"Created journal {journal.uid}")
        return journal

    async def _fetch_entries_async(self, journal_uid: str, since: str | None) -> list[SyncEntry]:
        entries: list[SyncEntry] = []
        last = since
        async with self._client_factory(self._resilience) as client:
            while True:
                params: dict[str, str | int] = {"limit": self._batch_limit}
                if last is not None:
                    params["last"] = last
                response = await self._perform_request(
                    client,
                    "GET",
                    f"journals/{journal_uid}/entries/",
                    params=params,
                )
                try:
                    page = ENTRY_LIST.validate_json(response.content)
                except ValidationError as exc:
                    raise HttpError("Unexpected entry listing payload") from exc

                entries.extend(entry_from_payload(payload) for payload in page)
                if len(page) < self._batch_limit:
                    break
                last = page[-1].uid
        return entries

    async def _append_entries_async(
        self,
        journal_uid: str,
        since: str | None,
        entries: Sequence[SyncEntry],
    ) -> list[str]:
        uids = [uuid4().hex for _ in entries]
        body = [
            entry_to_payload(entry, uid=uid).model_dump()
            for entry, uid in zip(entries, uids, strict=True)
        ]
        params: dict[str, str] = {"last": since} if since is not None else {}
        async with self._client_factory(self._resilience) as client:
            await self._perform_request(
                client,
                "POST",
                f"journals/{journal_uid}/entries/",
                params=params,
                json=body,
            )
        return uids

    async def _perform_request(
        self,
        client: ResilientClient,
        method: str,
        path: str,
        *,
        params: dict[str, str | int] | dict[str, str] | None = None,
        json: object = None,
    ) -> httpx.Response:
        try:
            response = await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise HttpError(f"{method} {path} failed: {exc}") from exc

        if response.status_code in _REJECTED_CREDENTIALS:
            raise InvalidAccountError(
                f"Journal service rejected the credentials of "
                f"{self._config.account.account_name} ({response.status_code})"
            )
        if response.is_error:
            raise HttpError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
            )
        return response


if TYPE_CHECKING:
    from journalsync.config.journal import AccountConfig, get_journal_config

    _client_check: JournalClient = HttpJournalClient(
        config=get_journal_config(account=AccountConfig(account_name="a", base_url="b"))
    )
