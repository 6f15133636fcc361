"""Translation between journal wire payloads and domain objects."""

from __future__ import annotations

import base64
import binascii

from pydantic import ValidationError

from journalsync.domain.errors import IntegrityError
from journalsync.domain.model import CollectionInfo, JournalRef, SyncEntry

from .schema import (
    CollectionPayload,
    EntryContentPayload,
    EntryPayload,
    JournalPayload,
)


class JsonCollectionCodec:
    """JSON form of :class:`CollectionInfo` as stored inside a journal."""

    def decode(self, payload: bytes) -> CollectionInfo:
        try:
            model = CollectionPayload.model_validate_json(payload)
        except ValidationError as exc:
            raise IntegrityError("Journal content is not a valid collection description") from exc
        return CollectionInfo(
            service_type=model.type,
            display_name=model.display_name,
            description=model.description,
            color=model.color,
        )

    def encode(self, info: CollectionInfo) -> bytes:
        model = CollectionPayload(
            type=info.service_type,
            display_name=info.display_name,
            description=info.description,
            color=info.color,
        )
        return model.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")


def encode_content(payload: bytes) -> str:
    return base64.b64encode(payload).decode("ascii")


def journal_from_payload(payload: JournalPayload) -> JournalRef:
    return JournalRef(
        uid=payload.uid,
        content=payload.content,
        read_only=payload.read_only,
        version=payload.version,
    )


def entry_from_payload(payload: EntryPayload) -> SyncEntry:
    try:
        raw = base64.b64decode(payload.content, validate=True)
        model = EntryContentPayload.model_validate_json(raw)
    except (binascii.Error, ValueError) as exc:
        raise IntegrityError(f"Entry {payload.uid} carries undecodable content") from exc
    return SyncEntry(action=model.action, content=model.content, uid=payload.uid)


def entry_to_payload(entry: SyncEntry, *, uid: str) -> EntryPayload:
    model = EntryContentPayload(action=entry.action, content=entry.content)
    return EntryPayload(uid=uid, content=encode_content(model.model_dump_json().encode("utf-8")))
