"""Pydantic models describing the journal service payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from journalsync.domain.model import ServiceType, SyncAction


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class JournalBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class JournalPayload(JournalBaseModel):
    uid: str
    content: str
    version: int = 1
    owner: str | None = None
    read_only: bool = Field(default=False, alias="readOnly")


class EntryPayload(JournalBaseModel):
    uid: str
    content: str


class CollectionPayload(JournalBaseModel):
    """Decoded content of a journal: the description of one collection."""

    type: ServiceType
    display_name: str | None = Field(default=None, alias="displayName")
    description: str | None = None
    color: int | None = None

    @field_validator("display_name", "description", mode="before")
    @classmethod
    def _normalize_text(cls, value: object) -> object:
        return _blank_to_none(value)


class EntryContentPayload(JournalBaseModel):
    """Decoded content of one entry."""

    action: SyncAction
    content: str


JOURNAL_LIST = TypeAdapter(list[JournalPayload])
ENTRY_LIST = TypeAdapter(list[EntryPayload])
