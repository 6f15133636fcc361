"""Public interface for the journal service adapter."""

from __future__ import annotations

from .client import HttpJournalClient
from .codec import JsonCollectionCodec, encode_content, entry_from_payload, entry_to_payload
from .schema import CollectionPayload, EntryContentPayload, EntryPayload, JournalPayload

__all__ = [
    "CollectionPayload",
    "EntryContentPayload",
    "EntryPayload",
    "HttpJournalClient",
    "JournalPayload",
    "JsonCollectionCodec",
    "encode_content",
    "entry_from_payload",
    "entry_to_payload",
]
