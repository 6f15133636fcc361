"""Domain model for journal-based synchronization."""

from __future__ import annotations

from .collections import DEFAULT_COLLECTION_COLOR, Account, CollectionInfo
from .enums import Capability, ResourceKind, ServiceType, SyncAction, SyncTrigger
from .journal import JournalRef, SyncEntry
from .resources import CAPABILITIES_BY_KIND, LocalResource, ResourceDocument

__all__ = [
    "CAPABILITIES_BY_KIND",
    "DEFAULT_COLLECTION_COLOR",
    "Account",
    "Capability",
    "CollectionInfo",
    "JournalRef",
    "LocalResource",
    "ResourceDocument",
    "ResourceKind",
    "ServiceType",
    "SyncAction",
    "SyncEntry",
    "SyncTrigger",
]
