"""Synchronization defaults for sync sessions."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_ENTRY_BATCH_LIMIT = 50


@dataclass(frozen=True, slots=True)
class SyncConfig:
    entry_batch_limit: int = DEFAULT_ENTRY_BATCH_LIMIT


def get_sync_config() -> SyncConfig:
    return SyncConfig()
