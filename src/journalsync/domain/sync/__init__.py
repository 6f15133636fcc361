"""Sync sessions: replay of journal entries and the surrounding phases."""

from __future__ import annotations

from .context import PendingMemberships, SyncContext, SyncResult, SyncStats
from .replay import reconcile_resource, remove_resource, replay_entry
from .session import post_process, prepare, pull, push_dirty, run_sync_session

__all__ = [
    "PendingMemberships",
    "SyncContext",
    "SyncResult",
    "SyncStats",
    "post_process",
    "prepare",
    "pull",
    "push_dirty",
    "reconcile_resource",
    "remove_resource",
    "replay_entry",
    "run_sync_session",
]
