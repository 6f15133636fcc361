"""Error taxonomy shared by discovery, replay and the adapters."""

from __future__ import annotations


class SyncError(RuntimeError):
    """Base class for failures that end a discovery pass or a sync session."""


class HttpError(SyncError):
    """Transport or protocol failure while talking to a remote service."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class IntegrityError(SyncError):
    """Journal content failed to decode or validate."""


class InvalidAccountError(SyncError):
    """The account or its credentials cannot be resolved."""


class StoreError(SyncError):
    """The local registry or resource store rejected an operation."""
