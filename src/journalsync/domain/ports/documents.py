"""Ports for decoding resource payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from journalsync.domain.model import ResourceDocument


@runtime_checkable
class ResourceDownloader(Protocol):
    """Synchronous byte fetch for binaries referenced inside a document.

    Returns ``None`` on any failure; never raises.
    """

    def __call__(self, url: str, accepts: str) -> bytes | None: ...


@runtime_checkable
class DocumentParser(Protocol):
    """Decodes an entry payload into zero or more resource documents."""

    def __call__(
        self,
        content: str,
        *,
        downloader: ResourceDownloader | None = None,
    ) -> list[ResourceDocument]: ...


__all__ = ["DocumentParser", "ResourceDownloader"]
