"""Download of binaries referenced from inside resource documents."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx

from journalsync.adapters.http_resilience import ResilientClient, default_client_factory
from journalsync.config.journal import download_resilience

if TYPE_CHECKING:
    from collections.abc import Callable

    from journalsync.config.http_resilience import ResilienceConfig
    from journalsync.domain.ports import ResourceDownloader

log = getLogger(__name__)

_SUPPORTED_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})


class HttpResourceDownloader:
    """Fetches e.g. contact photos; a missing photo never fails a sync."""

    def __init__(
        self,
        *,
        resilience: ResilienceConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._resilience = resilience or download_resilience()
        self._client_factory = client_factory or default_client_factory

    def __call__(self, url: str, accepts: str) -> bytes | None:
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL:
            log.error("Invalid external resource URL: %s", url)
            return None

        if not parsed.host:
            log.error("External resource URL doesn't specify a host name: %s", url)
            return None
        if parsed.scheme not in _SUPPORTED_SCHEMES:
            log.error("Unsupported scheme for external resource URL: %s", url)
            return None

        # Requests go out unauthenticated. Account credentials could be attached
        # for the journal host only, which is not implemented.
        return asyncio.run(self._download(parsed, accepts))

    async def _download(self, url: httpx.URL, accepts: str) -> bytes | None:
        try:
            async with self._client_factory(self._resilience) as client:
                response = await client.get(url, headers={"Accept": accepts})
        except httpx.HTTPError:
            log.exception("Couldn't download external resource %s", url)
            return None

        if not response.is_success:
            log.error(f"Couldn't download external resource {url}: HTTP {response.status_code}")
            return None
        return response.content


if TYPE_CHECKING:
    _downloader_check: ResourceDownloader = HttpResourceDownloader()
