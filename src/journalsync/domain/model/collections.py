"""Accounts and the sync-able collections discovered for them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from journalsync.domain.model.enums import ServiceType

DEFAULT_COLLECTION_COLOR: Final[int] = -8581214  # 0xFF8BC34A

_DEFAULT_DISPLAY_NAMES: Final[dict[ServiceType, str]] = {
    ServiceType.ADDRESS_BOOK: "My Contacts",
    ServiceType.CALENDAR: "My Calendar",
    ServiceType.TASKS: "My Tasks",
}


@dataclass(frozen=True, slots=True)
class Account:
    name: str


@dataclass(kw_only=True)
class CollectionInfo:
    """One sync-able collection, identified by the uid of its journal."""

    url: str | None = None
    service_type: ServiceType
    display_name: str | None = None
    description: str | None = None
    color: int | None = None
    read_only: bool = False

    @classmethod
    def default_for(cls, service_type: ServiceType) -> CollectionInfo:
        """Synthesize the collection created when the server has none of this type."""

        return cls(
            service_type=service_type,
            display_name=_DEFAULT_DISPLAY_NAMES[service_type],
            color=DEFAULT_COLLECTION_COLOR,
        )
