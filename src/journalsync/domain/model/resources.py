"""Local resources and the parsed documents that feed them.

A local resource is a tagged variant over :class:`ResourceKind`. Replay compares
variant tags instead of inspecting concrete types, and asks the capability set of
a kind before attempting an operation on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from journalsync.domain.model.enums import Capability, ResourceKind

_BASIC: Final[Capability] = Capability.CREATE | Capability.UPDATE | Capability.DELETE

CAPABILITIES_BY_KIND: Final[dict[ResourceKind, Capability]] = {
    ResourceKind.CONTACT: _BASIC,
    ResourceKind.GROUP: _BASIC | Capability.MEMBERSHIP,
    ResourceKind.EVENT: _BASIC,
    ResourceKind.TASK: _BASIC,
}


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceDocument:
    """Parsed form of one resource payload (a vCard or an iCalendar component)."""

    uid: str
    kind: ResourceKind
    content: str
    display_name: str | None = None
    member_uids: tuple[str, ...] = ()
    photo: bytes | None = None

    @property
    def is_group(self) -> bool:
        return self.kind == ResourceKind.GROUP


@dataclass(eq=False, kw_only=True)
class LocalResource:
    """A record of the local store; ``e_tag`` carries the uid after server writes."""

    id: int | None = None
    uid: str
    kind: ResourceKind
    content: str
    e_tag: str | None = None
    display_name: str | None = None
    photo: bytes | None = field(default=None, repr=False)
    dirty: bool = False
    deleted: bool = False

    @property
    def capabilities(self) -> Capability:
        return CAPABILITIES_BY_KIND[self.kind]

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def matches(self, document: ResourceDocument) -> bool:
        return self.kind == document.kind

    @classmethod
    def from_document(cls, document: ResourceDocument) -> LocalResource:
        return cls(
            uid=document.uid,
            kind=document.kind,
            content=document.content,
            e_tag=document.uid,
            display_name=document.display_name,
            photo=document.photo,
        )

    def apply_document(self, document: ResourceDocument) -> None:
        """Overwrite the fields carried by ``document``; the variant tag never changes.

        The server version wins over pending local edits and deletions: the record
        comes back clean and is not uploaded again.
        """

        if not self.matches(document):
            raise ValueError(f"cannot apply a {document.kind} document to a {self.kind} record")
        self.e_tag = document.uid
        self.content = document.content
        self.display_name = document.display_name
        self.photo = document.photo
        self.dirty = False
        self.deleted = False
