"""Builders for vCard/iCalendar payloads and a lookup-table parser."""

from __future__ import annotations

from typing import TYPE_CHECKING

from journalsync.domain.model import ResourceDocument, ResourceKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from journalsync.domain.ports import ResourceDownloader


def make_vcard(
    uid: str,
    name: str,
    *,
    group: bool = False,
    members: Iterable[str] = (),
    extra_lines: Iterable[str] = (),
) -> str:
    lines = [
        "BEGIN:VCARD",
        "VERSION:3.0",
        f"UID:{uid}",
        f"FN:{name}",
        f"N:{name};;;;",
    ]
    if group:
        lines.append("X-ADDRESSBOOK-SERVER-KIND:group")
        lines.extend(f"X-ADDRESSBOOK-SERVER-MEMBER:urn:uuid:{member}" for member in members)
    lines.extend(extra_lines)
    lines.append("END:VCARD")
    return "\r\n".join(lines) + "\r\n"


def make_calendar(*components: tuple[str, str, str]) -> str:
    """Build a VCALENDAR from ``(component, uid, summary)`` triples."""

    lines = ["BEGIN:VCALENDAR", "VERSION:2.0", "PRODID:-//journalsync//tests//EN"]
    for component, uid, summary in components:
        lines.extend(
            [
                f"BEGIN:{component}",
                f"UID:{uid}",
                "DTSTAMP:20240101T090000Z",
                "DTSTART:20240102T100000Z",
                f"SUMMARY:{summary}",
                f"END:{component}",
            ]
        )
    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"


def contact(uid: str, name: str | None = None) -> ResourceDocument:
    return ResourceDocument(
        uid=uid,
        kind=ResourceKind.CONTACT,
        content=f"contact:{uid}:{name or uid}",
        display_name=name or uid,
    )


def group(uid: str, *members: str, name: str | None = None) -> ResourceDocument:
    return ResourceDocument(
        uid=uid,
        kind=ResourceKind.GROUP,
        content=f"group:{uid}:{','.join(members)}",
        display_name=name or uid,
        member_uids=members,
    )


class StubParser:
    """Resolves entry content to pre-registered documents; anything else parses to nothing."""

    def __init__(self) -> None:
        self._documents: dict[str, list[ResourceDocument]] = {}
        self.downloaders: list[ResourceDownloader | None] = []

    def register(self, *documents: ResourceDocument, content: str | None = None) -> str:
        key = content or documents[0].content
        self._documents[key] = list(documents)
        return key

    def __call__(
        self,
        content: str,
        *,
        downloader: ResourceDownloader | None = None,
    ) -> list[ResourceDocument]:
        self.downloaders.append(downloader)
        return list(self._documents.get(content, []))
