"""vCard and iCalendar decoding of entry payloads, backed by vobject."""

from __future__ import annotations

import base64
import binascii
from logging import getLogger
from typing import TYPE_CHECKING, Final

import vobject
from vobject.base import VObjectError

from journalsync.domain.model import ResourceDocument, ResourceKind

if TYPE_CHECKING:
    from vobject.base import Component

    from journalsync.domain.ports import DocumentParser, ResourceDownloader

log = getLogger(__name__)

PHOTO_ACCEPTS: Final[str] = "image/*"
_UUID_URN_PREFIX: Final[str] = "urn:uuid:"
_KIND_KEYS: Final[tuple[str, ...]] = ("kind", "x-addressbook-server-kind")
_MEMBER_KEYS: Final[tuple[str, ...]] = ("member", "x-addressbook-server-member")
_CALENDAR_KINDS: Final[dict[str, ResourceKind]] = {
    "VEVENT": ResourceKind.EVENT,
    "VTODO": ResourceKind.TASK,
}


def parse_documents(
    content: str,
    *,
    downloader: ResourceDownloader | None = None,
) -> list[ResourceDocument]:
    """Decode ``content`` into resource documents.

    Content vobject cannot parse yields an empty list so that replay can skip it.
    Components without a UID are dropped since they cannot be matched locally.
    """

    try:
        components = list(vobject.readComponents(content))
    except (VObjectError, ValueError):
        log.warning("Could not parse resource payload", exc_info=True)
        return []

    resources: list[tuple[Component, ResourceKind]] = []
    for component in components:
        if component.name == "VCARD":
            resources.append((component, _vcard_kind(component)))
        elif component.name == "VCALENDAR":
            resources.extend(
                (child, _CALENDAR_KINDS[child.name])
                for child in component.getChildren()
                if child.name in _CALENDAR_KINDS
            )

    documents: list[ResourceDocument] = []
    for component, kind in resources:
        uid = _first_value(component, "uid")
        if not uid:
            log.warning(f"Dropping {component.name} without UID")
            continue
        try:
            text = content if len(resources) == 1 else component.serialize()
        except VObjectError:
            log.warning(f"Could not serialize {component.name} {uid}, dropping it", exc_info=True)
            continue
        documents.append(_build_document(component, kind, uid, text, downloader))
    return documents


def _build_document(
    component: Component,
    kind: ResourceKind,
    uid: str,
    text: str,
    downloader: ResourceDownloader | None,
) -> ResourceDocument:
    if kind in (ResourceKind.CONTACT, ResourceKind.GROUP):
        display_name = _first_value(component, "fn")
        photo = _photo(component, downloader)
    else:
        display_name = _first_value(component, "summary")
        photo = None

    members: tuple[str, ...] = ()
    if kind is ResourceKind.GROUP:
        members = tuple(
            _strip_urn(str(line.value))
            for key in _MEMBER_KEYS
            for line in component.contents.get(key, [])
        )

    return ResourceDocument(
        uid=uid,
        kind=kind,
        content=text,
        display_name=display_name,
        member_uids=members,
        photo=photo,
    )


def _vcard_kind(component: Component) -> ResourceKind:
    for key in _KIND_KEYS:
        value = _first_value(component, key)
        if value is not None and value.lower() == "group":
            return ResourceKind.GROUP
    return ResourceKind.CONTACT


def _first_value(component: Component, key: str) -> str | None:
    lines = component.contents.get(key)
    if not lines:
        return None
    value = lines[0].value
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _strip_urn(value: str) -> str:
    value = value.strip()
    if value.lower().startswith(_UUID_URN_PREFIX):
        return value[len(_UUID_URN_PREFIX) :]
    return value


def _photo(component: Component, downloader: ResourceDownloader | None) -> bytes | None:
    lines = component.contents.get("photo")
    if not lines:
        return None
    value = lines[0].value
    if isinstance(value, bytes):
        return value
    if not isinstance(value, str):
        return None

    value = value.strip()
    if value.startswith("data:"):
        _, _, data = value.partition(",")
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError):
            log.warning("Ignoring undecodable inline photo")
            return None
    if downloader is None:
        return None
    return downloader(value, PHOTO_ACCEPTS)


if TYPE_CHECKING:
    _parser_check: DocumentParser = parse_documents
