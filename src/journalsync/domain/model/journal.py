"""Server-side journals and the entries they carry."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass

from journalsync.domain.errors import IntegrityError
from journalsync.domain.model.enums import SyncAction


@dataclass(frozen=True, slots=True)
class JournalRef:
    """Snapshot of one journal as listed by the server."""

    uid: str
    content: str
    read_only: bool = False
    version: int = 1

    def get_content(self) -> bytes:
        """Return the decoded collection payload carried by the journal."""

        try:
            return base64.b64decode(self.content, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise IntegrityError(f"Journal {self.uid} carries undecodable content") from exc


@dataclass(frozen=True, slots=True)
class SyncEntry:
    """One operation of a journal's ordered stream."""

    action: SyncAction
    content: str
    uid: str | None = None

    def is_action(self, action: SyncAction) -> bool:
        return self.action == action
