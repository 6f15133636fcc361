"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import Flag, StrEnum, auto


class ServiceType(StrEnum):
    ADDRESS_BOOK = "ADDRESS_BOOK"
    CALENDAR = "CALENDAR"
    TASKS = "TASKS"


class SyncAction(StrEnum):
    ADD = "ADD"
    CHANGE = "CHANGE"
    DELETE = "DELETE"


class ResourceKind(StrEnum):
    """Variant tag of a local resource."""

    CONTACT = "contact"
    GROUP = "group"
    EVENT = "event"
    TASK = "task"


class SyncTrigger(StrEnum):
    """Why the host started a session."""

    PERIODIC = "periodic"
    MANUAL = "manual"
    UPLOAD = "upload"  # only local changes need to go up


class Capability(Flag):
    CREATE = auto()
    UPDATE = auto()
    DELETE = auto()
    MEMBERSHIP = auto()
