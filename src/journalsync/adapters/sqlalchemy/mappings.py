"""SQLAlchemy table metadata for the collection registry and resource stores."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    Enum,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

from journalsync.domain.model import ResourceKind, ServiceType

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

# Registry --------------------------------------------------------------------

service_table = Table(
    "service",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("account_name", String, nullable=False),
    Column("service_type", Enum(ServiceType, native_enum=False), nullable=False),
    UniqueConstraint("account_name", "service_type"),
)

collection_table = Table(
    "collection",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("service_id", Integer, ForeignKey("service.id", ondelete="CASCADE"), nullable=False),
    Column("url", String, nullable=False),
    Column("display_name", String, nullable=True),
    Column("description", Text, nullable=True),
    Column("color", Integer, nullable=True),
    Column("read_only", Boolean, nullable=False, default=False),
    UniqueConstraint("service_id", "url"),
)

# Resource stores -------------------------------------------------------------

resource_table = Table(
    "resource",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("collection_url", String, nullable=False),
    Column("uid", String, nullable=False),
    Column("kind", Enum(ResourceKind, native_enum=False), nullable=False),
    Column("content", Text, nullable=False),
    Column("e_tag", String, nullable=True),
    Column("display_name", String, nullable=True),
    Column("photo", LargeBinary, nullable=True),
    Column("dirty", Boolean, nullable=False, default=False),
    Column("deleted", Boolean, nullable=False, default=False),
    # sha256 of the content last exchanged with the server
    Column("sync_hash", String(64), nullable=True),
    UniqueConstraint("collection_url", "uid"),
)

Index("ix_resource_collection_flags", resource_table.c.collection_url, resource_table.c.dirty)

group_membership_table = Table(
    "group_membership",
    metadata,
    Column(
        "group_id",
        Integer,
        ForeignKey("resource.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "member_id",
        Integer,
        ForeignKey("resource.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

sync_state_table = Table(
    "sync_state",
    metadata,
    Column("collection_url", String, primary_key=True),
    Column("last_entry_uid", String, nullable=True),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
