"""SQLAlchemy adapter package for journalsync."""

from __future__ import annotations

from .mappings import create_all_tables, metadata
from .repositories import (
    SqlAlchemyCollectionRegistry,
    SqlAlchemyResourceStore,
    SqlAlchemyResourceStores,
)
from .unit_of_work import (
    SqlAlchemySyncUnitOfWork,
    StartupError,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCollectionRegistry",
    "SqlAlchemyResourceStore",
    "SqlAlchemyResourceStores",
    "SqlAlchemySyncUnitOfWork",
    "StartupError",
    "create_all_tables",
    "metadata",
    "shutdown",
    "startup",
]
