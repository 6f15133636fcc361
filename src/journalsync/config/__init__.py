"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .journal import (
    AccountConfig,
    JournalConfig,
    download_resilience,
    get_account_config,
    get_journal_config,
    journal_resilience,
)
from .logging import LOG_LEVEL_ENV, configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import DEFAULT_ENTRY_BATCH_LIMIT, SyncConfig, get_sync_config

__all__ = [
    "DEFAULT_ENTRY_BATCH_LIMIT",
    "LOG_LEVEL_ENV",
    "AccountConfig",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "JournalConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "download_resilience",
    "get_account_config",
    "get_database_config",
    "get_journal_config",
    "get_storage_config",
    "get_sync_config",
    "journal_resilience",
    "require_env_vars",
]
