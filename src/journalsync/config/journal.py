"""Journal service and account configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

JOURNAL_API_PATH = "api/v1/"
JOURNAL_TIMEOUT_SECONDS = 30.0
DOWNLOAD_TIMEOUT_SECONDS = 20.0


@dataclass(frozen=True, slots=True)
class AccountConfig:
    """Credentials and endpoint of the one account this client syncs."""

    account_name: str
    base_url: str
    auth_token: str = ""

    @property
    def api_url(self) -> str:
        return self.base_url.rstrip("/") + "/" + JOURNAL_API_PATH


@dataclass(frozen=True, slots=True)
class JournalConfig:
    account: AccountConfig
    resilience: ResilienceConfig


def journal_resilience(account: AccountConfig) -> ResilienceConfig:
    return ResilienceConfig(
        name="journal",
        base_url=account.api_url,
        timeout_seconds=JOURNAL_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={
            "Authorization": f"Token {account.auth_token}",
            "Accept": "application/json",
        },
    )


def download_resilience() -> ResilienceConfig:
    # no base_url and no credentials: every download targets its own host
    return ResilienceConfig(
        name="resource-download",
        timeout_seconds=DOWNLOAD_TIMEOUT_SECONDS,
        follow_redirects=True,
        retry=RetryPolicy(total=1),
        # sqlite file under the data dir, shared by every download
        cache=CacheConfig(),
    )


def get_account_config() -> AccountConfig:
    values = require_env_vars(
        ("JOURNALSYNC_ACCOUNT", "JOURNALSYNC_BASE_URL", "JOURNALSYNC_AUTH_TOKEN")
    )
    return AccountConfig(
        account_name=values["JOURNALSYNC_ACCOUNT"],
        base_url=values["JOURNALSYNC_BASE_URL"],
        auth_token=values["JOURNALSYNC_AUTH_TOKEN"],
    )


def get_journal_config(
    *,
    account: AccountConfig | None = None,
    resilience: ResilienceConfig | None = None,
) -> JournalConfig:
    resolved = account or get_account_config()
    return JournalConfig(account=resolved, resilience=resilience or journal_resilience(resolved))
