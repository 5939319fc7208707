"""
Application settings.

Responsibilities:
- Collect configuration from environment variables and .env (see config.env).
- Validate values and provide defaults for optional ones.
- Expose a typed, immutable Settings object for the feed controller, the
  object loader and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ledger_explorer.config import env
from ledger_explorer.core.exceptions import ConfigError


@dataclass(frozen=True)
class Settings:
    """Feed and transport configuration."""

    rpc_url: str = env.DEVNET_RPC_URL
    page_size: int = env.DEFAULT_PAGE_SIZE
    poll_interval_ms: int = env.DEFAULT_POLL_INTERVAL_MS
    pagination_style: str = env.DEFAULT_PAGINATION_STYLE
    rpc_timeout_sec: float = env.DEFAULT_RPC_TIMEOUT_SEC

    def __post_init__(self) -> None:
        if not self.rpc_url.strip():
            raise ConfigError("rpc_url must be non-empty")
        if self.page_size <= 0:
            raise ConfigError("page_size must be positive")
        if self.poll_interval_ms <= 0:
            raise ConfigError("poll_interval_ms must be positive")
        if self.pagination_style not in env.PAGINATION_STYLES:
            raise ConfigError(f"unknown pagination_style {self.pagination_style!r}")
        if self.rpc_timeout_sec <= 0:
            raise ConfigError("rpc_timeout_sec must be positive")

    @property
    def poll_interval_sec(self) -> float:
        return self.poll_interval_ms / 1000.0

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with non-None overrides applied (CLI flags)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def get_settings() -> Settings:
    """
    Return the current application settings built from the environment.

    Raises:
        ConfigError: if any env value is malformed.
    """
    return Settings(
        rpc_url=env.get_rpc_url(),
        page_size=env.get_page_size(),
        poll_interval_ms=env.get_poll_interval_ms(),
        pagination_style=env.get_pagination_style(),
        rpc_timeout_sec=env.get_rpc_timeout_sec(),
    )
