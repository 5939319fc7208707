"""
Environment variable loading for Ledger Explorer.

- EXPLORER_NETWORK: devnet | testnet | mainnet (default: devnet)
- EXPLORER_RPC_URL: full node JSON-RPC endpoint (overrides the network default)
- EXPLORER_PAGE_SIZE: transactions per page (default: 20)
- EXPLORER_POLL_INTERVAL_MS: auto-refresh interval (default: 10000)
- EXPLORER_PAGINATION: buttoned-more | numbered-pages | none
- EXPLORER_RPC_TIMEOUT_SEC: HTTP timeout per RPC request (default: 30)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from ledger_explorer.core.exceptions import ConfigError

# Project root: config is ledger_explorer/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEVNET_RPC_URL = "https://fullnode.devnet.sui.io:443"
TESTNET_RPC_URL = "https://fullnode.testnet.sui.io:443"
MAINNET_RPC_URL = "https://fullnode.mainnet.sui.io:443"
NETWORK_RPC_URLS = {
    "devnet": DEVNET_RPC_URL,
    "testnet": TESTNET_RPC_URL,
    "mainnet": MAINNET_RPC_URL,
}

DEFAULT_PAGE_SIZE = 20
# Refresh at checkpoint boundaries (currently ~10s)
DEFAULT_POLL_INTERVAL_MS = 10_000
DEFAULT_RPC_TIMEOUT_SEC = 30.0

PAGINATION_BUTTONED_MORE = "buttoned-more"
PAGINATION_NUMBERED_PAGES = "numbered-pages"
PAGINATION_NONE = "none"
PAGINATION_STYLES = (PAGINATION_BUTTONED_MORE, PAGINATION_NUMBERED_PAGES, PAGINATION_NONE)
DEFAULT_PAGINATION_STYLE = PAGINATION_BUTTONED_MORE


def load_explorer_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env."""
    load_dotenv(_ENV_PATH)


def get_network() -> str:
    """
    Return EXPLORER_NETWORK from env: devnet | testnet | mainnet.
    Default: devnet. Unknown values fall back to devnet.
    """
    load_explorer_env()
    raw = (os.getenv("EXPLORER_NETWORK") or "devnet").strip().lower()
    if raw in NETWORK_RPC_URLS:
        return raw
    return "devnet"


def get_rpc_url() -> str:
    """
    Resolve the JSON-RPC URL from env.
    Order: EXPLORER_RPC_URL > network default.
    """
    load_explorer_env()
    url = (os.getenv("EXPLORER_RPC_URL") or "").strip()
    if url:
        return url
    return NETWORK_RPC_URLS[get_network()]


def _positive_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def get_page_size() -> int:
    load_explorer_env()
    return _positive_int("EXPLORER_PAGE_SIZE", DEFAULT_PAGE_SIZE)


def get_poll_interval_ms() -> int:
    load_explorer_env()
    return _positive_int("EXPLORER_POLL_INTERVAL_MS", DEFAULT_POLL_INTERVAL_MS)


def get_pagination_style() -> str:
    """Return EXPLORER_PAGINATION; raise ConfigError for unknown styles."""
    load_explorer_env()
    raw = (os.getenv("EXPLORER_PAGINATION") or DEFAULT_PAGINATION_STYLE).strip().lower()
    if raw not in PAGINATION_STYLES:
        raise ConfigError(
            f"EXPLORER_PAGINATION must be one of {', '.join(PAGINATION_STYLES)}, got {raw!r}"
        )
    return raw


def get_rpc_timeout_sec() -> float:
    load_explorer_env()
    raw = (os.getenv("EXPLORER_RPC_TIMEOUT_SEC") or "").strip()
    if not raw:
        return DEFAULT_RPC_TIMEOUT_SEC
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(f"EXPLORER_RPC_TIMEOUT_SEC must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"EXPLORER_RPC_TIMEOUT_SEC must be positive, got {value}")
    return value


def mask_rpc_url(url: str) -> str:
    """Mask an API key embedded in the RPC URL for logging."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
