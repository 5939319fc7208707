"""
Settings and env resolution tests.
"""

from __future__ import annotations

import pytest

from ledger_explorer.config import env
from ledger_explorer.config.settings import Settings, get_settings
from ledger_explorer.core.exceptions import ConfigError

_ENV_VARS = (
    "EXPLORER_NETWORK",
    "EXPLORER_RPC_URL",
    "EXPLORER_PAGE_SIZE",
    "EXPLORER_POLL_INTERVAL_MS",
    "EXPLORER_PAGINATION",
    "EXPLORER_RPC_TIMEOUT_SEC",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = get_settings()
    assert settings.rpc_url == env.DEVNET_RPC_URL
    assert settings.page_size == 20
    assert settings.poll_interval_ms == 10_000
    assert settings.poll_interval_sec == 10.0
    assert settings.pagination_style == "buttoned-more"


def test_network_selects_default_url(monkeypatch):
    monkeypatch.setenv("EXPLORER_NETWORK", "mainnet")
    assert get_settings().rpc_url == env.MAINNET_RPC_URL
    monkeypatch.setenv("EXPLORER_NETWORK", "somewhere")
    assert get_settings().rpc_url == env.DEVNET_RPC_URL


def test_explicit_url_wins(monkeypatch):
    monkeypatch.setenv("EXPLORER_NETWORK", "testnet")
    monkeypatch.setenv("EXPLORER_RPC_URL", "http://localhost:9000")
    assert get_settings().rpc_url == "http://localhost:9000"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("EXPLORER_PAGE_SIZE", "50")
    monkeypatch.setenv("EXPLORER_POLL_INTERVAL_MS", "2500")
    monkeypatch.setenv("EXPLORER_PAGINATION", "numbered-pages")
    monkeypatch.setenv("EXPLORER_RPC_TIMEOUT_SEC", "5")
    settings = get_settings()
    assert settings.page_size == 50
    assert settings.poll_interval_ms == 2500
    assert settings.pagination_style == "numbered-pages"
    assert settings.rpc_timeout_sec == 5.0


@pytest.mark.parametrize(
    "name, value",
    [
        ("EXPLORER_PAGE_SIZE", "zero"),
        ("EXPLORER_PAGE_SIZE", "0"),
        ("EXPLORER_POLL_INTERVAL_MS", "-1"),
        ("EXPLORER_PAGINATION", "infinite-scroll"),
        ("EXPLORER_RPC_TIMEOUT_SEC", "soon"),
    ],
)
def test_invalid_env_raises_config_error(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        get_settings()


def test_settings_validation_and_overrides():
    with pytest.raises(ConfigError):
        Settings(page_size=0)
    with pytest.raises(ValueError):
        Settings(pagination_style="bogus")

    settings = Settings().with_overrides(page_size=5, rpc_url=None)
    assert settings.page_size == 5
    assert settings.rpc_url == env.DEVNET_RPC_URL


def test_mask_rpc_url():
    assert env.mask_rpc_url("https://node/?api-key=secret") == "https://node/?api-key=***"
    assert env.mask_rpc_url("https://node/") == "https://node/"
