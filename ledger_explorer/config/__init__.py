"""
Configuration management for Ledger Explorer.

Loads and validates settings from environment variables and an optional .env
file. get_settings() is the single source of truth for feed configuration.
"""

from ledger_explorer.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
