"""
Core cross-cutting pieces shared by the feed and the object loader.
"""

from ledger_explorer.core.exceptions import (
    ConfigError,
    ExplorerError,
    HydrationError,
    NoDataError,
    OutOfRangeError,
    RpcError,
    TransportError,
)

__all__ = [
    "ConfigError",
    "ExplorerError",
    "HydrationError",
    "NoDataError",
    "OutOfRangeError",
    "RpcError",
    "TransportError",
]
