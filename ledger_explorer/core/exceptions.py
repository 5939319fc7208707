"""
Application-level exceptions.

Feed errors (OutOfRangeError, NoDataError, TransportError) end up as terminal
error states on the feed controller; HydrationError is the single failure of
an owned-objects load. None of them is fatal to the process.
"""

from __future__ import annotations

from typing import Any


class ExplorerError(Exception):
    """Base class for all ledger_explorer errors."""


class ConfigError(ExplorerError, ValueError):
    """Invalid configuration value (env var or constructor argument)."""


class OutOfRangeError(ExplorerError):
    """Requested page lies beyond any data that could exist for the count."""

    def __init__(self, total_count: int, page_size: int, page_index: int) -> None:
        super().__init__(
            f"Invalid transaction number: page {page_index} of size {page_size} "
            f"is out of range for {total_count} transactions"
        )
        self.total_count = total_count
        self.page_size = page_size
        self.page_index = page_index


class NoDataError(ExplorerError):
    """Total transaction count is zero or unknown."""

    def __init__(self, message: str = "No transactions found") -> None:
        super().__init__(message)


class TransportError(ExplorerError):
    """Any network or RPC failure while talking to the node."""

    def __init__(self, message: str, *, method: str | None = None) -> None:
        super().__init__(message)
        self.method = method


class RpcError(TransportError):
    """JSON-RPC error object returned by the node."""

    def __init__(self, method: str, code: Any, message: str) -> None:
        super().__init__(f"RPC error: {message} (code={code})", method=method)
        self.code = code


class HydrationError(ExplorerError):
    """
    Records could not be hydrated: a feed page where no digest resolved, or an
    owned-objects load that failed at some step. No partial result is kept.
    """
