"""
Structured logging for Ledger Explorer.

Use get_logger(__name__) in every module and log_context(...) around a unit of
work (a page fetch, an owned-objects load) to tag its lines.
"""

from ledger_explorer.explorer_logging.logger import configure_logging, get_logger, log_context

__all__ = ["configure_logging", "get_logger", "log_context"]
