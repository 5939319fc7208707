"""
Recent transactions feed.

Windows the append-only transaction sequence into latest-first pages, polls
the total count on a timer, and keeps the visible page valid and fresh.
"""

from ledger_explorer.feed.controller import (
    FeedController,
    FeedPage,
    FeedStats,
    Pagination,
    QueryState,
)
from ledger_explorer.feed.fetcher import FeedFetcher
from ledger_explorer.feed.poller import PollScheduler, PollState
from ledger_explorer.feed.window import Window, clamp_page, compute_window, max_page

__all__ = [
    "FeedController",
    "FeedFetcher",
    "FeedPage",
    "FeedStats",
    "Pagination",
    "PollScheduler",
    "PollState",
    "QueryState",
    "Window",
    "clamp_page",
    "compute_window",
    "max_page",
]
