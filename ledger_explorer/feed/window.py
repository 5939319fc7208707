"""
Page windows over the append-only transaction sequence space.

Page 1 is always the newest page: it ends at the current total count. Pages
count backwards from there, so a growing count shifts every window forward
without changing the page a caller asked for.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ledger_explorer.core.exceptions import OutOfRangeError


@dataclass(frozen=True)
class Window:
    """Half-open range [start, end) of sequence numbers, ascending."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start


def compute_window(total_count: int, page_size: int, page_index: int) -> Window:
    """
    Map (count, page size, 1-based page) to the sequence range for that page.

    Page indexes below 1 are treated as page 1. Raises OutOfRangeError when the
    page starts past the oldest transaction; callers clamp the page first.
    """
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    zero_based = max(page_index - 1, 0)
    end = total_count - page_size * zero_based
    if end < 0:
        raise OutOfRangeError(total_count, page_size, page_index)
    return Window(start=max(end - page_size, 0), end=end)


def max_page(total_count: int, page_size: int) -> int:
    """Highest page that holds data for this count; at least 1."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return max(1, math.ceil(max(total_count, 0) / page_size))


def clamp_page(requested_page: int, total_count: int, page_size: int) -> int:
    """Clamp a requested page into [1, max_page]. Idempotent."""
    return max(1, min(requested_page, max_page(total_count, page_size)))
