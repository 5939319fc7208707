"""
Fetch one page of recent transactions, newest first.

The node returns digests for a sequence range in ascending order; the fetcher
reverses them and hydrates the whole page with a single batched multi-get.
"""

from __future__ import annotations

from typing import Any

from ledger_explorer.core.exceptions import HydrationError, NoDataError
from ledger_explorer.explorer_logging import get_logger
from ledger_explorer.feed.window import compute_window
from ledger_explorer.rpc.models import TransactionRecord

logger = get_logger(__name__)


class FeedFetcher:
    """
    Page fetcher over an RPC transport.

    rpc: anything with async get_digests_in_range(start, end) and
    multi_get_transactions(digests) (RpcClient in production).
    """

    def __init__(self, rpc: Any) -> None:
        self._rpc = rpc

    async def fetch(
        self,
        total_count: int | None,
        page_size: int,
        page: int,
    ) -> list[TransactionRecord]:
        """
        Return the records for one page, latest first.

        page must already be clamped against total_count. Raises NoDataError
        for a zero/unknown count, OutOfRangeError for an unclampable page and
        TransportError for RPC failures. Raises HydrationError when the window has
        digests but none of them hydrate, so an empty page is never cached.
        """
        if not total_count:
            raise NoDataError()

        window = compute_window(total_count, page_size, page)
        digests = await self._rpc.get_digests_in_range(window.start, window.end)
        # Range comes back ascending; newest first for display
        digests = list(reversed(digests))

        hydrated = await self._rpc.multi_get_transactions(digests)
        by_digest = {record.digest: record for record in hydrated}
        records = [by_digest[d] for d in digests if d in by_digest]
        if digests and not records:
            raise HydrationError(
                f"none of {len(digests)} digests in [{window.start}, {window.end}) hydrated"
            )
        if len(records) != len(digests):
            logger.warning(
                "feed_fetch_missing_records",
                requested=len(digests),
                hydrated=len(records),
                window_start=window.start,
                window_end=window.end,
            )
        logger.debug(
            "feed_fetch_done",
            total_count=total_count,
            page=page,
            window_start=window.start,
            window_end=window.end,
            record_count=len(records),
        )
        return records
