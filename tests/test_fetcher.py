"""
FeedFetcher tests against the in-memory transport.
"""

from __future__ import annotations

import pytest

from conftest import FakeFeedTransport, make_digest, make_record
from ledger_explorer.core.exceptions import HydrationError, NoDataError, OutOfRangeError
from ledger_explorer.feed.fetcher import FeedFetcher


@pytest.mark.asyncio
async def test_fetch_first_page_latest_first(feed_transport):
    fetcher = FeedFetcher(feed_transport)

    records = await fetcher.fetch(45, 20, 1)

    assert feed_transport.range_calls == [(25, 45)]
    assert [r.digest for r in records] == [make_digest(i) for i in range(44, 24, -1)]


@pytest.mark.asyncio
async def test_reversal_law(feed_transport):
    """Ascending [d1..dn] from the transport comes back as [hydrate(dn)..hydrate(d1)]."""
    fetcher = FeedFetcher(feed_transport)

    records = await fetcher.fetch(45, 20, 3)

    expected = [make_record(make_digest(i)) for i in (4, 3, 2, 1, 0)]
    assert records == expected


@pytest.mark.asyncio
async def test_hydration_is_one_batched_call(feed_transport):
    fetcher = FeedFetcher(feed_transport)

    await fetcher.fetch(45, 20, 1)

    assert len(feed_transport.multi_get_calls) == 1
    assert len(feed_transport.multi_get_calls[0]) == 20
    assert feed_transport.multi_get_calls[0][0] == make_digest(44)


@pytest.mark.asyncio
async def test_hydration_order_does_not_reorder(feed_transport):
    feed_transport.shuffle_hydration = True
    fetcher = FeedFetcher(feed_transport)

    records = await fetcher.fetch(45, 20, 1)

    assert records[0].digest == make_digest(44)
    assert records[-1].digest == make_digest(25)


@pytest.mark.asyncio
async def test_missing_hydrated_records_are_dropped():
    class PartialTransport(FakeFeedTransport):
        async def multi_get_transactions(self, digests):
            return [make_record(d) for d in digests if d != make_digest(3)]

    fetcher = FeedFetcher(PartialTransport(count=5))

    records = await fetcher.fetch(5, 20, 1)

    assert [r.digest for r in records] == [make_digest(i) for i in (4, 2, 1, 0)]


@pytest.mark.asyncio
async def test_nothing_hydrated_is_an_error():
    class EmptyTransport(FakeFeedTransport):
        async def multi_get_transactions(self, digests):
            self.multi_get_calls.append(list(digests))
            return []

    transport = EmptyTransport(count=5)
    fetcher = FeedFetcher(transport)

    with pytest.raises(HydrationError):
        await fetcher.fetch(5, 20, 1)
    assert len(transport.multi_get_calls) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("count", [0, None])
async def test_no_data_fails_fast(feed_transport, count):
    fetcher = FeedFetcher(feed_transport)

    with pytest.raises(NoDataError):
        await fetcher.fetch(count, 20, 1)
    assert feed_transport.range_calls == []


@pytest.mark.asyncio
async def test_unclamped_page_out_of_range(feed_transport):
    fetcher = FeedFetcher(feed_transport)

    with pytest.raises(OutOfRangeError):
        await fetcher.fetch(45, 20, 4)
    assert feed_transport.range_calls == []
