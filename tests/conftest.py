"""
Pytest fixtures for Ledger Explorer tests. In-memory fake transports and a
manual clock for the poll timer; no network access.
"""

from __future__ import annotations

import asyncio

import pytest

from ledger_explorer.core.exceptions import TransportError
from ledger_explorer.rpc.models import ObjectResponse, TransactionRecord


def make_digest(seq: int) -> str:
    return f"tx{seq:06d}"


def make_record(digest: str) -> TransactionRecord:
    seq = int(digest[2:])
    return TransactionRecord(
        digest=digest,
        sender=f"0xsender{seq % 3}",
        amount=seq * 10,
        gas_used=1000 + seq,
        timestamp_ms=1_700_000_000_000 + seq * 1000,
    )


async def settle(rounds: int = 20) -> None:
    """Let pending tasks run without waiting on the wall clock."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeFeedTransport:
    """
    Sequence space of `count` transactions with digests tx000000.. ascending.

    Set gate_pages / gate_count to an asyncio.Event to hold calls in flight.
    """

    def __init__(self, count: int = 45) -> None:
        self.count = count
        self.count_calls = 0
        self.range_calls: list[tuple[int, int]] = []
        self.multi_get_calls: list[list[str]] = []
        self.fail_count = False
        self.fail_pages = False
        self.gate_count: asyncio.Event | None = None
        self.gate_pages: asyncio.Event | None = None
        self.shuffle_hydration = False

    async def get_total_count(self) -> int:
        self.count_calls += 1
        if self.gate_count is not None:
            await self.gate_count.wait()
        if self.fail_count:
            raise TransportError("count unavailable", method="count")
        return self.count

    async def get_digests_in_range(self, start: int, end: int) -> list[str]:
        self.range_calls.append((start, end))
        if self.gate_pages is not None:
            await self.gate_pages.wait()
        if self.fail_pages:
            raise TransportError("range unavailable", method="range")
        return [make_digest(i) for i in range(start, end)]

    async def multi_get_transactions(self, digests: list[str]) -> list[TransactionRecord]:
        self.multi_get_calls.append(list(digests))
        records = [make_record(d) for d in digests]
        if self.shuffle_hydration:
            records.sort(key=lambda r: r.digest)
        return records


class FakeObjectTransport:
    """Owned-objects / dynamic-fields listing plus a canned multi-get result."""

    def __init__(
        self,
        *,
        owned: object = None,
        dynamic: object = None,
        objects: list[dict] | None = None,
    ) -> None:
        self.owned = owned if owned is not None else {"data": [], "hasNextPage": False}
        self.dynamic = dynamic if dynamic is not None else {"data": [], "hasNextPage": False}
        self.objects = objects or []
        self.multi_get_calls: list[tuple[list[str], dict]] = []
        self.fail_multi_get = False
        self.gate: asyncio.Event | None = None

    async def get_owned_objects(self, owner: str):
        if self.gate is not None:
            await self.gate.wait()
        return self.owned

    async def get_dynamic_fields(self, parent_id: str):
        return self.dynamic

    async def multi_get_objects(self, ids, **options):
        self.multi_get_calls.append((list(ids), options))
        if self.fail_multi_get:
            raise TransportError("multi-get failed", method="multi_get_objects")
        return [ObjectResponse.from_rpc_item(item) for item in self.objects]


class ManualClock:
    """Injectable sleep: each sleep() blocks until tick() releases it."""

    def __init__(self) -> None:
        self.sleeps: list[float] = []
        self._waiters: list[asyncio.Future] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        fut = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        await fut

    @property
    def pending(self) -> int:
        return len([f for f in self._waiters if not f.done()])

    async def tick(self) -> None:
        # Let freshly started timers reach their sleep first
        await settle()
        waiters, self._waiters = self._waiters, []
        for fut in waiters:
            if not fut.done():
                fut.set_result(None)
        await settle()


@pytest.fixture
def feed_transport():
    return FakeFeedTransport()


@pytest.fixture
def clock():
    return ManualClock()
