"""
Live "recent transactions" feed: count polling, page windows, cached pages.

FeedController ties the pieces together:
- PollScheduler refetches the total count every poll interval (unless paused).
- Each count change or page request re-derives the effective page with
  clamp_page and the cache key (count, page_size, page).
- FeedFetcher loads a key at most once at a time; completed pages go into an
  in-memory cache written only by the fetch that produced them.
- Stale-while-revalidate: while a new key loads, the last successful page
  stays visible with is_stale=True.
- Last request wins: a page that lands for a key that is no longer current is
  cached but never shown.

Everything runs on one asyncio loop; no locks are needed.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from ledger_explorer.config.env import (
    PAGINATION_NONE,
    PAGINATION_NUMBERED_PAGES,
)
from ledger_explorer.config.settings import Settings
from ledger_explorer.explorer_logging import get_logger, log_context
from ledger_explorer.feed.fetcher import FeedFetcher
from ledger_explorer.feed.poller import PollScheduler, PollState, SleepFn
from ledger_explorer.feed.table import TxTable, build_table
from ledger_explorer.feed.window import clamp_page, max_page
from ledger_explorer.rpc.models import TransactionRecord

logger = get_logger(__name__)

T = TypeVar("T")

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

NO_TRANSACTIONS_MESSAGE = "No transactions found."
PAGE_ERROR_MESSAGE = "There was an issue getting the latest transactions."

STATS_TEXT = "Total Transactions"
MORE_TRANSACTIONS_LINK = "/transactions"

# Count query status -> stats load state
STATUS_TO_LOAD_STATE: dict[str, str] = {
    STATUS_IDLE: "pending",
    STATUS_LOADING: "pending",
    STATUS_SUCCESS: "loaded",
    STATUS_ERROR: "fail",
}

# Every count change mints new keys; keep only the most recent pages
DEFAULT_MAX_CACHED_PAGES = 64

PageKey = tuple[int, int, int]


@dataclass(frozen=True)
class QueryState(Generic[T]):
    """Observable result of a query: status, data shown, staleness, error banner."""

    status: str = STATUS_IDLE
    data: T | None = None
    is_stale: bool = False
    error: str | None = None

    @property
    def is_error(self) -> bool:
        return self.status == STATUS_ERROR

    @property
    def is_success(self) -> bool:
        return self.status == STATUS_SUCCESS


@dataclass(frozen=True)
class FeedPage:
    """One loaded page: records latest first plus the table built from them."""

    key: PageKey
    records: tuple[TransactionRecord, ...]
    table: TxTable

    @property
    def total_count(self) -> int:
        return self.key[0]

    @property
    def page(self) -> int:
        return self.key[2]

    @property
    def columns(self):
        return self.table.columns

    @property
    def rows(self):
        return self.table.rows


@dataclass(frozen=True)
class FeedStats:
    count: int
    stats_text: str
    load_state: str


@dataclass(frozen=True)
class Pagination:
    style: str
    total_items: int
    items_per_page: int
    current_page: int
    max_page: int
    more_link: str | None = None


class FeedController:
    """
    Current page of recent transactions, kept fresh by polling.

    rpc: transport with async get_total_count(), get_digests_in_range(start, end)
    and multi_get_transactions(digests) (RpcClient in production).
    sleep: injectable sleep for the poll timer (tests drive ticks by hand).
    """

    def __init__(
        self,
        rpc: Any,
        settings: Settings | None = None,
        *,
        page: int = 1,
        sleep: SleepFn | None = None,
        fetcher: FeedFetcher | None = None,
        max_cached_pages: int = DEFAULT_MAX_CACHED_PAGES,
    ) -> None:
        cfg = settings or Settings()
        self._rpc = rpc
        self._fetcher = fetcher or FeedFetcher(rpc)
        self._page_size = cfg.page_size
        self._pagination_style = cfg.pagination_style
        self._requested_page = max(1, page)
        self._scheduler = PollScheduler(
            self.refresh_count, interval_ms=cfg.poll_interval_ms, sleep=sleep
        )
        self._max_cached = max(1, max_cached_pages)

        self._count: int | None = None
        self._count_state: QueryState[int] = QueryState()
        self._state: QueryState[FeedPage] = QueryState()
        self._cache: OrderedDict[PageKey, FeedPage] = OrderedDict()
        self._inflight: dict[PageKey, asyncio.Task] = {}
        self._current_key: PageKey | None = None
        self._last_success: FeedPage | None = None
        self._listeners: list[Callable[[QueryState[FeedPage]], Any]] = []

    # ---- observable state ----

    @property
    def state(self) -> QueryState[FeedPage]:
        return self._state

    @property
    def count_state(self) -> QueryState[int]:
        return self._count_state

    @property
    def count(self) -> int | None:
        return self._count

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def requested_page(self) -> int:
        return self._requested_page

    @property
    def current_page(self) -> int:
        """Requested page clamped against the latest count."""
        return clamp_page(self._requested_page, self._count or 0, self._page_size)

    @property
    def max_page(self) -> int:
        return max_page(self._count or 0, self._page_size)

    @property
    def poll_state(self) -> PollState:
        return self._scheduler.state

    @property
    def scheduler(self) -> PollScheduler:
        return self._scheduler

    @property
    def stats(self) -> FeedStats:
        return FeedStats(
            count=self._count or 0,
            stats_text=STATS_TEXT,
            load_state=STATUS_TO_LOAD_STATE[self._count_state.status],
        )

    @property
    def pagination(self) -> Pagination | None:
        """Pagination chrome for the configured style; usable even when a page failed."""
        if self._pagination_style == PAGINATION_NONE:
            return None
        more_link = None
        if self._pagination_style != PAGINATION_NUMBERED_PAGES:
            more_link = MORE_TRANSACTIONS_LINK
        return Pagination(
            style=self._pagination_style,
            total_items=self._count or 0,
            items_per_page=self._page_size,
            current_page=self.current_page,
            max_page=self.max_page,
            more_link=more_link,
        )

    def subscribe(self, callback: Callable[[QueryState[FeedPage]], Any]) -> Callable[[], None]:
        """Call callback with every new feed state; returns an unsubscribe function."""
        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    # ---- lifecycle ----

    async def start(self) -> None:
        """Fetch the count (and first page) once, then start the poll timer."""
        logger.info(
            "feed_started",
            page_size=self._page_size,
            poll_interval_ms=self._scheduler.state.interval_ms,
            pagination=self._pagination_style,
        )
        await self._scheduler.trigger()
        self._scheduler.start()

    async def stop(self) -> None:
        await self._scheduler.stop()
        pending = [t for t in self._inflight.values() if not t.done()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info("feed_stopped")

    async def wait_idle(self) -> None:
        """Wait until no count refetch or page fetch is in flight."""
        while True:
            pending = [t for t in self._inflight.values() if not t.done()]
            if self._scheduler.inflight is not None:
                pending.append(self._scheduler.inflight)
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def pause(self) -> None:
        self._scheduler.pause()

    def resume(self) -> asyncio.Task | None:
        return self._scheduler.resume()

    def refetch(self) -> asyncio.Task:
        """Refetch the count now (joins a refetch already in flight)."""
        return self._scheduler.trigger()

    # ---- navigation ----

    def set_page(self, page: int) -> asyncio.Task | None:
        """Request a 1-based page; returns the page fetch task when one was started."""
        self._requested_page = max(1, int(page))
        logger.debug("feed_page_requested", page=self._requested_page)
        return self._sync()

    def set_page_size(self, page_size: int) -> asyncio.Task | None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._page_size = page_size
        logger.debug("feed_page_size_changed", page_size=page_size)
        return self._sync()

    # ---- count query ----

    async def refresh_count(self) -> None:
        """Fetch the total count, then re-derive and load the current page."""
        if self._count_state.status == STATUS_IDLE:
            self._count_state = QueryState(status=STATUS_LOADING)
            self._publish(QueryState(status=STATUS_LOADING))
        try:
            count = await self._rpc.get_total_count()
        except Exception as e:
            logger.warning("feed_count_failed", error=str(e))
            self._count_state = QueryState(
                status=STATUS_ERROR, data=self._count, error=NO_TRANSACTIONS_MESSAGE
            )
            self._current_key = None
            self._publish(QueryState(status=STATUS_ERROR, error=NO_TRANSACTIONS_MESSAGE))
            return

        if count != self._count:
            logger.debug("feed_count_changed", previous=self._count, total_count=count)
        self._count = count
        self._count_state = QueryState(status=STATUS_SUCCESS, data=count)
        self._sync()

    # ---- page query ----

    def _sync(self) -> asyncio.Task | None:
        """Derive the current key from count and page; show cache or start a fetch."""
        if self._count_state.status != STATUS_SUCCESS:
            return None
        count = self._count
        if not count:
            self._current_key = None
            logger.info("feed_no_transactions", total_count=count)
            self._publish(QueryState(status=STATUS_ERROR, error=NO_TRANSACTIONS_MESSAGE))
            return None

        page = clamp_page(self._requested_page, count, self._page_size)
        key: PageKey = (count, self._page_size, page)
        self._current_key = key

        cached = self._cache.get(key)
        if cached is not None:
            self._commit(cached)
            return None

        if self._last_success is not None:
            self._publish(
                QueryState(status=STATUS_SUCCESS, data=self._last_success, is_stale=True)
            )
        else:
            self._publish(QueryState(status=STATUS_LOADING))
        return self._ensure_fetch(key)

    def _ensure_fetch(self, key: PageKey) -> asyncio.Task:
        task = self._inflight.get(key)
        if task is not None and not task.done():
            return task
        task = asyncio.create_task(self._load_page(key))
        self._inflight[key] = task
        return task

    async def _load_page(self, key: PageKey) -> None:
        count, page_size, page = key
        # Runs in its own task, so the bound context stays with this page fetch
        with log_context(total_count=count, page_size=page_size, page=page):
            await self._load_page_in_context(key)

    async def _load_page_in_context(self, key: PageKey) -> None:
        count, page_size, page = key
        try:
            records = await self._fetcher.fetch(count, page_size, page)
        except Exception as e:
            logger.warning("feed_page_failed", error=str(e))
            if key == self._current_key:
                self._publish(QueryState(status=STATUS_ERROR, error=PAGE_ERROR_MESSAGE))
            return
        finally:
            self._inflight.pop(key, None)

        feed_page = FeedPage(key=key, records=tuple(records), table=build_table(records))
        self._store(key, feed_page)
        if key != self._current_key:
            logger.debug("feed_page_discarded")
            return
        logger.info("feed_page_loaded", record_count=len(records))
        self._commit(feed_page)

    def _store(self, key: PageKey, feed_page: FeedPage) -> None:
        self._cache[key] = feed_page
        self._cache.move_to_end(key)
        while len(self._cache) > self._max_cached:
            self._cache.popitem(last=False)

    def _commit(self, feed_page: FeedPage) -> None:
        self._last_success = feed_page
        self._publish(QueryState(status=STATUS_SUCCESS, data=feed_page))

    def _publish(self, state: QueryState[FeedPage]) -> None:
        if state == self._state:
            return
        self._state = state
        for callback in list(self._listeners):
            try:
                callback(state)
            except Exception as e:
                logger.warning("feed_listener_failed", error=str(e))
