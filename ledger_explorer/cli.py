"""
Command line entrypoint.

    ledger-explorer feed [--page N] [--page-size N] [--pagination STYLE] [--once]
    ledger-explorer objects ID [--dynamic-fields]

Settings come from the environment (see config.env); flags override them.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from ledger_explorer.config.env import PAGINATION_STYLES, mask_rpc_url
from ledger_explorer.config.settings import Settings, get_settings
from ledger_explorer.core.exceptions import ExplorerError
from ledger_explorer.explorer_logging import get_logger
from ledger_explorer.feed.controller import FeedController, FeedPage, QueryState
from ledger_explorer.feed.table import render_text
from ledger_explorer.objects.loader import OwnedObjectsLoader
from ledger_explorer.rpc.client import RpcClient

logger = get_logger(__name__)


def _print_state(controller: FeedController, state: QueryState[FeedPage]) -> None:
    if state.is_error:
        print(f"ERROR: {state.error}", file=sys.stderr)
        return
    if not state.is_success or state.is_stale or state.data is None:
        return
    stats = controller.stats
    print(render_text(state.data.table))
    pagination = controller.pagination
    if pagination is not None and pagination.more_link is None:
        print(f"{stats.stats_text}: {stats.count}  page {pagination.current_page}/{pagination.max_page}")
    elif pagination is not None:
        print(f"{stats.stats_text}: {stats.count}  More Transactions: {pagination.more_link}")
    print()


async def run_feed(settings: Settings, page: int, once: bool) -> int:
    async with RpcClient(settings.rpc_url, timeout_sec=settings.rpc_timeout_sec) as rpc:
        controller = FeedController(rpc, settings, page=page)
        controller.subscribe(lambda state: _print_state(controller, state))
        await controller.start()
        await controller.wait_idle()
        if once:
            await controller.stop()
            return 0 if controller.state.is_success else 1
        try:
            # Timer task keeps refreshing; park until interrupted
            await asyncio.Event().wait()
        finally:
            await controller.stop()
    return 0


async def run_objects(settings: Settings, object_id: str, by_address: bool) -> int:
    async with RpcClient(settings.rpc_url, timeout_sec=settings.rpc_timeout_sec) as rpc:
        loader = OwnedObjectsLoader(rpc)
        try:
            records = await loader.load(object_id, by_address=by_address)
        except ExplorerError:
            print(loader.error, file=sys.stderr)
            return 1
    for record in records:
        balance = f" balance={record.balance}" if record.is_coin else ""
        name = f" name={record.name!r}" if record.name else ""
        image = f" image={record.display}" if record.display else ""
        print(f"{record.id}  {record.type}{balance}{name}{image}")
    if not records:
        print("No objects")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledger-explorer",
        description="Live feed of recent ledger transactions and owned objects.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    feed = sub.add_parser("feed", help="Show the latest transactions, refreshing on a timer")
    feed.add_argument("--page", type=int, default=1, help="1-based page (default: 1, the newest)")
    feed.add_argument("--page-size", type=int, default=None, help="Transactions per page (default: env or 20)")
    feed.add_argument("--pagination", choices=PAGINATION_STYLES, default=None, help="Pagination style")
    feed.add_argument("--poll-interval-ms", type=int, default=None, help="Auto-refresh interval")
    feed.add_argument("--once", action="store_true", help="Print one page and exit")

    objects = sub.add_parser("objects", help="List objects owned by an address")
    objects.add_argument("id", help="Owner address, or parent object id with --dynamic-fields")
    objects.add_argument(
        "--dynamic-fields", action="store_true", help="Treat ID as a parent object and list its dynamic fields"
    )

    parser.add_argument("--rpc-url", default=None, help="Full node JSON-RPC URL (default: env)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings().with_overrides(rpc_url=args.rpc_url)
        if args.command == "feed":
            settings = settings.with_overrides(
                page_size=args.page_size,
                pagination_style=args.pagination,
                poll_interval_ms=args.poll_interval_ms,
            )
    except ExplorerError as e:
        print("ERROR:", e, file=sys.stderr)
        return 2

    logger.info("cli_started", command=args.command, rpc_url=mask_rpc_url(settings.rpc_url))
    try:
        if args.command == "feed":
            return asyncio.run(run_feed(settings, args.page, args.once))
        return asyncio.run(run_objects(settings, args.id, by_address=not args.dynamic_fields))
    except KeyboardInterrupt:
        logger.info("cli_interrupted")
        return 0
