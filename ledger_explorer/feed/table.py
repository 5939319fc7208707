"""
Tabular view of a page of transactions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ledger_explorer.rpc.models import TransactionRecord


@dataclass(frozen=True)
class Column:
    header: str
    accessor_key: str


COLUMNS: tuple[Column, ...] = (
    Column("Transaction ID", "digest"),
    Column("Sender", "sender"),
    Column("Amount", "amount"),
    Column("Gas", "gas"),
    Column("Time", "time"),
)

# Headings for the empty placeholder table shown before the first page lands
PLACEHOLDER_COLUMNS: tuple[str, ...] = tuple(c.header for c in COLUMNS)


@dataclass(frozen=True)
class TxTable:
    columns: tuple[Column, ...]
    rows: tuple[dict[str, Any], ...]


def format_timestamp(timestamp_ms: int | None) -> str:
    if timestamp_ms is None:
        return "--"
    dt = datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)
    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


def _row(record: TransactionRecord) -> dict[str, Any]:
    return {
        "digest": record.digest,
        "sender": record.sender,
        "amount": "--" if record.amount is None else record.amount,
        "gas": "--" if record.gas_used is None else record.gas_used,
        "time": format_timestamp(record.timestamp_ms),
    }


def build_table(records: list[TransactionRecord]) -> TxTable:
    """One row per record, in the order given (already latest first)."""
    return TxTable(columns=COLUMNS, rows=tuple(_row(r) for r in records))


def render_text(table: TxTable) -> str:
    """Plain fixed-width rendering for the CLI."""
    headers = [c.header for c in table.columns]
    cells = [[str(row[c.accessor_key]) for c in table.columns] for row in table.rows]
    widths = [
        max([len(h)] + [len(line[i]) for line in cells]) for i, h in enumerate(headers)
    ]
    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths))]
    lines.append("  ".join("-" * w for w in widths))
    for line in cells:
        lines.append("  ".join(v.ljust(w) for v, w in zip(line, widths)))
    return "\n".join(lines)
