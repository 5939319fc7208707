"""
Data models for node RPC responses.

Frozen dataclasses normalized from raw JSON-RPC results. Each model has a
from_rpc_item classmethod tolerant of missing optional fields, so downstream
code never touches raw dicts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

STATUS_EXISTS = "Exists"


def _to_int(value: Any) -> int | None:
    # Node returns u64 values as decimal strings
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _gas_used(effects: dict[str, Any]) -> int | None:
    gas = effects.get("gasUsed")
    if not isinstance(gas, dict):
        return None
    computation = _to_int(gas.get("computationCost")) or 0
    storage = _to_int(gas.get("storageCost")) or 0
    rebate = _to_int(gas.get("storageRebate")) or 0
    return computation + storage - rebate


def _transfer_amount(item: dict[str, Any], sender: str) -> int | None:
    """Sum of positive balance changes credited to owners other than the sender."""
    changes = item.get("balanceChanges")
    if not isinstance(changes, list):
        return None
    total = 0
    seen = False
    for change in changes:
        if not isinstance(change, dict):
            continue
        owner = change.get("owner")
        address = owner.get("AddressOwner") if isinstance(owner, dict) else None
        amount = _to_int(change.get("amount"))
        if amount is None or amount <= 0 or address == sender:
            continue
        total += amount
        seen = True
    return total if seen else None


@dataclass(frozen=True)
class TransactionRecord:
    """
    One hydrated transaction. Immutable once fetched; identity is digest.
    """

    digest: str
    sender: str
    amount: int | None
    gas_used: int | None
    timestamp_ms: int | None

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "TransactionRecord":
        """Build from a single multi-get transaction result item."""
        tx = item.get("transaction") or {}
        data = tx.get("data") if isinstance(tx, dict) else None
        sender = (data or {}).get("sender") or ""
        effects = item.get("effects") or {}
        return cls(
            digest=item["digest"],
            sender=sender,
            amount=_transfer_amount(item, sender),
            gas_used=_gas_used(effects) if isinstance(effects, dict) else None,
            timestamp_ms=_to_int(item.get("timestampMs")),
        )


@dataclass(frozen=True)
class ObjectResponse:
    """
    One multi-get object result: status plus the raw details payload.

    details is the object data when status is Exists, otherwise whatever the
    node reports for the missing object (id string or error dict).
    """

    status: str
    details: Any

    @property
    def exists(self) -> bool:
        return self.status == STATUS_EXISTS

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "ObjectResponse":
        """Accept both {status, details} and {data} / {error} result shapes."""
        if "status" in item:
            return cls(status=str(item["status"]), details=item.get("details"))
        if isinstance(item.get("data"), dict):
            return cls(status=STATUS_EXISTS, details=item["data"])
        error = item.get("error") or {}
        code = error.get("code") if isinstance(error, dict) else None
        return cls(status=str(code or "NotExists"), details=error)


@dataclass(frozen=True)
class OwnedObjectRecord:
    """Hydrated, classified object shown in an owned-objects list."""

    id: str
    type: str
    is_coin: bool
    balance: int | None = None
    display: str | None = None
    name: str = ""
