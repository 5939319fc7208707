"""
Async JSON-RPC client for a read-only full node.

Responsibilities:
- POST JSON-RPC 2.0 requests over a shared httpx.AsyncClient.
- Turn HTTP failures, JSON-RPC error objects and empty results into
  TransportError so callers handle one failure type.
- Normalize results into rpc.models dataclasses (transactions, objects).

No retries: the feed retries on the next poll tick, the object loader on the
next load.
"""

from __future__ import annotations

import itertools
from typing import Any

import httpx

from ledger_explorer.core.exceptions import RpcError, TransportError
from ledger_explorer.explorer_logging import get_logger
from ledger_explorer.rpc.models import ObjectResponse, TransactionRecord

logger = get_logger(__name__)

METHOD_TOTAL_COUNT = "sui_getTotalTransactionNumber"
METHOD_DIGESTS_IN_RANGE = "sui_getTransactionDigestsInRangeDeprecated"
METHOD_MULTI_GET_TRANSACTIONS = "sui_multiGetTransactions"
METHOD_MULTI_GET_OBJECTS = "sui_multiGetObjects"
METHOD_OWNED_OBJECTS = "suix_getOwnedObjects"
METHOD_DYNAMIC_FIELDS = "suix_getDynamicFields"

DEFAULT_TIMEOUT_SEC = 30.0

# Everything the transaction table needs: sender, effects (gas) and balance changes
_TX_OPTIONS = {"showInput": True, "showEffects": True, "showBalanceChanges": True}


class RpcClient:
    """
    Thin async JSON-RPC client.

    Owns its httpx.AsyncClient unless one is injected (tests pass a client
    built on httpx.MockTransport). Use as an async context manager or call
    aclose() when done.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        self._rpc_url = rpc_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_sec))
        self._ids = itertools.count(1)

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _build_body(self, method: str, params: list[Any]) -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }

    async def call(self, method: str, params: list[Any] | None = None) -> Any:
        """Perform one JSON-RPC call; raise TransportError on transport or RPC error."""
        body = self._build_body(method, params or [])
        try:
            resp = await self._client.post(self._rpc_url, json=body)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            logger.warning("rpc_transport_error", method=method, error=str(e))
            raise TransportError(f"{method} failed: {e}", method=method) from e
        except ValueError as e:
            logger.warning("rpc_invalid_json", method=method, error=str(e))
            raise TransportError(f"{method} returned invalid JSON", method=method) from e

        if not isinstance(data, dict):
            raise TransportError(f"{method} returned a non-object response", method=method)
        if "error" in data:
            err = data["error"]
            code = err.get("code") if isinstance(err, dict) else None
            message = err.get("message", err) if isinstance(err, dict) else err
            logger.warning("rpc_error", method=method, code=code, error=str(message))
            raise RpcError(method, code, str(message))
        if data.get("result") is None:
            raise TransportError(f"{method} returned no result", method=method)
        return data["result"]

    async def get_total_count(self) -> int:
        result = await self.call(METHOD_TOTAL_COUNT)
        try:
            return int(result)
        except (TypeError, ValueError) as e:
            raise TransportError(
                f"{METHOD_TOTAL_COUNT} returned a non-integer count", method=METHOD_TOTAL_COUNT
            ) from e

    async def get_digests_in_range(self, start: int, end: int) -> list[str]:
        """Digests for sequence numbers [start, end), ascending."""
        result = await self.call(METHOD_DIGESTS_IN_RANGE, [start, end])
        if not isinstance(result, list):
            raise TransportError(
                f"{METHOD_DIGESTS_IN_RANGE} returned a non-list result",
                method=METHOD_DIGESTS_IN_RANGE,
            )
        # Older nodes return [seq, digest] pairs
        return [item[1] if isinstance(item, list) else item for item in result]

    async def multi_get_transactions(self, digests: list[str]) -> list[TransactionRecord]:
        """Hydrate all digests in a single batched call."""
        if not digests:
            return []
        result = await self.call(METHOD_MULTI_GET_TRANSACTIONS, [list(digests), _TX_OPTIONS])
        if not isinstance(result, list):
            raise TransportError(
                f"{METHOD_MULTI_GET_TRANSACTIONS} returned a non-list result",
                method=METHOD_MULTI_GET_TRANSACTIONS,
            )
        records: list[TransactionRecord] = []
        for item in result:
            # Per-digest error items carry no digest
            if not isinstance(item, dict) or "digest" not in item:
                logger.warning(
                    "rpc_skip_invalid_transaction_item", method=METHOD_MULTI_GET_TRANSACTIONS
                )
                continue
            records.append(TransactionRecord.from_rpc_item(item))
        return records

    async def multi_get_objects(
        self,
        ids: list[str],
        *,
        show_type: bool = True,
        show_content: bool = True,
        show_display: bool = True,
    ) -> list[ObjectResponse]:
        if not ids:
            return []
        options = {
            "showType": show_type,
            "showContent": show_content,
            "showDisplay": show_display,
        }
        result = await self.call(METHOD_MULTI_GET_OBJECTS, [list(ids), options])
        if not isinstance(result, list):
            raise TransportError(
                f"{METHOD_MULTI_GET_OBJECTS} returned a non-list result",
                method=METHOD_MULTI_GET_OBJECTS,
            )
        return [ObjectResponse.from_rpc_item(item) for item in result if isinstance(item, dict)]

    async def get_owned_objects(self, owner: str) -> dict[str, Any]:
        """First page of objects owned by an address (raw paginated response)."""
        return await self.call(METHOD_OWNED_OBJECTS, [owner])

    async def get_dynamic_fields(self, parent_id: str) -> dict[str, Any]:
        """First page of dynamic fields under a parent object (raw paginated response)."""
        return await self.call(METHOD_DYNAMIC_FIELDS, [parent_id])
