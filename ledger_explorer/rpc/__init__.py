"""
Full node JSON-RPC transport.

Wraps the read-only RPC methods the feed and the object loader depend on and
normalizes results into frozen dataclasses.
"""

from ledger_explorer.rpc.client import RpcClient
from ledger_explorer.rpc.models import ObjectResponse, OwnedObjectRecord, TransactionRecord

__all__ = [
    "ObjectResponse",
    "OwnedObjectRecord",
    "RpcClient",
    "TransactionRecord",
]
