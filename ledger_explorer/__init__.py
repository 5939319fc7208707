"""
Ledger Explorer: live feed of recent ledger transactions.

Polls a read-only JSON-RPC node for the total transaction count, windows the
append-only sequence space into fixed-size pages, and hydrates each page into
latest-first transaction records. Also resolves owned objects and dynamic
fields for an address or parent object.
"""

__version__ = "0.1.0"
