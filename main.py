"""
Main entrypoint: run the ledger explorer CLI.

Env: EXPLORER_RPC_URL or EXPLORER_NETWORK, EXPLORER_PAGE_SIZE,
EXPLORER_POLL_INTERVAL_MS, EXPLORER_PAGINATION, LOG_LEVEL, LOG_FORMAT.

    python main.py feed --page 2
    python main.py objects 0x... --dynamic-fields
"""

import sys

from ledger_explorer.cli import main

if __name__ == "__main__":
    sys.exit(main())
