"""
Ledgerman Adapters.

Implementations of protocols for external systems.
"""

from ledgerman.adapters.cashbook import (
    CallbackCashbookBridge,
    build_cashbook_entry,
    get_cashbook_bridge,
    reset_cashbook_bridge,
)
from ledgerman.adapters.noop import NoopCashbookBridge

__all__ = [
    "CallbackCashbookBridge",
    "NoopCashbookBridge",
    "build_cashbook_entry",
    "get_cashbook_bridge",
    "reset_cashbook_bridge",
]
