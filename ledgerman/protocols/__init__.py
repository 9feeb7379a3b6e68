"""
Ledgerman Protocols.

Defines interfaces for external system integration.
"""

from ledgerman.protocols.cashbook import CashbookBridge, CashbookEntry

__all__ = [
    "CashbookBridge",
    "CashbookEntry",
]
