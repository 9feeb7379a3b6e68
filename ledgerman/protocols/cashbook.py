"""
Cashbook Bridge Protocol — Interface to the financial ledger.

Ledgerman defines this protocol; the host project's cashbook implements it.
Only inbound and adjustment movements with ``skip_cashbook == False`` are
ever sent.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ledgerman.models.movement import StockMovement


@dataclass(frozen=True)
class CashbookEntry:
    """One financial ledger line derived from a stock movement."""

    type: str  # "inbound" | "adjustment"
    amount: Decimal  # Signed, in `currency`. Expenses are negative.
    currency: str
    fx_rate: Decimal  # KRW per unit of `currency`
    amount_krw: Decimal
    ref_id: int
    ref_type: str = "inventory_movement"
    ref_no: str = ""
    category: str = ""
    description: str = ""
    note: str = ""
    created_by: str = ""


@runtime_checkable
class CashbookBridge(Protocol):
    """
    Protocol for recording movements in the cashbook.

    record() must raise on failure. Ledgerman logs the failure and reports
    it to the caller as a warning; the stock change is kept.
    """

    def record(self, movement: StockMovement) -> None:
        """
        Create the financial entry for a movement.

        Args:
            movement: Persisted StockMovement with skip_cashbook == False
        """
        ...
