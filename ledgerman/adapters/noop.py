"""
Noop Cashbook Bridge — default when no cashbook is configured.

Usage in settings.py:
    LEDGERMAN = {
        "CASHBOOK_BRIDGE": "ledgerman.adapters.noop.NoopCashbookBridge",
    }

Leaving CASHBOOK_BRIDGE empty selects this adapter as well.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgerman.models.movement import StockMovement

logger = logging.getLogger(__name__)


class NoopCashbookBridge:
    """Accepts every movement and records nothing."""

    def record(self, movement: StockMovement) -> None:
        logger.debug("cashbook.noop: movement %s not recorded", movement.pk)
