"""
Ledgerman Cashbook Adapter — loads the configured CashbookBridge.

Usage:
    from ledgerman.adapters import get_cashbook_bridge

    bridge = get_cashbook_bridge()
    bridge.record(movement)

Settings:
    LEDGERMAN = {
        "CASHBOOK_BRIDGE": "cashbook.adapters.LedgermanCashbookBridge",
        "CASHBOOK_CURRENCY": "CNY",
        "FX_RATE_KRW": "180",
    }

If CASHBOOK_BRIDGE is not configured, NoopCashbookBridge is used.
"""

from __future__ import annotations

import logging
import threading
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Callable

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from ledgerman.adapters.noop import NoopCashbookBridge
from ledgerman.conf import ledgerman_settings
from ledgerman.models.enums import MovementType
from ledgerman.protocols.cashbook import CashbookBridge, CashbookEntry

if TYPE_CHECKING:
    from ledgerman.models.movement import StockMovement

logger = logging.getLogger(__name__)


# Cached bridge instance
_lock = threading.Lock()
_cashbook_bridge: CashbookBridge | None = None


def get_cashbook_bridge() -> CashbookBridge:
    """
    Return the configured cashbook bridge.

    Raises:
        ImproperlyConfigured: If CASHBOOK_BRIDGE cannot be imported
    """
    global _cashbook_bridge

    if _cashbook_bridge is None:
        with _lock:
            if _cashbook_bridge is None:  # double-checked
                bridge_path = ledgerman_settings.CASHBOOK_BRIDGE

                if not bridge_path:
                    _cashbook_bridge = NoopCashbookBridge()
                    return _cashbook_bridge

                try:
                    bridge_class = import_string(bridge_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import cashbook bridge '{bridge_path}': {e}"
                    ) from e
                _cashbook_bridge = bridge_class()
                logger.debug("Loaded cashbook bridge: %s", bridge_path)

    return _cashbook_bridge


def reset_cashbook_bridge() -> None:
    """Reset the cached bridge. Useful for testing."""
    global _cashbook_bridge
    _cashbook_bridge = None


def build_cashbook_entry(movement: StockMovement, currency: str | None = None,
                         fx_rate: Decimal | None = None) -> CashbookEntry | None:
    """
    Translate a movement into a cashbook line.

    - INBOUND: purchase expense, -(quantity × unit cost)
    - ADJUSTMENT: flat entry under the adjustment reason, valued at
      applied delta × unit cost (loss negative, recovery positive)

    Returns:
        CashbookEntry, or None when there is nothing to book (sales,
        zero amounts).
    """
    movement_type = MovementType(movement.movement_type)
    if not movement_type.feeds_cashbook:
        return None

    currency = currency or ledgerman_settings.CASHBOOK_CURRENCY
    if fx_rate is None:
        fx_rate = Decimal(str(ledgerman_settings.FX_RATE_KRW))
    unit_cost = movement.cost_per_unit or Decimal('0')
    label = movement.product.name or movement.product_id

    if movement_type == MovementType.INBOUND:
        amount = -(abs(movement.quantity) * unit_cost)
        category = 'inbound'
        description = f"입고: {label} {movement.quantity}개"
    else:
        applied = movement.applied_delta
        amount = applied * unit_cost
        category = movement.reason or 'adjustment'
        description = f"재고 조정: {label} {applied:+d}개"
        if movement.reason:
            description += f" ({movement.reason})"

    if amount == 0:
        return None

    return CashbookEntry(
        type=movement_type.value,
        amount=amount,
        currency=currency,
        fx_rate=fx_rate,
        amount_krw=(amount * fx_rate).quantize(Decimal('1'), rounding=ROUND_HALF_UP),
        ref_id=movement.pk,
        ref_no=movement.reference_no,
        category=category,
        description=description,
        note=movement.notes,
        created_by=movement.created_by,
    )


class CallbackCashbookBridge:
    """
    Bridge that hands each built CashbookEntry to a callable.

    Host projects wire this to their cashbook model:

        bridge = CallbackCashbookBridge(
            lambda entry: Cashbook.objects.create(**asdict(entry))
        )
        ReconciliationEngine(cashbook=bridge)
    """

    def __init__(self, callback: Callable[[CashbookEntry], object]):
        self._callback = callback

    def record(self, movement: StockMovement) -> None:
        entry = build_cashbook_entry(movement)
        if entry is None:
            logger.debug("cashbook.skip: movement %s has no amount", movement.pk)
            return
        self._callback(entry)
