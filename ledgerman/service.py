"""
Stock Service — The single public interface for all stock ledger operations.

Usage:
    from ledgerman import stock, StockError

    stock.receive('P1', 20, unit_cost=Decimal('5'), actor=user_id)
    stock.sell('P1', 15)
    stock.adjust('P1', -8, reason='손실', skip_cashbook=True)
    stock.on_hand('P1')  # 7, starting from 10
"""

from ledgerman.services.alerts import low_stock_products
from ledgerman.services.audit import AuditReport, audit_all, audit_product
from ledgerman.services.engine import ApplyResult, ReconciliationEngine
from ledgerman.services.ledger import MovementLedger
from ledgerman.services.store import ProductStore


class Stock:
    """
    Single interface for all stock ledger operations.

    Parameter convention: (product_id, quantity, ...)
    Quantities passed to receive() and sell() are positive counts; the
    signed delta is derived from the movement type. adjust() and apply()
    take the signed delta directly.
    """

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def on_hand(cls, product_id) -> int:
        """Current on-hand quantity. Raises NotFoundError."""
        return ProductStore().get_on_hand(product_id)

    @classmethod
    def history(cls, product_id, limit: int | None = None, offset: int = 0):
        """Movements of a product, newest first, one page at a time."""
        return MovementLedger().list_by_product(product_id, limit=limit, offset=offset)

    @classmethod
    def low_stock(cls):
        """Products at or below their low stock threshold."""
        return low_stock_products()

    @classmethod
    def audit(cls, product_id=None) -> AuditReport | list[AuditReport]:
        """Audit one product, or every product when product_id is None."""
        if product_id is None:
            return list(audit_all())
        return audit_product(product_id)

    # ══════════════════════════════════════════════════════════════
    # MOVEMENTS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def apply(cls, product_id, movement_type, quantity_delta: int, **kwargs) -> ApplyResult:
        """See ReconciliationEngine.apply()."""
        return ReconciliationEngine().apply(product_id, movement_type, quantity_delta, **kwargs)

    @classmethod
    def receive(cls, product_id, quantity: int, unit_cost=None,
                reference_no: str = '', note: str = '', actor: str = '',
                skip_cashbook: bool = False) -> ApplyResult:
        """Inbound receipt of `quantity` units."""
        return cls.apply(
            product_id, 'inbound', quantity,
            unit_cost=unit_cost, reference_no=reference_no, note=note,
            actor=actor, skip_cashbook=skip_cashbook,
        )

    @classmethod
    def sell(cls, product_id, quantity: int, reference_no: str = '',
             note: str = '', actor: str = '') -> ApplyResult:
        """Consume `quantity` units for a sale. Raises InsufficientStockError."""
        return cls.apply(
            product_id, 'sale', -quantity,
            reference_no=reference_no, note=note, actor=actor,
        )

    @classmethod
    def adjust(cls, product_id, delta: int, reason: str = '', note: str = '',
               actor: str = '', skip_cashbook: bool = False) -> ApplyResult:
        """Manual correction. A loss larger than on_hand clamps to zero."""
        return cls.apply(
            product_id, 'adjustment', delta,
            reason=reason, note=note, actor=actor, skip_cashbook=skip_cashbook,
        )
