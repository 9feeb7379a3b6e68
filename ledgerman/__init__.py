"""
Django Ledgerman — Stock Ledger and Reconciliation Engine.

Single writer for product on-hand quantities. Every balance change is
paired with exactly one immutable StockMovement.

Usage:
    from ledgerman import stock, StockError

    stock.receive('P1', 20, unit_cost=Decimal('5'))
    stock.sell('P1', 15)
    stock.adjust('P1', -3, reason='파손')
    stock.on_hand('P1')  # 12
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'stock':
        from ledgerman.service import Stock
        return Stock
    elif name == 'StockError':
        from ledgerman.exceptions import StockError
        return StockError
    elif name == 'Product':
        from ledgerman.models.product import Product
        return Product
    elif name == 'StockMovement':
        from ledgerman.models.movement import StockMovement
        return StockMovement
    elif name == 'MovementType':
        from ledgerman.models.enums import MovementType
        return MovementType
    elif name == 'ReconciliationEngine':
        from ledgerman.services.engine import ReconciliationEngine
        return ReconciliationEngine
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'stock',
    'StockError',
    'Product',
    'StockMovement',
    'MovementType',
    'ReconciliationEngine',
]

__version__ = '0.1.0'
