"""
Ledgerman Models.

- Product: on-hand balance cache and cost metadata
- StockMovement: immutable ledger of balance changes
"""

from ledgerman.models.enums import MovementType
from ledgerman.models.movement import StockMovement
from ledgerman.models.product import Product

__all__ = [
    'MovementType',
    'Product',
    'StockMovement',
]
