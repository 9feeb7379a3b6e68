"""
Low stock alerts — threshold checks against Product.low_stock_threshold.

Usage:
    from ledgerman.services.alerts import low_stock_products

    for product in low_stock_products():
        notify(product)
"""

import logging

from ledgerman.models.product import Product

logger = logging.getLogger('ledgerman')


def is_below_threshold(balance: int, threshold: int) -> bool:
    """A threshold of 0 disables the alert."""
    return threshold > 0 and balance <= threshold


def check_low_stock(product_id, balance: int, threshold: int) -> bool:
    """
    Log and report whether a balance sits at or below its threshold.

    Returns:
        True if the alert is triggered.
    """
    if not is_below_threshold(balance, threshold):
        return False

    logger.warning(
        "stock.alert.triggered",
        extra={
            "product_id": product_id,
            "on_hand": balance,
            "threshold": threshold,
        },
    )
    return True


def low_stock_products():
    """Products at or below their threshold, emptiest first."""
    return Product.objects.low_stock().order_by('on_hand', 'id')
