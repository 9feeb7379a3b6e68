"""
Enums for Ledgerman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class MovementType(models.TextChoices):
    """
    Closed set of movement kinds.

    INBOUND:    Goods received. Delta is always positive.
    SALE:       Goods consumed by an order. Delta is always negative and
                can never take the balance below zero.
    ADJUSTMENT: Manual correction (loss, damage, recount, recovery).
                Any non-zero delta; a loss larger than the balance is
                clamped to zero.
    """
    INBOUND = 'inbound', _('입고')
    SALE = 'sale', _('판매')
    ADJUSTMENT = 'adjustment', _('조정')

    @classmethod
    def parse(cls, value) -> 'MovementType':
        """
        Coerce user input to a MovementType.

        Raises:
            ValueError: If value is not one of the known types
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid movement type: {value!r}")
        return cls(value.strip().lower())

    @property
    def feeds_cashbook(self) -> bool:
        """Inbound costs and adjustments may produce a financial entry."""
        return self in (MovementType.INBOUND, MovementType.ADJUSTMENT)
