"""
Product store — point-in-time reads and conditional writes of on_hand.

set_on_hand() is an optimistic concurrency token: the write only lands if
the stored balance still equals the balance the caller read.
"""

from dataclasses import dataclass
from decimal import Decimal

from django.db import DatabaseError
from django.utils import timezone

from ledgerman.exceptions import ConflictError, NotFoundError, PersistenceError
from ledgerman.models.product import Product


@dataclass(frozen=True)
class ProductSnapshot:
    """Balance and cost metadata as read at one instant."""

    product_id: str
    on_hand: int
    low_stock_threshold: int
    unit_cost: Decimal
    name: str = ''


class ProductStore:
    """Storage of Product.on_hand. Used only by ReconciliationEngine for writes."""

    def get(self, product_id) -> ProductSnapshot:
        """
        Read the current balance and cost metadata.

        Raises:
            NotFoundError: Unknown product_id
            PersistenceError: Storage failure
        """
        try:
            row = Product.objects.filter(pk=product_id).values(
                'id', 'name', 'on_hand', 'low_stock_threshold', 'cost_cny',
            ).first()
        except DatabaseError as exc:
            raise PersistenceError('READ_FAILED', product_id=product_id) from exc

        if row is None:
            raise NotFoundError('PRODUCT_NOT_FOUND', product_id=product_id)

        return ProductSnapshot(
            product_id=row['id'],
            on_hand=row['on_hand'],
            low_stock_threshold=row['low_stock_threshold'],
            unit_cost=row['cost_cny'],
            name=row['name'],
        )

    def get_on_hand(self, product_id) -> int:
        return self.get(product_id).on_hand

    def exists(self, product_id) -> bool:
        try:
            return Product.objects.filter(pk=product_id).exists()
        except DatabaseError as exc:
            raise PersistenceError('READ_FAILED', product_id=product_id) from exc

    def set_on_hand(self, product_id, expected_previous: int, new_value: int) -> None:
        """
        Conditional write: on_hand = new_value WHERE on_hand = expected_previous.

        Raises:
            ConflictError: Stored balance no longer equals expected_previous
            NotFoundError: Unknown product_id
            PersistenceError: Storage failure
        """
        if new_value < 0:
            raise ValueError(f"on_hand cannot be negative: {new_value}")

        try:
            updated = Product.objects.filter(
                pk=product_id,
                on_hand=expected_previous,
            ).update(on_hand=new_value, updated_at=timezone.now())
        except DatabaseError as exc:
            raise PersistenceError('BALANCE_WRITE_FAILED', product_id=product_id) from exc

        if updated == 0:
            if not self.exists(product_id):
                raise NotFoundError('PRODUCT_NOT_FOUND', product_id=product_id)
            raise ConflictError(
                'CONCURRENT_MODIFICATION',
                product_id=product_id,
                expected=expected_previous,
            )
