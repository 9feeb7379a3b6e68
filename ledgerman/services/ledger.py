"""
Movement ledger — append-only storage of StockMovement rows.
"""

from decimal import Decimal

from django.db import DatabaseError

from ledgerman.conf import ledgerman_settings
from ledgerman.exceptions import NotFoundError, PersistenceError, ValidationError
from ledgerman.models.enums import MovementType
from ledgerman.models.movement import StockMovement
from ledgerman.models.product import Product


class MovementLedger:
    """Append and page through movements. Never mutates an existing row."""

    def append(self, *, product_id, movement_type: MovementType, quantity: int,
               previous_quantity: int, new_quantity: int,
               cost_per_unit: Decimal | None = None, reason: str = '',
               notes: str = '', reference_no: str = '',
               skip_cashbook: bool = False, created_by: str = '') -> StockMovement:
        """
        Persist a new movement and return the stored row (id and
        created_at assigned).

        Raises:
            PersistenceError('LEDGER_WRITE_FAILED'): Storage failure. The
                caller must treat the whole operation as failed.
        """
        try:
            return StockMovement.objects.create(
                product_id=product_id,
                movement_type=movement_type,
                quantity=quantity,
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                cost_per_unit=cost_per_unit,
                reason=reason or '',
                notes=notes or '',
                reference_no=reference_no or '',
                skip_cashbook=skip_cashbook,
                created_by=created_by or '',
            )
        except DatabaseError as exc:
            raise PersistenceError('LEDGER_WRITE_FAILED', product_id=product_id) from exc

    def list_by_product(self, product_id, limit: int | None = None,
                        offset: int = 0) -> list[StockMovement]:
        """
        One page of a product's movements, newest first.

        Ties on created_at are broken by id so consecutive pages never
        repeat or skip a row.

        Raises:
            ValidationError('INVALID_PAGE'): limit outside 1..MAX_PAGE_SIZE
                or negative offset
            NotFoundError: Unknown product_id
        """
        if limit is None:
            limit = ledgerman_settings.DEFAULT_PAGE_SIZE
        max_size = ledgerman_settings.MAX_PAGE_SIZE
        if not 1 <= limit <= max_size or offset < 0:
            raise ValidationError(
                'INVALID_PAGE', limit=limit, offset=offset, max_limit=max_size,
            )

        self._require_product(product_id)
        qs = StockMovement.objects.for_product(product_id).newest_first()
        return list(qs[offset:offset + limit])

    def count_by_product(self, product_id) -> int:
        self._require_product(product_id)
        return StockMovement.objects.for_product(product_id).count()

    def chain(self, product_id) -> list[StockMovement]:
        """All movements of a product in the order they were applied."""
        return list(StockMovement.objects.for_product(product_id).causal())

    def _require_product(self, product_id) -> None:
        if not Product.objects.filter(pk=product_id).exists():
            raise NotFoundError('PRODUCT_NOT_FOUND', product_id=product_id)
