"""
Reconciliation engine — the single writer of Product.on_hand.

Every balance change is paired with exactly one StockMovement. The pair is
written inside one transaction and guarded by an optimistic concurrency
token (the balance that was read), so two staff adjusting the same product
at once can never lose an update.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from django.db import transaction
from django.utils.translation import gettext as _

from ledgerman.adapters.cashbook import get_cashbook_bridge
from ledgerman.conf import ledgerman_settings
from ledgerman.exceptions import (
    CashbookBridgeError,
    ConcurrencyExhaustedError,
    ConflictError,
    InsufficientStockError,
    StockError,
    ValidationError,
)
from ledgerman.models.enums import MovementType
from ledgerman.models.movement import StockMovement
from ledgerman.protocols.cashbook import CashbookBridge
from ledgerman.services.alerts import check_low_stock
from ledgerman.services.ledger import MovementLedger
from ledgerman.services.store import ProductStore

logger = logging.getLogger('ledgerman')

# Upper bound of the integer columns holding quantities and balances.
MAX_QUANTITY = 2_147_483_647


@dataclass(frozen=True)
class StockWarning:
    """Non-fatal notice attached to a successful movement."""

    kind: str  # "clamped" | "cashbook" | "low_stock"
    message: str
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(cls, error: StockError) -> 'StockWarning':
        return cls(kind=error.kind, message=str(error.message), data=dict(error.data))

    def as_dict(self) -> dict[str, Any]:
        return {'kind': self.kind, 'message': self.message}


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of ReconciliationEngine.apply()."""

    movement: StockMovement
    requested_delta: int
    warnings: tuple[StockWarning, ...] = ()
    attempts: int = 1

    @property
    def applied_delta(self) -> int:
        return self.movement.applied_delta

    @property
    def clamped(self) -> bool:
        return self.applied_delta != self.requested_delta

    def has_warning(self, kind: str) -> bool:
        return any(w.kind == kind for w in self.warnings)

    def as_dict(self) -> dict[str, Any]:
        """API response body."""
        data = {
            'movement_id': self.movement.pk,
            'product_id': self.movement.product_id,
            'balance_before': self.movement.previous_quantity,
            'balance_after': self.movement.new_quantity,
            'created_at': self.movement.created_at.isoformat(),
        }
        if self.warnings:
            data['warnings'] = [w.as_dict() for w in self.warnings]
        return data


def _parse_delta(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError('INVALID_QUANTITY', quantity=value)
    if value == 0:
        raise ValidationError('ZERO_QUANTITY', quantity=value)
    if abs(value) > MAX_QUANTITY:
        raise ValidationError('INVALID_QUANTITY', quantity=value, max=MAX_QUANTITY)
    return value


def _parse_unit_cost(value) -> Decimal | None:
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValidationError('INVALID_UNIT_COST', unit_cost=value)
    try:
        cost = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError('INVALID_UNIT_COST', unit_cost=value) from None
    if not cost.is_finite() or cost < 0:
        raise ValidationError('INVALID_UNIT_COST', unit_cost=value)
    return cost


def _validate_sign(movement_type: MovementType, delta: int) -> None:
    if movement_type == MovementType.INBOUND and delta <= 0:
        raise ValidationError('INVALID_QUANTITY', type=movement_type.value, quantity=delta)
    if movement_type == MovementType.SALE and delta >= 0:
        raise ValidationError('INVALID_QUANTITY', type=movement_type.value, quantity=delta)


class ReconciliationEngine:
    """
    The only entry point permitted to change on_hand.

    Usage:
        engine = ReconciliationEngine()
        result = engine.apply('P1', 'inbound', 20, unit_cost=Decimal('5'))
        result.movement.new_quantity

    Concurrency:
        - Reads the balance outside the write transaction
        - Conditional write (WHERE on_hand = balance read) + ledger append
          run under one transaction.atomic()
        - ConflictError → re-read and retry, up to MAX_APPLY_ATTEMPTS
    """

    def __init__(self, store: ProductStore | None = None,
                 ledger: MovementLedger | None = None,
                 cashbook: CashbookBridge | None = None,
                 max_attempts: int | None = None):
        self.store = store or ProductStore()
        self.ledger = ledger or MovementLedger()
        self._cashbook = cashbook
        if max_attempts is None:
            max_attempts = ledgerman_settings.MAX_APPLY_ATTEMPTS
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts

    @property
    def cashbook(self) -> CashbookBridge:
        return self._cashbook or get_cashbook_bridge()

    def apply(self, product_id, movement_type, quantity_delta: int, *,
              unit_cost=None, note: str = '', reason: str = '',
              skip_cashbook: bool = False, actor: str = '',
              reference_no: str = '') -> ApplyResult:
        """
        Change on_hand by quantity_delta and record the movement.

        Args:
            product_id: Product identifier
            movement_type: MovementType or its value ('inbound', 'sale',
                'adjustment')
            quantity_delta: Signed, non-zero. Positive for inbound/recovery,
                negative for sale/loss.
            unit_cost: Cost annotation. Defaults to the product's cost.
            note, reason, reference_no: Free text
            skip_cashbook: Never create a financial entry for this movement
            actor: Opaque id of the staff member

        Returns:
            ApplyResult with the persisted movement and any warnings

        Raises:
            ValidationError: Unknown type, zero/non-integer/out-of-range delta,
                wrong sign
            NotFoundError: Unknown product
            InsufficientStockError: Sale larger than on_hand
            ConcurrencyExhaustedError: Lost every optimistic attempt
            PersistenceError: Storage failure; nothing was written

        Transactions:
            The cashbook bridge runs once apply()'s own atomic block exits.
            That is a commit only when apply() is not nested in a caller's
            transaction (ATOMIC_REQUESTS or an outer atomic()). Nested
            callers that later roll back must compensate the cashbook entry
            themselves.
        """
        try:
            movement_type = MovementType.parse(movement_type)
        except ValueError:
            raise ValidationError('INVALID_TYPE', type=movement_type) from None
        quantity_delta = _parse_delta(quantity_delta)
        unit_cost = _parse_unit_cost(unit_cost)
        _validate_sign(movement_type, quantity_delta)

        for attempt in range(1, self.max_attempts + 1):
            snapshot = self.store.get(product_id)
            balance_before = snapshot.on_hand

            if movement_type == MovementType.SALE and -quantity_delta > balance_before:
                raise InsufficientStockError(
                    'INSUFFICIENT_STOCK',
                    product_id=snapshot.product_id,
                    available=balance_before,
                    requested=-quantity_delta,
                )

            balance_after = max(0, balance_before + quantity_delta)
            if balance_after > MAX_QUANTITY:
                raise ValidationError(
                    'INVALID_QUANTITY',
                    product_id=snapshot.product_id,
                    quantity=quantity_delta,
                    on_hand=balance_before,
                    max=MAX_QUANTITY,
                )

            try:
                with transaction.atomic():
                    self.store.set_on_hand(snapshot.product_id, balance_before, balance_after)
                    movement = self.ledger.append(
                        product_id=snapshot.product_id,
                        movement_type=movement_type,
                        quantity=quantity_delta,
                        previous_quantity=balance_before,
                        new_quantity=balance_after,
                        cost_per_unit=unit_cost if unit_cost is not None else snapshot.unit_cost,
                        reason=reason,
                        notes=note,
                        reference_no=reference_no,
                        skip_cashbook=skip_cashbook,
                        created_by=actor,
                    )
            except ConflictError:
                logger.info(
                    "stock.apply.conflict",
                    extra={
                        "product_id": snapshot.product_id,
                        "expected": balance_before,
                        "attempt": attempt,
                    },
                )
                continue
            break
        else:
            logger.warning(
                "stock.apply.exhausted",
                extra={"product_id": product_id, "attempts": self.max_attempts},
            )
            raise ConcurrencyExhaustedError(
                'CONCURRENCY_EXHAUSTED',
                product_id=product_id,
                attempts=self.max_attempts,
            )

        logger.info(
            "stock.apply",
            extra={
                "product_id": movement.product_id,
                "movement_id": movement.pk,
                "type": movement_type.value,
                "delta": quantity_delta,
                "before": balance_before,
                "after": balance_after,
                "actor": actor,
            },
        )

        warnings = []
        if movement.was_clamped:
            logger.warning(
                "stock.apply.clamped",
                extra={
                    "product_id": movement.product_id,
                    "movement_id": movement.pk,
                    "requested": quantity_delta,
                    "applied": movement.applied_delta,
                },
            )
            warnings.append(StockWarning(
                kind='clamped',
                message=_(
                    '요청한 수량 %(requested)d 대신 %(applied)d만 반영되었습니다 '
                    '(재고는 0 미만이 될 수 없습니다)'
                ) % {'requested': quantity_delta, 'applied': movement.applied_delta},
                data={'requested': quantity_delta, 'applied': movement.applied_delta},
            ))

        if not skip_cashbook and movement_type.feeds_cashbook:
            warning = self._record_cashbook(movement)
            if warning is not None:
                warnings.append(warning)

        if check_low_stock(movement.product_id, balance_after, snapshot.low_stock_threshold):
            warnings.append(StockWarning(
                kind='low_stock',
                message=_('재고가 부족합니다 (현재 %(on_hand)d, 기준 %(threshold)d)') % {
                    'on_hand': balance_after,
                    'threshold': snapshot.low_stock_threshold,
                },
                data={'on_hand': balance_after, 'threshold': snapshot.low_stock_threshold},
            ))

        return ApplyResult(
            movement=movement,
            requested_delta=quantity_delta,
            warnings=tuple(warnings),
            attempts=attempt,
        )

    def _record_cashbook(self, movement: StockMovement) -> StockWarning | None:
        """Best effort. The inventory pair is already written when this runs."""
        try:
            self.cashbook.record(movement)
        except Exception as exc:
            error = CashbookBridgeError(
                'CASHBOOK_FAILED',
                movement_id=movement.pk,
                detail=str(exc),
            )
            logger.warning(
                "stock.cashbook.failed",
                extra={
                    "movement_id": movement.pk,
                    "product_id": movement.product_id,
                    "error": str(exc),
                },
                exc_info=True,
            )
            return StockWarning.from_error(error)
        return None
