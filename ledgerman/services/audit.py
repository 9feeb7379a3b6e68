"""
Ledger audit — verify that a product's movements and on_hand agree.

Read-only. A mismatch is reported and logged, never repaired here: on_hand
only changes through ReconciliationEngine, so a correction is a new
ADJUSTMENT movement.

Checks, in causal (id) order:
- BALANCE_MISMATCH: new_quantity != max(0, previous_quantity + quantity)
- CHAIN_BREAK: previous_quantity != new_quantity of the movement before it
- SIGN_MISMATCH: inbound with delta <= 0, sale with delta >= 0
- CACHE_DRIFT: Product.on_hand != new_quantity of the latest movement
"""

import logging
from dataclasses import dataclass, field

from ledgerman.models.enums import MovementType
from ledgerman.models.product import Product
from ledgerman.services.ledger import MovementLedger
from ledgerman.services.store import ProductStore

logger = logging.getLogger('ledgerman')


@dataclass(frozen=True)
class LedgerIssue:
    code: str
    movement_id: int | None
    expected: int
    actual: int

    def __str__(self) -> str:
        where = f"movement {self.movement_id}" if self.movement_id else "on_hand"
        return f"{self.code} at {where}: expected {self.expected}, got {self.actual}"


@dataclass
class AuditReport:
    product_id: str
    on_hand: int
    movement_count: int = 0
    ledger_balance: int | None = None
    issues: list[LedgerIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


def audit_product(product_id, store: ProductStore | None = None,
                  ledger: MovementLedger | None = None) -> AuditReport:
    """
    Audit one product's movement chain.

    Raises:
        NotFoundError: Unknown product_id
    """
    store = store or ProductStore()
    ledger = ledger or MovementLedger()

    snapshot = store.get(product_id)
    report = AuditReport(product_id=snapshot.product_id, on_hand=snapshot.on_hand)

    previous = None
    for movement in ledger.chain(snapshot.product_id):
        report.movement_count += 1

        expected_after = max(0, movement.previous_quantity + movement.quantity)
        if movement.new_quantity != expected_after:
            report.issues.append(LedgerIssue(
                'BALANCE_MISMATCH', movement.pk, expected_after, movement.new_quantity,
            ))

        if previous is not None and movement.previous_quantity != previous.new_quantity:
            report.issues.append(LedgerIssue(
                'CHAIN_BREAK', movement.pk, previous.new_quantity, movement.previous_quantity,
            ))

        if (
            (movement.movement_type == MovementType.INBOUND and movement.quantity <= 0)
            or (movement.movement_type == MovementType.SALE and movement.quantity >= 0)
        ):
            report.issues.append(LedgerIssue(
                'SIGN_MISMATCH', movement.pk, 0, movement.quantity,
            ))

        previous = movement

    if previous is not None:
        report.ledger_balance = previous.new_quantity
        if previous.new_quantity != snapshot.on_hand:
            report.issues.append(LedgerIssue(
                'CACHE_DRIFT', None, previous.new_quantity, snapshot.on_hand,
            ))

    if report.issues:
        logger.warning(
            "stock.audit.mismatch",
            extra={
                "product_id": report.product_id,
                "issues": [str(issue) for issue in report.issues],
            },
        )

    return report


def audit_all(store: ProductStore | None = None,
              ledger: MovementLedger | None = None):
    """Yield an AuditReport per product, in id order."""
    for product_id in list(Product.objects.order_by('id').values_list('id', flat=True)):
        yield audit_product(product_id, store=store, ledger=ledger)
