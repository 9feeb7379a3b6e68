"""
Stock services — the components behind the Stock facade.

    from ledgerman.services import ReconciliationEngine, MovementLedger, ProductStore
"""

from ledgerman.services.audit import AuditReport, audit_all, audit_product
from ledgerman.services.engine import ApplyResult, ReconciliationEngine, StockWarning
from ledgerman.services.ledger import MovementLedger
from ledgerman.services.store import ProductSnapshot, ProductStore

__all__ = [
    'ApplyResult',
    'AuditReport',
    'MovementLedger',
    'ProductSnapshot',
    'ProductStore',
    'ReconciliationEngine',
    'StockWarning',
    'audit_all',
    'audit_product',
]
