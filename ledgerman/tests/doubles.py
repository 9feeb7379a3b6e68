"""
Test doubles for Ledgerman collaborators.
"""

from ledgerman.exceptions import ConflictError, PersistenceError
from ledgerman.services.ledger import MovementLedger
from ledgerman.services.store import ProductStore


class RecordingCashbookBridge:
    """Cashbook double that keeps every movement it was asked to record."""

    def __init__(self):
        self.recorded = []

    def record(self, movement):
        self.recorded.append(movement)


class FailingCashbookBridge:
    """Cashbook double that is always unavailable."""

    def record(self, movement):
        raise ConnectionError('cashbook offline')


class InterleavingStore(ProductStore):
    """
    Runs `competitor` right after the first balance read, so a competing
    movement commits between this caller's read and its conditional write.
    """

    def __init__(self, competitor):
        self._competitor = competitor
        self.reads = 0

    def get(self, product_id):
        snapshot = super().get(product_id)
        self.reads += 1
        if self._competitor is not None:
            competitor, self._competitor = self._competitor, None
            competitor()
        return snapshot


class AlwaysConflictingStore(ProductStore):
    """Every conditional write loses the race."""

    def __init__(self):
        self.writes = 0

    def set_on_hand(self, product_id, expected_previous, new_value):
        self.writes += 1
        raise ConflictError('CONCURRENT_MODIFICATION', product_id=product_id)


class BrokenLedger(MovementLedger):
    """Ledger whose storage is down."""

    def append(self, **kwargs):
        raise PersistenceError('LEDGER_WRITE_FAILED', product_id=kwargs['product_id'])
