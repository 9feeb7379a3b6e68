"""
Tests for the ledger audit and the audit_stock_ledger command.
"""

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from ledgerman.exceptions import NotFoundError
from ledgerman.models import MovementType, Product, StockMovement
from ledgerman.services.audit import audit_all, audit_product
from ledgerman.services.engine import ReconciliationEngine


pytestmark = pytest.mark.django_db


@pytest.fixture
def consistent(product):
    engine = ReconciliationEngine()
    engine.apply('P1', 'inbound', 20)
    engine.apply('P1', 'sale', -15)
    engine.apply('P1', 'adjustment', -30)
    return product


class TestAuditProduct:
    """Tests for audit_product()."""

    def test_clean_ledger(self, consistent):
        report = audit_product('P1')

        assert report.ok
        assert report.movement_count == 3
        assert report.ledger_balance == 0
        assert report.on_hand == 0

    def test_product_without_movements(self, product):
        report = audit_product('P1')

        assert report.ok
        assert report.ledger_balance is None

    def test_direct_write_is_cache_drift(self, consistent):
        # A write that bypassed the engine
        Product.objects.filter(pk='P1').update(on_hand=4)

        report = audit_product('P1')

        assert not report.ok
        assert [issue.code for issue in report.issues] == ['CACHE_DRIFT']
        assert report.issues[0].expected == 0
        assert report.issues[0].actual == 4

    def test_chain_break(self, consistent):
        StockMovement.objects.create(
            product_id='P1',
            movement_type=MovementType.ADJUSTMENT,
            quantity=1,
            previous_quantity=7,
            new_quantity=8,
        )

        codes = [issue.code for issue in audit_product('P1').issues]

        assert 'CHAIN_BREAK' in codes
        assert 'CACHE_DRIFT' in codes

    def test_sign_mismatch(self, product):
        StockMovement.objects.create(
            product_id='P1',
            movement_type=MovementType.SALE,
            quantity=2,
            previous_quantity=8,
            new_quantity=10,
        )

        codes = [issue.code for issue in audit_product('P1').issues]

        assert codes == ['SIGN_MISMATCH']

    def test_unknown_product(self, db):
        with pytest.raises(NotFoundError):
            audit_product('missing')

    def test_audit_all(self, consistent, empty_product):
        reports = list(audit_all())

        assert [r.product_id for r in reports] == ['P1', 'P2']
        assert all(r.ok for r in reports)


class TestAuditCommand:
    """Tests for manage.py audit_stock_ledger."""

    def test_all_consistent(self, consistent):
        out = StringIO()

        call_command('audit_stock_ledger', stdout=out)

        assert '1개 상품 검증 완료' in out.getvalue()

    def test_single_product(self, consistent, empty_product):
        out = StringIO()

        call_command('audit_stock_ledger', product='P2', stdout=out)

        assert '1개 상품 검증 완료' in out.getvalue()

    def test_mismatch_fails(self, consistent):
        Product.objects.filter(pk='P1').update(on_hand=4)
        out = StringIO()

        with pytest.raises(CommandError):
            call_command('audit_stock_ledger', stdout=out)

        assert 'CACHE_DRIFT' in out.getvalue()

    def test_unknown_product(self, db):
        with pytest.raises(CommandError):
            call_command('audit_stock_ledger', product='missing')
