"""
Tests for the cashbook adapters.
"""

from decimal import Decimal

import pytest
from django.core.exceptions import ImproperlyConfigured

from ledgerman.adapters import (
    CallbackCashbookBridge,
    NoopCashbookBridge,
    build_cashbook_entry,
    get_cashbook_bridge,
)
from ledgerman.models import Product
from ledgerman.protocols import CashbookBridge
from ledgerman.services.engine import ReconciliationEngine


pytestmark = pytest.mark.django_db


class TestBuildCashbookEntry:
    """Tests for build_cashbook_entry()."""

    def test_inbound_is_an_expense(self, product):
        movement = ReconciliationEngine().apply(
            'P1', 'inbound', 20, unit_cost=Decimal('5'), reference_no='PO-1', actor='7',
        ).movement

        entry = build_cashbook_entry(movement)

        assert entry.type == 'inbound'
        assert entry.amount == Decimal('-100')
        assert entry.currency == 'CNY'
        assert entry.fx_rate == Decimal('180')
        assert entry.amount_krw == Decimal('-18000')
        assert entry.ref_type == 'inventory_movement'
        assert entry.ref_id == movement.pk
        assert entry.ref_no == 'PO-1'
        assert entry.created_by == '7'
        assert '20개' in entry.description

    def test_adjustment_uses_applied_delta(self, db):
        Product.objects.create(id='P1', name='케이스', on_hand=3, cost_cny=Decimal('2.50'))
        movement = ReconciliationEngine().apply('P1', 'adjustment', -8, reason='손실').movement

        entry = build_cashbook_entry(movement)

        assert entry.type == 'adjustment'
        assert entry.amount == Decimal('-7.50')
        assert entry.category == '손실'
        assert entry.amount_krw == Decimal('-1350')

    def test_sale_has_no_entry(self, product):
        movement = ReconciliationEngine().apply('P1', 'sale', -1).movement

        assert build_cashbook_entry(movement) is None

    def test_zero_cost_has_no_entry(self, empty_product):
        movement = ReconciliationEngine().apply('P2', 'inbound', 5).movement

        assert build_cashbook_entry(movement) is None

    def test_fx_rate_from_settings(self, product, settings):
        settings.LEDGERMAN = {'FX_RATE_KRW': '190.5'}
        movement = ReconciliationEngine().apply('P1', 'inbound', 2).movement

        entry = build_cashbook_entry(movement)

        assert entry.amount_krw == Decimal('-1905')


class TestBridges:
    """Tests for bridge loading and the callback bridge."""

    def test_default_is_noop(self):
        bridge = get_cashbook_bridge()

        assert isinstance(bridge, NoopCashbookBridge)
        assert isinstance(bridge, CashbookBridge)

    def test_bad_path(self, settings):
        settings.LEDGERMAN = {'CASHBOOK_BRIDGE': 'ledgerman.nowhere.Bridge'}

        with pytest.raises(ImproperlyConfigured):
            get_cashbook_bridge()

    def test_callback_receives_entry(self, product):
        entries = []
        bridge = CallbackCashbookBridge(entries.append)

        ReconciliationEngine(cashbook=bridge).apply('P1', 'inbound', 4)

        assert len(entries) == 1
        assert entries[0].amount == Decimal('-20.00')

    def test_callback_skips_zero_amount(self, empty_product):
        entries = []
        bridge = CallbackCashbookBridge(entries.append)

        result = ReconciliationEngine(cashbook=bridge).apply('P2', 'inbound', 4)

        assert entries == []
        assert not result.has_warning('cashbook')
