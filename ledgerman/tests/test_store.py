"""
Tests for ProductStore.
"""

from decimal import Decimal

import pytest

from ledgerman.exceptions import ConflictError, NotFoundError
from ledgerman.models import Product
from ledgerman.services.audit import audit_product
from ledgerman.services.engine import ReconciliationEngine
from ledgerman.services.store import ProductStore


pytestmark = pytest.mark.django_db


class TestGet:
    """Tests for ProductStore.get() / get_on_hand()."""

    def test_get_on_hand(self, product):
        assert ProductStore().get_on_hand('P1') == 10

    def test_snapshot_carries_cost_metadata(self, watched_product):
        snapshot = ProductStore().get('P3')

        assert snapshot.product_id == 'P3'
        assert snapshot.on_hand == 8
        assert snapshot.low_stock_threshold == 5
        assert snapshot.unit_cost == Decimal('20.00')
        assert snapshot.name == '보조배터리'

    def test_unknown_product(self, db):
        with pytest.raises(NotFoundError) as exc:
            ProductStore().get_on_hand('missing')

        assert exc.value.code == 'PRODUCT_NOT_FOUND'
        assert exc.value.as_dict()['kind'] == 'not_found'


class TestSetOnHand:
    """Tests for the conditional write."""

    def test_write_when_expected_matches(self, product):
        ProductStore().set_on_hand('P1', 10, 25)

        assert Product.objects.get(pk='P1').on_hand == 25

    def test_conflict_when_balance_moved(self, product):
        with pytest.raises(ConflictError) as exc:
            ProductStore().set_on_hand('P1', 9, 25)

        assert exc.value.retryable
        assert exc.value.data['expected'] == 9
        assert Product.objects.get(pk='P1').on_hand == 10

    def test_unknown_product(self, db):
        with pytest.raises(NotFoundError):
            ProductStore().set_on_hand('missing', 0, 1)

    def test_negative_value_refused(self, product):
        with pytest.raises(ValueError):
            ProductStore().set_on_hand('P1', 10, -1)

    def test_touches_updated_at(self, product):
        before = Product.objects.get(pk='P1').updated_at

        ProductStore().set_on_hand('P1', 10, 11)

        assert Product.objects.get(pk='P1').updated_at >= before


class TestProductSave:
    """Product.save() never writes on_hand on update."""

    def test_stale_instance_keeps_engine_balance(self, product):
        stale = Product.objects.get(pk='P1')
        ReconciliationEngine().apply('P1', 'inbound', 20)

        stale.low_stock_threshold = 3
        stale.save()

        fresh = Product.objects.get(pk='P1')
        assert fresh.on_hand == 30
        assert fresh.low_stock_threshold == 3
        assert audit_product('P1').ok

    def test_explicit_on_hand_update_is_ignored(self, product):
        product.on_hand = 999
        product.name = '새 이름'
        product.save(update_fields=['on_hand', 'name'])

        fresh = Product.objects.get(pk='P1')
        assert fresh.on_hand == 10
        assert fresh.name == '새 이름'

    def test_insert_sets_initial_balance(self, db):
        Product.objects.create(id='P7', on_hand=4)

        assert ProductStore().get_on_hand('P7') == 4
