"""
Tests for the Stock facade.
"""

from decimal import Decimal

import pytest

from ledgerman import stock, StockError
from ledgerman.exceptions import InsufficientStockError


pytestmark = pytest.mark.django_db


class TestStockFacade:

    def test_receive_sell_adjust(self, product):
        stock.receive('P1', 20, unit_cost=Decimal('5'), reference_no='PO-9')
        stock.sell('P1', 15)
        result = stock.adjust('P1', -8, reason='손실', skip_cashbook=True)

        assert result.movement.new_quantity == 7
        assert stock.on_hand('P1') == 7

    def test_sell_takes_positive_count(self, product):
        result = stock.sell('P1', 4)

        assert result.movement.quantity == -4

    def test_sell_too_much(self, product):
        with pytest.raises(InsufficientStockError):
            stock.sell('P1', 11)

    def test_errors_share_a_base(self, db):
        with pytest.raises(StockError):
            stock.on_hand('missing')

    def test_history(self, product):
        stock.receive('P1', 1)
        stock.receive('P1', 2)

        assert [m.quantity for m in stock.history('P1')] == [2, 1]

    def test_low_stock(self, product, watched_product):
        stock.sell('P3', 4)

        assert [p.pk for p in stock.low_stock()] == ['P3']

    def test_audit(self, product, empty_product):
        stock.receive('P1', 3)

        assert stock.audit('P1').ok
        assert len(stock.audit()) == 2
