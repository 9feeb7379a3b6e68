"""
Pytest fixtures for Ledgerman tests.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from ledgerman.adapters import reset_cashbook_bridge
from ledgerman.models import Product
from ledgerman.tests.doubles import FailingCashbookBridge, RecordingCashbookBridge


User = get_user_model()


@pytest.fixture(autouse=True)
def _reset_cashbook():
    """Drop the cached bridge so settings overrides take effect."""
    reset_cashbook_bridge()
    yield
    reset_cashbook_bridge()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='staff',
        password='testpass123'
    )


@pytest.fixture
def product(db):
    """P1 with 10 units on hand (scenario 1 starting point)."""
    return Product.objects.create(
        id='P1',
        name='스마트폰 케이스',
        on_hand=10,
        low_stock_threshold=0,
        cost_cny=Decimal('5.00'),
    )


@pytest.fixture
def empty_product(db):
    """Product with nothing on hand and no cost."""
    return Product.objects.create(
        id='P2',
        name='充电线',
        on_hand=0,
    )


@pytest.fixture
def watched_product(db):
    """Product with a low stock threshold of 5."""
    return Product.objects.create(
        id='P3',
        name='보조배터리',
        on_hand=8,
        low_stock_threshold=5,
        cost_cny=Decimal('20.00'),
    )


@pytest.fixture
def recording_cashbook():
    return RecordingCashbookBridge()


@pytest.fixture
def failing_cashbook():
    return FailingCashbookBridge()
