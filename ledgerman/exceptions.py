"""
Exceptions for Ledgerman.

Every error is a StockError subclass carrying a structured code for
programmatic handling and a ``kind`` discriminator for API responses.

    StockError
    +-- ValidationError              kind='validation'
    +-- NotFoundError                kind='not_found'
    +-- InsufficientStockError       kind='insufficient_stock'
    +-- ConflictError                kind='conflict'               (retryable)
    +-- ConcurrencyExhaustedError    kind='concurrency_exhausted'  (retryable)
    +-- PersistenceError             kind='persistence'
    +-- CashbookBridgeError          kind='cashbook'
"""

from decimal import Decimal
from typing import Any

from django.utils.translation import gettext_lazy as _


class StockError(Exception):
    """
    Structured exception for stock ledger operations.

    Usage:
        try:
            stock.sell('P1', 10)
        except InsufficientStockError as e:
            print(f"재고 {e.available}개만 남아 있습니다")
        except StockError as e:
            return JsonResponse(e.as_dict(), status=400)

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable (localizable) message
        data: Additional context data
    """

    kind = 'error'
    retryable = False

    _default_messages: dict[str, Any] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(str(self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, data={self.data!r})"

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'kind': self.kind,
            'code': self.code,
            'message': str(self.message),
            'retryable': self.retryable,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            },
        }


class ValidationError(StockError):
    """Malformed or policy-violating request. Never retried."""

    kind = 'validation'
    _default_messages = {
        'INVALID_TYPE': _('알 수 없는 재고 이동 유형입니다'),
        'INVALID_QUANTITY': _('수량이 올바르지 않습니다'),
        'ZERO_QUANTITY': _('수량은 0일 수 없습니다'),
        'INVALID_UNIT_COST': _('단가가 올바르지 않습니다'),
        'INVALID_PAGE': _('페이지 범위가 올바르지 않습니다'),
        'INVALID_PAYLOAD': _('요청 형식이 올바르지 않습니다'),
    }


class NotFoundError(StockError):
    """Unknown product id."""

    kind = 'not_found'
    _default_messages = {
        'PRODUCT_NOT_FOUND': _('상품을 찾을 수 없습니다'),
    }

    @property
    def product_id(self) -> str | None:
        return self.data.get('product_id')


class InsufficientStockError(StockError):
    """Sale would drive the balance negative. Never clamped."""

    kind = 'insufficient_stock'
    _default_messages = {
        'INSUFFICIENT_STOCK': _('재고가 부족합니다'),
    }


class ConflictError(StockError):
    """The balance changed between read and conditional write."""

    kind = 'conflict'
    retryable = True
    _default_messages = {
        'CONCURRENT_MODIFICATION': _('동시 수정이 감지되었습니다'),
    }


class ConcurrencyExhaustedError(StockError):
    """Conflicts persisted through every attempt. Safe to try again later."""

    kind = 'concurrency_exhausted'
    retryable = True
    _default_messages = {
        'CONCURRENCY_EXHAUSTED': _('다른 작업과 충돌했습니다. 다시 시도해 주세요'),
    }


class PersistenceError(StockError):
    """Storage failure. The movement did not complete."""

    kind = 'persistence'
    _default_messages = {
        'BALANCE_WRITE_FAILED': _('재고 저장에 실패했습니다'),
        'LEDGER_WRITE_FAILED': _('재고 이동 기록 저장에 실패했습니다'),
        'READ_FAILED': _('재고 조회에 실패했습니다'),
    }


class CashbookBridgeError(StockError):
    """
    Financial entry was not recorded.

    Non-fatal: the inventory mutation already committed. Reported to the
    caller as a warning, never raised out of ReconciliationEngine.apply().
    """

    kind = 'cashbook'
    _default_messages = {
        'CASHBOOK_FAILED': _('출납장부 기록에 실패했습니다'),
    }
